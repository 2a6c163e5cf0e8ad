"""
Strava integration module.

Usage:
    from app.features.strava import StravaOAuth, StravaClient, StravaSession
    from app.features.strava import ChallengeVerifier

Components:
- StravaOAuth: OAuth flow (auth URL, consume-once code exchange, refresh)
- StravaClient: API client (athlete, activities, activities in a date range)
- StravaSession: Caller-owned token holder with refresh-on-401
- ChallengeVerifier: Challenge completion from Strava activities

Tokens are not stored server-side; callers keep them and pass them in.
"""

from .exceptions import (
    StravaError,
    StravaAPIError,
    StravaAuthError,
    StravaConnectionError,
    StravaRateLimitError,
    StravaUnauthorizedError,
)
from .schemas import Athlete, ExternalActivity, TokenSet
from .oauth import StravaOAuth
from .client import StravaClient
from .session import ConnectionState, StravaSession
from .verification import (
    CATEGORY_MEASUREMENTS,
    ChallengeVerifier,
    MeasurementKind,
    Timeframe,
    VerificationResult,
    accumulate,
    resolve_measurement,
    window_start,
)

__all__ = [
    # Errors
    "StravaError",
    "StravaAPIError",
    "StravaAuthError",
    "StravaConnectionError",
    "StravaRateLimitError",
    "StravaUnauthorizedError",
    # Schemas
    "Athlete",
    "ExternalActivity",
    "TokenSet",
    # OAuth / API
    "StravaOAuth",
    "StravaClient",
    "ConnectionState",
    "StravaSession",
    # Verification
    "CATEGORY_MEASUREMENTS",
    "ChallengeVerifier",
    "MeasurementKind",
    "Timeframe",
    "VerificationResult",
    "accumulate",
    "resolve_measurement",
    "window_start",
]

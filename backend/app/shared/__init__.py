"""
Shared utilities (NOT business logic).

Usage:
    from app.shared import BaseRepository, NotFoundError
    from app.shared.constants import ChallengeCategory
"""
from .constants import (
    ActivityCategory,
    ChallengeCategory,
    StravaActivityType,
    CARDIO_ACTIVITY_TYPES,
    DEFAULT_COSMETIC,
    is_cardio_activity,
)
from .exceptions import (
    ToughTurtleError,
    ValidationError,
    NotFoundError,
    ConflictError,
    UnauthorizedError,
    AuthError,
    UpstreamError,
    UnexpectedError,
)
from .repository import BaseRepository

__all__ = [
    # Constants
    "ActivityCategory",
    "ChallengeCategory",
    "StravaActivityType",
    "CARDIO_ACTIVITY_TYPES",
    "DEFAULT_COSMETIC",
    "is_cardio_activity",
    # Exceptions
    "ToughTurtleError",
    "ValidationError",
    "NotFoundError",
    "ConflictError",
    "UnauthorizedError",
    "AuthError",
    "UpstreamError",
    "UnexpectedError",
    # Repository
    "BaseRepository",
]

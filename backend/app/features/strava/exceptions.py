"""
Strava errors.

Each one specialises an application error so the API layer maps it
to the right status code:

- StravaUnauthorizedError (401): token rejected, one refresh + retry allowed
- StravaAuthError (401): exchange/refresh failed or 401 after refresh; reconnect
- StravaAPIError (502): any other non-2xx
- StravaRateLimitError (502): 429 from Strava
- StravaConnectionError (500): network failure or timeout
"""

from app.shared.exceptions import (
    AuthError,
    UnauthorizedError,
    UnexpectedError,
    UpstreamError,
)


class StravaError(Exception):
    """Marker base for all Strava errors."""
    pass


class StravaUnauthorizedError(StravaError, UnauthorizedError):
    """Access token invalid or expired (HTTP 401)."""

    def __init__(self, message: str = "Invalid or expired token"):
        super().__init__(message)


class StravaAuthError(StravaError, AuthError):
    """Authorization failed for good; the user has to reconnect Strava."""
    pass


class StravaAPIError(StravaError, UpstreamError):
    """Strava API error."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message, context={"upstream_status": status_code} if status_code else None)
        self.upstream_status = status_code


class StravaRateLimitError(StravaAPIError):
    """Rate limit exceeded."""

    def __init__(self, message: str = "Strava rate limit exceeded"):
        super().__init__(message, status_code=429)


class StravaConnectionError(StravaError, UnexpectedError):
    """Network failure or timeout talking to Strava."""
    pass

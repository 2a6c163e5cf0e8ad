"""
Application exception hierarchy.

Every domain error carries an HTTP status code so the API layer can map it
to a response without knowing where it came from.

Hierarchy:
- ToughTurtleError (500)
  - ValidationError (400): missing/invalid field, rejected, never retried
  - NotFoundError (404): referenced user/challenge/activity does not exist
  - ConflictError (409): optimistic update lost every compare-and-set attempt
  - UnauthorizedError (401): external token invalid or expired
    - AuthError (401): terminal, user has to reconnect
  - UpstreamError (502): external provider answered non-2xx (not 401)
  - UnexpectedError (500): anything else, e.g. network failure

Example:
    raise NotFoundError("challenge", challenge_id)
"""

from typing import Any, Dict, Optional


class ToughTurtleError(Exception):
    """Base exception for all application errors."""

    status_code: int = 500

    def __init__(
        self,
        message: str,
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.message = message
        self.context = context or {}

    def to_dict(self) -> Dict[str, Any]:
        """Serialize exception for API responses."""
        body = {
            "error": self.__class__.__name__,
            "message": self.message,
        }
        if self.context:
            body["context"] = self.context
        return body


# ==========================================
# Request errors
# ==========================================

class ValidationError(ToughTurtleError):
    """Raised when a required field is missing or has an invalid value."""

    status_code = 400

    def __init__(self, message: str, field: Optional[str] = None, value: Any = None):
        self.field = field
        self.value = value
        context = {"field": field} if field else None
        super().__init__(message, context=context)


class NotFoundError(ToughTurtleError):
    """Raised when a referenced record does not exist."""

    status_code = 404

    def __init__(self, resource: str, identifier: Any):
        self.resource = resource
        self.identifier = identifier
        super().__init__(
            f"{resource.capitalize()} not found: {identifier}",
            context={"resource": resource, "id": str(identifier)},
        )


class ConflictError(ToughTurtleError):
    """Raised when a concurrent writer kept winning the version race."""

    status_code = 409


# ==========================================
# External provider errors
# ==========================================

class UnauthorizedError(ToughTurtleError):
    """External token is invalid or expired; a refresh may fix it."""

    status_code = 401


class AuthError(UnauthorizedError):
    """Authorization failed for good; the user must reconnect."""


class UpstreamError(ToughTurtleError):
    """External provider returned an error response."""

    status_code = 502


class UnexpectedError(ToughTurtleError):
    """Any other failure (network, timeouts, ...)."""

    status_code = 500

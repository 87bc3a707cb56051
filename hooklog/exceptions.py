"""
Domain errors raised by the service layer.

Services raise these, never HTTPException. create_app() registers a single
handler that renders them as {"error": message, "code": code}.
"""
from typing import Optional


class HookLogError(Exception):
    """Base class for all domain errors."""

    code: str = "error"
    status_code: int = 400
    default_message: str = "Request failed"

    def __init__(self, message: Optional[str] = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(HookLogError):
    code = "validation_error"
    status_code = 400
    default_message = "Invalid request"


class InvalidStatusTransitionError(ValidationError):
    code = "invalid_transition"
    status_code = 409
    default_message = "Status transition not allowed"


class AuthenticationError(HookLogError):
    code = "unauthenticated"
    status_code = 401
    default_message = "Not authenticated"


class NotAuthorizedError(HookLogError):
    code = "forbidden"
    status_code = 403
    default_message = "Not authorized"


class NotFoundError(HookLogError):
    code = "not_found"
    status_code = 404
    default_message = "Not found"


class ConflictError(HookLogError):
    code = "conflict"
    status_code = 409
    default_message = "Conflict"

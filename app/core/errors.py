"""Application error taxonomy.

Every deliberate failure is an AppError carrying an HTTP status, a stable
machine-readable code and a human message. The API boundary
(app.api.errors) turns these into the JSON error envelope.
"""

from typing import Any


class AppError(Exception):
    """Base class for errors that are safe to show to the client."""

    status_code: int = 500
    code: str = "INTERNAL_ERROR"

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        code: str | None = None,
        details: Any = None,
    ) -> None:
        self.message = message
        if status_code is not None:
            self.status_code = status_code
        if code is not None:
            self.code = code
        self.details = details
        super().__init__(message)


class ValidationError(AppError):
    status_code = 400
    code = "VALIDATION_ERROR"


class AuthenticationError(AppError):
    status_code = 401
    code = "AUTHENTICATION_ERROR"

    def __init__(self, message: str = "Authentication required", **kwargs: Any) -> None:
        super().__init__(message, **kwargs)


class AuthorizationError(AppError):
    status_code = 403
    code = "AUTHORIZATION_ERROR"

    def __init__(self, message: str = "Access denied", **kwargs: Any) -> None:
        super().__init__(message, **kwargs)


class NotFoundError(AppError):
    status_code = 404
    code = "NOT_FOUND"

    def __init__(self, resource: str = "Resource", **kwargs: Any) -> None:
        super().__init__(f"{resource} not found", **kwargs)


class ConflictError(AppError):
    status_code = 409
    code = "CONFLICT_ERROR"


class RateLimitError(AppError):
    status_code = 429
    code = "RATE_LIMIT_ERROR"

    def __init__(self, message: str = "Too many requests, please try again later", **kwargs: Any) -> None:
        super().__init__(message, **kwargs)


class InternalError(AppError):
    status_code = 500
    code = "INTERNAL_ERROR"

    def __init__(self, message: str = "An unexpected error occurred", **kwargs: Any) -> None:
        super().__init__(message, **kwargs)

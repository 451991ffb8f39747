# feria/core/errors.py
"""
Application error taxonomy.

Every class is an ``HTTPException`` so services keep raising errors the same
way FastAPI code usually does; the handler registered in ``feria.main``
renders them as::

    {"error": "<code or message>", "message": "<optional detail>"}
"""

from fastapi import HTTPException, status


class AppError(HTTPException):
    """Base class: carries a machine-readable `error` and optional `message`."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(
        self,
        error: str,
        message: str | None = None,
        headers: dict[str, str] | None = None,
    ):
        super().__init__(
            status_code=type(self).status_code,
            detail=message or error,
            headers=headers,
        )
        self.error = error
        self.message = message

    def to_body(self) -> dict[str, str]:
        body = {"error": self.error}
        if self.message:
            body["message"] = self.message
        return body


class ValidationError(AppError):
    """Missing or malformed input."""

    status_code = status.HTTP_400_BAD_REQUEST


class ConflictError(AppError):
    """Duplicate name/email or an already existing one-per-company resource."""

    status_code = status.HTTP_400_BAD_REQUEST


class AuthenticationError(AppError):
    """Missing, invalid or expired session token."""

    status_code = status.HTTP_401_UNAUTHORIZED

    def __init__(self, error: str, message: str | None = None):
        super().__init__(error, message, headers={"WWW-Authenticate": "Bearer"})


class AuthorizationError(AppError):
    """Role or ownership denial."""

    status_code = status.HTTP_403_FORBIDDEN


class NotFoundError(AppError):
    status_code = status.HTTP_404_NOT_FOUND


class InternalError(AppError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

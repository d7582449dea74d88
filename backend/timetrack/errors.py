from collections.abc import Iterable
from typing import Any

from fastapi import status


class AppError(Exception):
    code: str = "APP_ERROR"
    message: str = "Application error"
    status_code: int = status.HTTP_400_BAD_REQUEST
    details: Any | None = None

    def __init__(
        self,
        message: str | None = None,
        *,
        code: str | None = None,
        details: Any | None = None,
    ):
        if message is not None:
            self.message = message
        if code is not None:
            self.code = code
        if details is not None:
            self.details = details

        super().__init__(self.message)


class ValidationError(AppError):
    code = "VALIDATION_ERROR"
    message = "Validation error"


class AuthError(AppError):
    code = "AUTH_REQUIRED"
    message = "Authentication required"
    status_code = status.HTTP_401_UNAUTHORIZED


class PermissionError(AppError):  # type: ignore[override]
    """403 raised for every authorization denial; ``code`` carries the denial code."""

    code = "PERMISSION_DENIED"
    message = "Insufficient permissions"
    status_code = status.HTTP_403_FORBIDDEN

    def __init__(
        self,
        message: str | None = None,
        *,
        code: str | None = None,
        required_permissions: Iterable[str] = (),
        details: Any | None = None,
    ):
        required = list(required_permissions)
        if required:
            details = {**(details or {}), "required_permissions": required}
        super().__init__(message, code=code, details=details)


class ImpersonationError(PermissionError):
    code = "IMPERSONATION_NOT_ALLOWED"
    message = "Role testing is not allowed"


class InternalError(AppError):
    code = "INTERNAL_ERROR"
    message = "Internal server error"
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR


ERROR_CODE_BY_STATUS: dict[int, str] = {
    status.HTTP_400_BAD_REQUEST: ValidationError.code,
    status.HTTP_401_UNAUTHORIZED: AuthError.code,
    status.HTTP_403_FORBIDDEN: PermissionError.code,
    status.HTTP_404_NOT_FOUND: "NOT_FOUND",
    status.HTTP_422_UNPROCESSABLE_ENTITY: ValidationError.code,
}


def error_payload(
    code: str,
    message: str,
    details: Any | None = None,
) -> dict[str, Any]:
    return {"error": {"code": code, "message": message, "details": details}}


def resolve_error_code(status_code: int) -> str:
    if status_code >= status.HTTP_500_INTERNAL_SERVER_ERROR:
        return InternalError.code
    return ERROR_CODE_BY_STATUS.get(status_code, "REQUEST_FAILED")

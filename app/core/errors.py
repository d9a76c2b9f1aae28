# app/core/errors.py
from typing import Any, Dict, Optional

from fastapi import status

from app.core.error_messages import ErrorMessages


class UserApiError(Exception):
    """Base error for the users API; rendered as ``{"message": ...}``."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = ErrorMessages.INTERNAL_SERVER_ERROR

    def __init__(
        self,
        message: Optional[str] = None,
        *,
        status_code: Optional[int] = None,
        extra: Optional[Dict[str, Any]] = None,
    ):
        self.message = message or self.default_message
        if status_code is not None:
            self.status_code = status_code
        self.extra = extra or {}
        super().__init__(self.message)

    def to_body(self) -> Dict[str, Any]:
        return {**self.extra, "message": self.message}


class Unauthenticated(UserApiError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = ErrorMessages.NOT_AUTHENTICATED


class Forbidden(UserApiError):
    status_code = status.HTTP_403_FORBIDDEN
    default_message = ErrorMessages.FORBIDDEN


class InvalidArgument(UserApiError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = ErrorMessages.MALFORMED_USER_ID


class UserNotFound(UserApiError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = ErrorMessages.USER_NOT_FOUND


class Conflict(UserApiError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = ErrorMessages.EMAIL_EXISTS


class InternalError(UserApiError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = ErrorMessages.UNEXPECTED_ERROR

# app/core/error_messages.py


class ErrorMessages:
    """Centralized user-facing messages."""

    NOT_AUTHENTICATED = "Not authenticated"
    INVALID_TOKEN = "Invalid token"
    FORBIDDEN = "You are not allowed to perform this action"

    MALFORMED_USER_ID = "Malformed user id"
    USER_NOT_FOUND = "User not found"
    USER_NOT_FOUND_BY_ID = "User not found!"
    EMAIL_EXISTS = "Email already exists"
    DUPLICATED_EMAIL = "Duplicated Email, there is already an existing Email"
    PROTECTED_FIELD = "Field cannot be updated: {field}"

    NO_AVATAR_FILE = "Exactly one avatarFile is required"
    AVATAR_TOO_LARGE = "File too large"
    AVATAR_BAD_TYPE = "Unsupported avatar media type"

    INTERNAL_SERVER_ERROR = "Internal server error"
    UNEXPECTED_ERROR = "An unexpected error occurred"


class SuccessMessages:
    LOGOUT = "successfully logout"
    USER_DELETED = "User successfully deleted!"
    USER_UPDATED = "User successfully updated"
    USER_CREATED = "User successfully created"

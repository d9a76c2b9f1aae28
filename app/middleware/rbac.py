# app/middleware/rbac.py
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Dict, FrozenSet, Optional

import jwt
from fastapi import Depends
from fastapi.security import OAuth2PasswordBearer

from app.core.error_messages import ErrorMessages
from app.core.errors import Forbidden, Unauthenticated
from app.schemas.user import Role
from app.utils.auth_utils import decode_token

logger = logging.getLogger(__name__)

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="login", auto_error=False)


@dataclass(frozen=True)
class CurrentUser:
    id: str
    role: str


class Operation(str, Enum):
    LIST_USERS = "list_users"
    GET_ME = "get_me"
    DELETE_USER = "delete_user"
    UPDATE_PROFILE = "update_profile"
    CREATE_USER = "create_user"
    UPDATE_USER = "update_user"
    UPLOAD_AVATAR = "upload_avatar"
    GET_USER = "get_user"


class AuthorizationResult(str, Enum):
    OK = "ok"
    FORBIDDEN = "forbidden"
    UNAUTHENTICATED = "unauthenticated"


_ADMIN = frozenset({Role.ADMIN.value})
_ANY_ROLE = frozenset({Role.ADMIN.value, Role.USER.value})

# delete_user is open to plain users for any id, not only their own.
ROLE_POLICY: Dict[Operation, FrozenSet[str]] = {
    Operation.LIST_USERS: _ADMIN,
    Operation.GET_ME: _ANY_ROLE,
    Operation.DELETE_USER: _ANY_ROLE,
    Operation.UPDATE_PROFILE: _ANY_ROLE,
    Operation.CREATE_USER: _ADMIN,
    Operation.UPDATE_USER: _ADMIN,
    Operation.UPLOAD_AVATAR: _ANY_ROLE,
    Operation.GET_USER: _ADMIN,
}


def get_current_user(token: Optional[str] = Depends(oauth2_scheme)) -> CurrentUser:
    if not token:
        raise Unauthenticated(ErrorMessages.NOT_AUTHENTICATED)
    try:
        payload = decode_token(token)
    except jwt.PyJWTError as e:
        logger.info("Rejected bearer token: %s", e.__class__.__name__)
        raise Unauthenticated(ErrorMessages.INVALID_TOKEN)

    user_id = payload.get("_id")
    role = payload.get("role")
    if not isinstance(user_id, str) or not isinstance(role, str):
        raise Unauthenticated(ErrorMessages.INVALID_TOKEN)
    return CurrentUser(id=user_id, role=role)


def authorize(user: Optional[CurrentUser], operation: Operation) -> AuthorizationResult:
    if user is None:
        return AuthorizationResult.UNAUTHENTICATED
    if user.role not in ROLE_POLICY[operation]:
        return AuthorizationResult.FORBIDDEN
    return AuthorizationResult.OK


def require_roles(operation: Operation):
    """Dependency factory gating a route on ``ROLE_POLICY[operation]``."""

    def dependency(user: CurrentUser = Depends(get_current_user)) -> CurrentUser:
        result = authorize(user, operation)
        if result is AuthorizationResult.UNAUTHENTICATED:
            raise Unauthenticated()
        if result is AuthorizationResult.FORBIDDEN:
            logger.info("Role %r denied for %s", user.role, operation.value)
            raise Forbidden()
        return user

    return dependency

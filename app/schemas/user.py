# app/schemas/user.py
from datetime import datetime
from enum import Enum
from typing import Any, ClassVar, FrozenSet, List, Optional

from pydantic import BaseModel, EmailStr, field_validator, model_validator

from app.core.error_messages import ErrorMessages
from app.utils.hash_utils import MAX_PASSWORD_BYTES


class Role(str, Enum):
    ADMIN = "admin"
    USER = "user"


class UserStatus(str, Enum):
    ACTIVE = "active"
    DELETED = "deleted"


def normalize_email(email: str) -> str:
    return email.strip().lower()


class UserCreate(BaseModel):
    firstname: str
    lastname: str
    email: EmailStr
    phone: Optional[str] = None
    address: Optional[str] = None
    password: str

    @field_validator("email")
    @classmethod
    def _normalize_email(cls, v: str) -> str:
        return normalize_email(v)

    @field_validator("password")
    @classmethod
    def _check_password(cls, v: str) -> str:
        if not v:
            raise ValueError("password must not be empty")
        if len(v.encode("utf-8")) > MAX_PASSWORD_BYTES:
            raise ValueError(f"password must be at most {MAX_PASSWORD_BYTES} bytes")
        return v


class ProfileUpdate(BaseModel):
    """Fields a caller may change on their own record."""

    PROTECTED_FIELDS: ClassVar[FrozenSet[str]] = frozenset(
        {"_id", "id", "password", "passwordHash", "role", "status", "version", "createdAt", "updatedAt"}
    )

    firstname: Optional[str] = None
    lastname: Optional[str] = None
    email: Optional[EmailStr] = None
    phone: Optional[str] = None
    address: Optional[str] = None

    @model_validator(mode="before")
    @classmethod
    def _reject_protected(cls, data: Any) -> Any:
        if isinstance(data, dict):
            blocked = sorted(cls.PROTECTED_FIELDS.intersection(data))
            if blocked:
                raise ValueError(ErrorMessages.PROTECTED_FIELD.format(field=", ".join(blocked)))
        return data

    @field_validator("firstname", "lastname", "email")
    @classmethod
    def _not_null(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            raise ValueError("must not be null")
        return v

    @field_validator("email")
    @classmethod
    def _normalize_email(cls, v: str) -> str:
        return normalize_email(v)

    def to_update(self) -> dict:
        return self.model_dump(exclude_unset=True, mode="json")


class AdminUserUpdate(ProfileUpdate):
    """Admin-side update; may also change avatar, role and status."""

    PROTECTED_FIELDS: ClassVar[FrozenSet[str]] = frozenset(
        {"_id", "id", "password", "passwordHash", "version", "createdAt", "updatedAt"}
    )

    avatar: Optional[str] = None
    role: Optional[Role] = None
    status: Optional[UserStatus] = None

    @field_validator("role", "status")
    @classmethod
    def _not_null_enum(cls, v):
        if v is None:
            raise ValueError("must not be null")
        return v


class UserOut(BaseModel):
    """Public representation of a user; secrets and internals are not fields."""

    id: str
    firstname: Optional[str] = None
    lastname: Optional[str] = None
    email: str
    phone: Optional[str] = None
    address: Optional[str] = None
    avatar: Optional[str] = None
    role: str
    status: str
    createdAt: Optional[datetime] = None
    updatedAt: Optional[datetime] = None

    @classmethod
    def from_document(cls, doc: dict) -> "UserOut":
        return cls.model_validate({**doc, "id": str(doc["_id"])})


class UserListOut(BaseModel):
    totalCount: int
    users: List[UserOut]
    filteredCount: int


class UserCreatedOut(BaseModel):
    user: UserOut
    message: str


class ProfileUpdatedOut(BaseModel):
    updatedUser: UserOut
    message: str


class AdminUpdatedOut(BaseModel):
    message: str
    offer: UserOut


class AvatarOut(BaseModel):
    updateAvatar: UserOut


class MessageOut(BaseModel):
    message: str

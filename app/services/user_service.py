# app/services/user_service.py
import logging
from contextlib import contextmanager
from pathlib import Path
from typing import List

from fastapi import Response, UploadFile
from fastapi.concurrency import run_in_threadpool
from pymongo.errors import PyMongoError

from app.core.config import settings
from app.core.error_messages import ErrorMessages, SuccessMessages
from app.core.errors import Conflict, InternalError, InvalidArgument
from app.middleware.rbac import CurrentUser
from app.models.user import UserRepository
from app.schemas.user import (
    AdminUpdatedOut,
    AdminUserUpdate,
    AvatarOut,
    MessageOut,
    ProfileUpdate,
    ProfileUpdatedOut,
    Role,
    UserCreate,
    UserCreatedOut,
    UserListOut,
    UserOut,
)
from app.utils.hash_utils import hash_password_async
from app.utils.upload_utils import UploadConfig, build_avatar_filename, subtype_from_content_type

logger = logging.getLogger(__name__)

SESSION_COOKIES = ("refreshToken", "isLoggedIn")


@contextmanager
def store_errors(action: str, **extra):
    """Translate driver failures into ``InternalError``."""
    try:
        yield
    except PyMongoError as e:
        logger.exception("Database error while trying to %s", action)
        raise InternalError(str(e) or ErrorMessages.UNEXPECTED_ERROR, extra=extra)


def _write_file(path: Path, data: bytes):
    path.parent.mkdir(parents=True, exist_ok=True)
    # "xb" never overwrites an existing avatar
    with open(path, "xb") as fh:
        fh.write(data)


class UserService:
    def __init__(self, repository: UserRepository, upload_config: UploadConfig, *, salt_rounds: int = settings.SALT_ROUNDS):
        self.repository = repository
        self.upload_config = upload_config
        self.salt_rounds = salt_rounds

    async def list_users(self) -> UserListOut:
        with store_errors("list users", status="error"):
            total_count = await self.repository.count_all()
            users = await self.repository.list_all()
        # No server-side filter yet, so both counts match.
        return UserListOut(
            totalCount=total_count,
            users=[UserOut.from_document(u) for u in users],
            filteredCount=len(users),
        )

    async def get_me(self, current_user: CurrentUser) -> UserOut:
        with store_errors("fetch own profile"):
            user = await self.repository.find_by_id(current_user.id)
        return UserOut.from_document(user)

    def logout(self, response: Response) -> MessageOut:
        # Stateless: the bearer token stays valid until it expires.
        for name in SESSION_COOKIES:
            response.set_cookie(name, "", max_age=1)
        return MessageOut(message=SuccessMessages.LOGOUT)

    async def delete_user(self, user_id: str) -> MessageOut:
        with store_errors("delete user"):
            await self.repository.soft_delete(user_id)
        logger.info("User %s soft-deleted", user_id)
        return MessageOut(message=SuccessMessages.USER_DELETED)

    async def update_profile(self, current_user: CurrentUser, payload: ProfileUpdate) -> ProfileUpdatedOut:
        with store_errors("update profile"):
            user = await self.repository.update_by_id(current_user.id, payload.to_update())
        return ProfileUpdatedOut(updatedUser=UserOut.from_document(user), message=SuccessMessages.USER_UPDATED)

    async def create_user(self, payload: UserCreate) -> UserCreatedOut:
        with store_errors("create user"):
            if await self.repository.find_by_email(payload.email):
                raise Conflict(ErrorMessages.EMAIL_EXISTS)

        try:
            password_hash = await hash_password_async(payload.password, self.salt_rounds)
        except Exception as e:
            logger.exception("Password hashing failed")
            raise InternalError(str(e) or ErrorMessages.UNEXPECTED_ERROR)

        fields = payload.model_dump(exclude={"password"})
        fields.update(passwordHash=password_hash, role=Role.USER.value)
        with store_errors("create user"):
            user = await self.repository.create(fields)
        logger.info("User %s created", user["_id"])
        return UserCreatedOut(user=UserOut.from_document(user), message=SuccessMessages.USER_CREATED)

    async def update_user(self, user_id: str, payload: AdminUserUpdate) -> AdminUpdatedOut:
        with store_errors("update user"):
            user = await self.repository.update_by_id(user_id, payload.to_update())
        logger.info("User %s updated by admin", user_id)
        return AdminUpdatedOut(message=SuccessMessages.USER_UPDATED, offer=UserOut.from_document(user))

    async def upload_avatar(self, current_user: CurrentUser, files: List[UploadFile]) -> AvatarOut:
        config = self.upload_config
        if len(files) != 1:
            raise InvalidArgument(ErrorMessages.NO_AVATAR_FILE)
        upload = files[0]
        if upload.size is not None and upload.size > config.max_file_size:
            raise InvalidArgument(ErrorMessages.AVATAR_TOO_LARGE)

        subtype = subtype_from_content_type(upload.content_type)
        data = await upload.read(config.max_file_size + 1)
        if len(data) > config.max_file_size:
            raise InvalidArgument(ErrorMessages.AVATAR_TOO_LARGE)

        path = config.profiles_dir / build_avatar_filename(subtype)
        try:
            await run_in_threadpool(_write_file, path, data)
        except OSError as e:
            logger.exception("Could not store avatar %s", path)
            raise InternalError(str(e) or ErrorMessages.UNEXPECTED_ERROR)

        try:
            with store_errors("set avatar"):
                user = await self.repository.set_avatar(current_user.id, config.public_uri(path))
        except Exception:
            path.unlink(missing_ok=True)
            raise
        logger.info("Avatar for user %s stored at %s", current_user.id, path)
        return AvatarOut(updateAvatar=UserOut.from_document(user))

    async def get_user(self, user_id: str) -> UserOut:
        with store_errors("fetch user"):
            user = await self.repository.find_by_id(user_id)
        return UserOut.from_document(user)

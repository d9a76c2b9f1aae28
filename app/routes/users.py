# app/routes/users.py
from typing import List

from fastapi import APIRouter, Depends, File, Response, UploadFile, status

from app.core.error_messages import ErrorMessages
from app.core.config import settings
from app.core.errors import UserNotFound
from app.database import user_collection
from app.middleware.rbac import CurrentUser, Operation, require_roles
from app.models.user import UserRepository
from app.schemas.user import (
    AdminUpdatedOut,
    AdminUserUpdate,
    AvatarOut,
    MessageOut,
    ProfileUpdate,
    ProfileUpdatedOut,
    UserCreate,
    UserCreatedOut,
    UserListOut,
    UserOut,
)
from app.services.user_service import UserService

users_router = APIRouter(prefix="/users", tags=["Users"])


def get_user_repository() -> UserRepository:
    return UserRepository(user_collection)


def get_user_service(repository: UserRepository = Depends(get_user_repository)) -> UserService:
    return UserService(repository, settings.upload_config(), salt_rounds=settings.SALT_ROUNDS)


@users_router.get("", response_model=UserListOut)
async def list_users(
    _: CurrentUser = Depends(require_roles(Operation.LIST_USERS)),
    service: UserService = Depends(get_user_service),
):
    return await service.list_users()


@users_router.get("/personal/me", response_model=UserOut)
async def get_me(
    current_user: CurrentUser = Depends(require_roles(Operation.GET_ME)),
    service: UserService = Depends(get_user_service),
):
    return await service.get_me(current_user)


@users_router.get("/logout", response_model=MessageOut)
async def logout(response: Response, service: UserService = Depends(get_user_service)):
    return service.logout(response)


@users_router.delete("/delete/{user_id}", response_model=MessageOut)
async def delete_user(
    user_id: str,
    _: CurrentUser = Depends(require_roles(Operation.DELETE_USER)),
    service: UserService = Depends(get_user_service),
):
    return await service.delete_user(user_id)


@users_router.put("/update/profile", response_model=ProfileUpdatedOut)
async def update_profile(
    payload: ProfileUpdate,
    current_user: CurrentUser = Depends(require_roles(Operation.UPDATE_PROFILE)),
    service: UserService = Depends(get_user_service),
):
    return await service.update_profile(current_user, payload)


@users_router.post("/create", response_model=UserCreatedOut)
async def create_user(
    payload: UserCreate,
    _: CurrentUser = Depends(require_roles(Operation.CREATE_USER)),
    service: UserService = Depends(get_user_service),
):
    return await service.create_user(payload)


@users_router.put("/update/user/{user_id}", response_model=AdminUpdatedOut)
async def update_user(
    user_id: str,
    payload: AdminUserUpdate,
    _: CurrentUser = Depends(require_roles(Operation.UPDATE_USER)),
    service: UserService = Depends(get_user_service),
):
    return await service.update_user(user_id, payload)


@users_router.put("/upload/avatarFile", response_model=AvatarOut)
async def upload_avatar(
    avatarFile: List[UploadFile] = File(...),
    current_user: CurrentUser = Depends(require_roles(Operation.UPLOAD_AVATAR)),
    service: UserService = Depends(get_user_service),
):
    return await service.upload_avatar(current_user, avatarFile)


@users_router.get("/getUser/{user_id}", response_model=UserOut)
async def get_user(
    user_id: str,
    _: CurrentUser = Depends(require_roles(Operation.GET_USER)),
    service: UserService = Depends(get_user_service),
):
    try:
        return await service.get_user(user_id)
    except UserNotFound as e:
        # this route reports a missing user as a bad request
        e.status_code = status.HTTP_400_BAD_REQUEST
        e.message = ErrorMessages.USER_NOT_FOUND_BY_ID
        raise

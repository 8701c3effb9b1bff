"""User profile and admin routes."""

import logging
from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends

from ..auth import get_current_principal, get_password_hash, require_api_key
from ..errors import Conflict, NotFound
from ..models import (
    AuthenticatedPrincipal,
    MessageResponse,
    UserResponse,
    UserUpdate,
)
from ..storage import UserStorage, get_user_storage

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/users", tags=["users"])
admin_router = APIRouter(
    prefix="/api/v1/admin",
    tags=["admin"],
    dependencies=[Depends(require_api_key)],
)


def update_user(user_storage: UserStorage, user_id: UUID, user_data: UserUpdate):
    """Apply a partial update to a user, re-hashing a new password."""
    user = user_storage.get_by_id(user_id)
    if not user:
        raise NotFound("User")

    changes = user_data.model_dump(exclude_unset=True, exclude_none=True)
    if "email" in changes and changes["email"] != user.email:
        if user_storage.exists(changes["email"]):
            raise Conflict("Email already exists")
    if "password" in changes:
        changes["hashed_password"] = get_password_hash(changes.pop("password"))

    if not changes:
        return user
    return user_storage.update(user_id, **changes)


def delete_user(user_storage: UserStorage, user_id: UUID):
    if not user_storage.delete(user_id):
        raise NotFound("User")
    logger.info(f"Deleted user {user_id} and their birthdays")


@router.get("/me", response_model=UserResponse)
def get_current_user(
    principal: AuthenticatedPrincipal = Depends(get_current_principal),
    user_storage: UserStorage = Depends(get_user_storage),
):
    """Get the authenticated user's profile."""
    user = user_storage.get_by_id(principal.user_id)
    if not user:
        raise NotFound("User")
    return UserResponse.from_user(user)


@router.put("/me", response_model=UserResponse)
def update_current_user(
    user_data: UserUpdate,
    principal: AuthenticatedPrincipal = Depends(get_current_principal),
    user_storage: UserStorage = Depends(get_user_storage),
):
    """Update the authenticated user's profile."""
    user = update_user(user_storage, principal.user_id, user_data)
    return UserResponse.from_user(user)


@router.delete("/me", response_model=MessageResponse)
def delete_current_user(
    principal: AuthenticatedPrincipal = Depends(get_current_principal),
    user_storage: UserStorage = Depends(get_user_storage),
):
    """Delete the authenticated user's account."""
    delete_user(user_storage, principal.user_id)
    return MessageResponse(message="User account deleted successfully")


@admin_router.get("/users", response_model=List[UserResponse])
def list_users(user_storage: UserStorage = Depends(get_user_storage)):
    """List all users."""
    return [UserResponse.from_user(u) for u in user_storage.get_all()]


@admin_router.get("/users/{user_id}", response_model=UserResponse)
def get_user(user_id: UUID, user_storage: UserStorage = Depends(get_user_storage)):
    """Get any user."""
    user = user_storage.get_by_id(user_id)
    if not user:
        raise NotFound("User")
    return UserResponse.from_user(user)


@admin_router.put("/users/{user_id}", response_model=UserResponse)
def admin_update_user(
    user_id: UUID,
    user_data: UserUpdate,
    user_storage: UserStorage = Depends(get_user_storage),
):
    """Update any user."""
    user = update_user(user_storage, user_id, user_data)
    return UserResponse.from_user(user)


@admin_router.delete("/users/{user_id}", response_model=MessageResponse)
def admin_delete_user(
    user_id: UUID, user_storage: UserStorage = Depends(get_user_storage)
):
    """Delete any user."""
    delete_user(user_storage, user_id)
    return MessageResponse(message="User deleted successfully")

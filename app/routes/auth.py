"""Authentication routes."""

import logging

from fastapi import APIRouter, Depends, status

from ..auth import (
    TokenManager,
    authenticate_user,
    get_password_hash,
    get_token_manager,
)
from ..errors import Unauthenticated
from ..models import LoginRequest, LoginResponse, UserCreate, UserResponse
from ..storage import UserStorage, get_user_storage

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1", tags=["auth"])


@router.post(
    "/register", response_model=UserResponse, status_code=status.HTTP_201_CREATED
)
def register(
    user_data: UserCreate, user_storage: UserStorage = Depends(get_user_storage)
):
    """Register a new user account."""
    user = user_storage.create(
        name=user_data.name,
        email=user_data.email,
        hashed_password=get_password_hash(user_data.password),
    )
    logger.info(f"Registered user {user.id}")
    return UserResponse.from_user(user)


@router.post("/login", response_model=LoginResponse)
def login(
    credentials: LoginRequest,
    user_storage: UserStorage = Depends(get_user_storage),
    tokens: TokenManager = Depends(get_token_manager),
):
    """Login and get an access token."""
    user = authenticate_user(user_storage, credentials.email, credentials.password)
    if not user:
        logger.info("Failed login attempt")
        raise Unauthenticated("Invalid email or password")

    token = tokens.issue(user.id, user.email)
    return LoginResponse(token=token, user=UserResponse.from_user(user))

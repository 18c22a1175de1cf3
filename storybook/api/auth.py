"""
Authentication API router
"""

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from storybook.core.database import get_db
from storybook.core.errors import Unauthenticated, ValidationFailure
from storybook.core.security import (
    create_access_token,
    create_refresh_token,
    get_current_user,
    verify_token,
)
from storybook.models.user import User
from storybook.schemas.auth import RefreshTokenRequest, Token, UserCreate, UserLogin, UserResponse
from storybook.services.user_service import (
    authenticate,
    create_user,
    get_user_by_email,
    get_user_by_id,
    get_user_by_username,
)

router = APIRouter()


def _token_pair(user_id: str) -> dict:
    return {
        "access_token": create_access_token(data={"sub": user_id}),
        "refresh_token": create_refresh_token(data={"sub": user_id}),
        "token_type": "bearer",
    }


@router.post("/register", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
async def register(user_data: UserCreate, db: AsyncSession = Depends(get_db)):
    """Sign up"""
    if await get_user_by_email(db, user_data.email):
        raise ValidationFailure("Email is already registered")
    if await get_user_by_username(db, user_data.username):
        raise ValidationFailure("Username is already taken")

    return await create_user(
        db=db,
        email=user_data.email,
        username=user_data.username,
        password=user_data.password,
    )


@router.post("/login", response_model=Token)
async def login(user_data: UserLogin, db: AsyncSession = Depends(get_db)):
    """Log in with email and password"""
    user = await authenticate(db, user_data.email, user_data.password)
    if user is None:
        raise Unauthenticated("Incorrect email or password")
    if not user.is_active:
        raise Unauthenticated("Account is disabled")
    return _token_pair(str(user.id))


@router.post("/refresh", response_model=Token)
async def refresh_token(token_data: RefreshTokenRequest, db: AsyncSession = Depends(get_db)):
    """Exchange a refresh token for a new pair"""
    payload = verify_token(token_data.refresh_token, "refresh")
    if payload is None or payload.get("sub") is None:
        raise Unauthenticated("Invalid refresh token")

    user = await get_user_by_id(db, payload["sub"])
    if user is None or not user.is_active:
        raise Unauthenticated("Invalid refresh token")
    return _token_pair(str(user.id))


@router.get("/me", response_model=UserResponse)
async def get_current_user_info(current_user: User = Depends(get_current_user)):
    return current_user

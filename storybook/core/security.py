"""
Security helpers: password hashing, JWT tokens and caller resolution
"""

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional
import uuid

from jose import JWTError, jwt
from passlib.context import CryptContext
from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.ext.asyncio import AsyncSession

from storybook.core.config import settings
from storybook.core.database import get_db
from storybook.core.errors import Unauthenticated
from storybook.models.user import User


pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

# auto_error=False: a missing header yields an anonymous caller, not a 403
security = HTTPBearer(auto_error=False)


@dataclass(frozen=True)
class CallerContext:
    """Identity of whoever issued the current request.

    Passed explicitly into every service operation. ``user_id`` is None for
    anonymous requests.
    """
    user_id: Optional[uuid.UUID] = None

    @property
    def is_authenticated(self) -> bool:
        return self.user_id is not None

    @classmethod
    def anonymous(cls) -> "CallerContext":
        return cls(user_id=None)

    @classmethod
    def for_user(cls, user_id: uuid.UUID) -> "CallerContext":
        return cls(user_id=user_id)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Check a password against its hash"""
    return pwd_context.verify(plain_password, hashed_password)


def get_password_hash(password: str) -> str:
    """Hash a password"""
    return pwd_context.hash(password)


def _encode(data: dict, expire: datetime, token_type: str) -> str:
    to_encode = data.copy()
    to_encode.update({"exp": expire, "type": token_type})
    return jwt.encode(to_encode, settings.JWT_SECRET_KEY, algorithm=settings.JWT_ALGORITHM)


def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    """Create an access token"""
    expire = datetime.now(timezone.utc) + (expires_delta or timedelta(minutes=settings.JWT_ACCESS_TOKEN_EXPIRE_MINUTES))
    return _encode(data, expire, "access")


def create_refresh_token(data: dict) -> str:
    """Create a refresh token"""
    expire = datetime.now(timezone.utc) + timedelta(days=settings.JWT_REFRESH_TOKEN_EXPIRE_DAYS)
    return _encode(data, expire, "refresh")


def create_upload_token(user_id: uuid.UUID) -> str:
    """Short-lived token that lets a client post image bytes straight to the asset store.

    Reusable until it expires.
    """
    expire = datetime.now(timezone.utc) + timedelta(minutes=settings.UPLOAD_TOKEN_EXPIRE_MINUTES)
    return _encode({"sub": str(user_id)}, expire, "upload")


def verify_token(token: str, token_type: str = "access") -> Optional[dict]:
    """Decode a token; None when invalid, expired or of another type"""
    try:
        payload = jwt.decode(token, settings.JWT_SECRET_KEY, algorithms=[settings.JWT_ALGORITHM])
        if payload.get("type") != token_type:
            return None
        return payload
    except JWTError:
        return None


async def _user_from_credentials(
    credentials: Optional[HTTPAuthorizationCredentials],
    db: AsyncSession,
) -> Optional[User]:
    if credentials is None:
        return None
    payload = verify_token(credentials.credentials, "access")
    if payload is None:
        return None
    user_id = payload.get("sub")
    if user_id is None:
        return None

    # imported here to avoid a circular import
    from storybook.services.user_service import get_user_by_id
    try:
        user = await get_user_by_id(db, uuid.UUID(str(user_id)))
    except ValueError:
        return None
    if user is None or not user.is_active:
        return None
    return user


async def get_caller_context(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    db: AsyncSession = Depends(get_db),
) -> CallerContext:
    """Resolve the caller. Invalid or missing credentials give an anonymous context."""
    user = await _user_from_credentials(credentials, db)
    if user is None:
        return CallerContext.anonymous()
    return CallerContext.for_user(user.id)


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    db: AsyncSession = Depends(get_db),
) -> User:
    """Current user; raises Unauthenticated when absent"""
    user = await _user_from_credentials(credentials, db)
    if user is None:
        raise Unauthenticated("Invalid authentication credentials")
    return user

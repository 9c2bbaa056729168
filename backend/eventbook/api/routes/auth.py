"""
Authentication endpoints: register and login.
"""

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from eventbook.core.config import get_settings
from eventbook.db.session import get_db
from eventbook.schemas.user import AccessToken, UserCreate, UserLogin, UserResponse
from eventbook.services.auth_service import authenticate_user, issue_token, register_user

router = APIRouter(prefix="/auth", tags=["Authentication"])


@router.post("/register", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
async def register(user_data: UserCreate, db: AsyncSession = Depends(get_db)):
    """Register a new account. Email and username must both be unused."""
    return await register_user(db, user_data)


@router.post("/login", response_model=AccessToken)
async def login(login_data: UserLogin, db: AsyncSession = Depends(get_db)):
    """Exchange email and password for a bearer token."""
    user = await authenticate_user(db, login_data)
    return AccessToken(
        access_token=issue_token(user),
        expires_in=get_settings().ACCESS_TOKEN_EXPIRE_MINUTES * 60,
        user_id=user.id,
        username=user.username,
    )

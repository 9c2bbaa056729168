"""
Authentication service handling user registration and login.
"""

from sqlalchemy import or_, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from fastapi import HTTPException, status

from eventbook.models.user import User
from eventbook.schemas.user import UserCreate, UserLogin
from eventbook.core.security import hash_password, verify_password, create_access_token
from eventbook.core.logging import get_logger
from eventbook.core.metrics import record_store_write_failure
from eventbook.stores.interfaces import StoreWriteError

logger = get_logger(__name__)


async def register_user(db: AsyncSession, user_data: UserCreate) -> User:
    """
    Register a new user with hashed password.
    Raises 409 if email or username already exists.
    """
    result = await db.execute(
        select(User).where(
            or_(User.email == user_data.email, User.username == user_data.username)
        )
    )
    existing = result.scalars().first()
    if existing is not None:
        if existing.email == user_data.email:
            logger.warning("registration_failed", reason="email_exists", email=user_data.email)
            detail = "Email already registered"
        else:
            logger.warning("registration_failed", reason="username_exists", username=user_data.username)
            detail = "Username already taken"
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=detail)

    user = User(
        email=user_data.email,
        username=user_data.username,
        hashed_password=hash_password(user_data.password),
    )
    db.add(user)
    try:
        await db.commit()
    except IntegrityError:
        # Lost a race with a concurrent registration for the same email or username
        logger.warning("registration_failed", reason="concurrent_duplicate", email=user_data.email)
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Email or username already registered",
        )
    except SQLAlchemyError as e:
        logger.error("store_write_failed", entity="user", error=str(e))
        record_store_write_failure("user")
        raise StoreWriteError("user") from e
    await db.refresh(user)

    logger.info("user_registered", user_id=user.id, username=user.username)
    return user


def issue_token(user: User) -> str:
    return create_access_token(
        data={"sub": str(user.id), "email": user.email, "username": user.username}
    )


async def authenticate_user(db: AsyncSession, login_data: UserLogin) -> User:
    """
    Check credentials and return the signed-in user.
    Raises 401 if credentials are invalid, 403 if the account is deactivated.
    """
    result = await db.execute(select(User).where(User.email == login_data.email))
    user = result.scalar_one_or_none()

    if not user or not verify_password(login_data.password, user.hashed_password):
        logger.warning("login_failed", email=login_data.email)
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid email or password",
            headers={"WWW-Authenticate": "Bearer"},
        )

    if not user.is_active:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Account is deactivated",
        )

    logger.info("user_logged_in", user_id=user.id)
    return user

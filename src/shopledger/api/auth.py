"""Authentication endpoints and dependencies."""

from uuid import UUID

from fastapi import APIRouter, Depends, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.requests import Request

from shopledger.core.db import get_db
from shopledger.core.errors import UnauthorizedError
from shopledger.core.logging import get_logger
from shopledger.core.security import verify_password
from shopledger.models.user import User
from shopledger.models.user_schemas import LoginRequest, UserResponse

logger = get_logger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])


async def get_current_user(
    request: Request,
    db: AsyncSession = Depends(get_db),
) -> User:
    """Dependency resolving the logged-in shopkeeper from the session cookie."""
    user_id = request.session.get("user_id")

    if not user_id:
        raise UnauthorizedError("Not authenticated")

    try:
        user_uuid = UUID(user_id)
    except ValueError:
        request.session.clear()
        raise UnauthorizedError("Invalid user session") from None

    stmt = select(User).where((User.id == user_uuid) & (User.is_active))
    result = await db.execute(stmt)
    user = result.scalar_one_or_none()

    if not user:
        request.session.clear()
        raise UnauthorizedError("User not found or inactive")

    return user


@router.post("/login", response_model=UserResponse)
async def login(
    request: Request,
    credentials: LoginRequest,
    db: AsyncSession = Depends(get_db),
):
    """Validate credentials and start a session."""
    stmt = select(User).where(User.email == credentials.email)
    result = await db.execute(stmt)
    user = result.scalar_one_or_none()

    if not user or not verify_password(credentials.password, user.hashed_password):
        logger.warning("auth.login_failed", email=credentials.email)
        raise UnauthorizedError("Invalid email or password")

    if not user.is_active:
        logger.warning("auth.login_disabled_account", email=user.email, user_id=str(user.id))
        raise UnauthorizedError("Account is disabled")

    request.session["user_id"] = str(user.id)

    logger.info("auth.login_success", email=user.email, user_id=str(user.id))
    return user


@router.post("/logout", status_code=status.HTTP_204_NO_CONTENT)
async def logout(request: Request):
    """Clear the session."""
    user_id = request.session.get("user_id")
    if user_id:
        logger.info("auth.logout", user_id=user_id)

    request.session.clear()


@router.get("/me", response_model=UserResponse)
async def me(current_user: User = Depends(get_current_user)):
    return current_user

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status
from sqlmodel import select
from sqlalchemy.ext.asyncio import AsyncSession

from vocabdash.clock import as_utc, utcnow
from vocabdash.database import get_session
from vocabdash.models.user import (
    User,
    UserCreate,
    UserResponse,
    RefreshToken,
    LoginRequest,
    TokenResponse,
    RefreshRequest,
)
from vocabdash.auth.password import get_password_hash, verify_password
from vocabdash.auth.jwt import create_access_token, create_refresh_token, hash_refresh_token
from vocabdash.auth.dependencies import get_current_active_user
from vocabdash.config import get_settings
from vocabdash.services import persistence
from vocabdash.services.persistence import store_operation

router = APIRouter(prefix="/api/auth", tags=["auth"])
settings = get_settings()
logger = logging.getLogger(__name__)


async def issue_tokens(session: AsyncSession, user: User) -> TokenResponse:
    """Create an access token and store the hash of a fresh refresh token."""
    raw_refresh_token, token_hash, expires_at = create_refresh_token()
    session.add(RefreshToken(user_id=user.id, token_hash=token_hash, expires_at=expires_at))
    await persistence.commit(session, "issue tokens")

    return TokenResponse(
        access_token=create_access_token(user.id),
        refresh_token=raw_refresh_token,
        expires_in=settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60,
    )


@router.post("/register", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
async def register(
    user_data: UserCreate,
    session: Annotated[AsyncSession, Depends(get_session)],
):
    """
    Create an account. Each account owns a private word list and quiz history.

    - **email**: must be unique
    - **password**: must not be empty
    - **display_name**: optional
    """
    email = user_data.email.strip().lower()
    if not email or not user_data.password:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Email and password are required",
        )

    async with store_operation(session, "look up account"):
        result = await session.execute(select(User).where(User.email == email))
        existing = result.scalar_one_or_none()
    if existing:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Email already registered",
        )

    user = User(
        email=email,
        hashed_password=get_password_hash(user_data.password),
        display_name=user_data.display_name,
    )
    session.add(user)
    async with store_operation(session, "create account"):
        await session.commit()
        await session.refresh(user)

    logger.info("Registered user %s", user.id)
    return user


@router.post("/login", response_model=TokenResponse)
async def login(
    login_data: LoginRequest,
    session: Annotated[AsyncSession, Depends(get_session)],
):
    """Exchange email and password for an access token and a refresh token."""
    async with store_operation(session, "look up account"):
        result = await session.execute(
            select(User).where(User.email == login_data.email.strip().lower())
        )
        user = result.scalar_one_or_none()

    if not user or not verify_password(login_data.password, user.hashed_password):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid email or password",
        )

    if not user.is_active:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Account is inactive",
        )

    return await issue_tokens(session, user)


@router.post("/refresh", response_model=TokenResponse)
async def refresh_token(
    refresh_data: RefreshRequest,
    session: Annotated[AsyncSession, Depends(get_session)],
):
    """
    Rotate a refresh token.

    The presented token is revoked and a new pair is issued.
    """
    async with store_operation(session, "look up refresh token"):
        result = await session.execute(
            select(RefreshToken).where(
                RefreshToken.token_hash == hash_refresh_token(refresh_data.refresh_token),
                RefreshToken.revoked == False,  # noqa: E712
            )
        )
        stored_token = result.scalar_one_or_none()

    if not stored_token:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid refresh token",
        )

    stored_token.revoked = True

    if as_utc(stored_token.expires_at) < utcnow():
        await persistence.commit(session, "revoke refresh token")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Refresh token expired",
        )

    async with store_operation(session, "look up account"):
        user = await session.get(User, stored_token.user_id)
    if not user or not user.is_active:
        await persistence.commit(session, "revoke refresh token")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="User not found or inactive",
        )

    return await issue_tokens(session, user)


@router.post("/logout", status_code=status.HTTP_204_NO_CONTENT)
async def logout(
    refresh_data: RefreshRequest,
    session: Annotated[AsyncSession, Depends(get_session)],
):
    """
    Revoke a refresh token. Always succeeds, whether or not the token existed.

    Access tokens stay valid until they expire.
    """
    async with store_operation(session, "look up refresh token"):
        result = await session.execute(
            select(RefreshToken).where(
                RefreshToken.token_hash == hash_refresh_token(refresh_data.refresh_token)
            )
        )
        stored_token = result.scalar_one_or_none()

    if stored_token:
        stored_token.revoked = True
        await persistence.commit(session, "revoke refresh token")

    return None


@router.get("/me", response_model=UserResponse)
async def get_current_user_info(
    current_user: Annotated[User, Depends(get_current_active_user)],
):
    """The authenticated user's account details."""
    return current_user

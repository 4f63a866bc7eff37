"""FastAPI dependencies resolving the authenticated user from a Bearer token."""

import logging
from typing import Annotated, Optional

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from vocabdash.auth.jwt import verify_token
from vocabdash.database import get_session
from vocabdash.models.user import User
from vocabdash.services.persistence import store_operation

logger = logging.getLogger(__name__)

bearer_scheme = HTTPBearer(auto_error=False)


async def get_current_user(
    credentials: Annotated[Optional[HTTPAuthorizationCredentials], Depends(bearer_scheme)],
    session: Annotated[AsyncSession, Depends(get_session)],
) -> User:
    unauthorized = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Not authenticated",
        headers={"WWW-Authenticate": "Bearer"},
    )
    if credentials is None:
        raise unauthorized

    payload = verify_token(credentials.credentials)
    if payload is None:
        logger.debug("Rejected invalid or expired access token")
        raise unauthorized

    async with store_operation(session, "load account"):
        user = await session.get(User, payload["sub"])
    if user is None:
        raise unauthorized
    return user


async def get_current_active_user(
    current_user: Annotated[User, Depends(get_current_user)],
) -> User:
    if not current_user.is_active:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Account is inactive",
        )
    return current_user

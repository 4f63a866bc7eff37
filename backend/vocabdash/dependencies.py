"""Per-request services bound to the authenticated user."""

from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from vocabdash.auth.dependencies import get_current_active_user
from vocabdash.database import get_session
from vocabdash.models.user import User
from vocabdash.services.history_log import HistoryLog
from vocabdash.services.word_store import WordStore


async def get_word_store(
    current_user: Annotated[User, Depends(get_current_active_user)],
    session: Annotated[AsyncSession, Depends(get_session)],
) -> WordStore:
    return WordStore(session, current_user.id)


async def get_history_log(
    current_user: Annotated[User, Depends(get_current_active_user)],
    session: Annotated[AsyncSession, Depends(get_session)],
) -> HistoryLog:
    return HistoryLog(session, current_user.id)

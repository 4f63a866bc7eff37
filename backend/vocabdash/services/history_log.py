"""Append-only log of graded quiz answers."""

import logging
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from vocabdash.config import get_settings
from vocabdash.errors import ValidationError
from vocabdash.models.quiz_result import QuizResult
from vocabdash.services import persistence
from vocabdash.services.persistence import store_operation

logger = logging.getLogger(__name__)


class HistoryLog:
    """Quiz history of a single user. Entries are never updated or deleted."""

    def __init__(self, session: AsyncSession, user_id: str, limit: Optional[int] = None):
        self.session = session
        self.user_id = user_id
        self.limit = limit or get_settings().HISTORY_LIMIT
        self.entries: list[QuizResult] = []

    async def fetch_recent(self, limit: Optional[int] = None) -> list[QuizResult]:
        """Load the most recent results, newest first."""
        limit = self.limit if limit is None else limit
        if limit < 1:
            raise ValidationError("limit must be a positive integer")

        stmt = (
            select(QuizResult)
            .where(QuizResult.user_id == self.user_id)
            .order_by(QuizResult.timestamp.desc())
            .limit(limit)
        )
        async with store_operation(self.session, "load quiz history"):
            result = await self.session.execute(stmt)
            self.entries = list(result.scalars().all())
        return self.entries

    async def append(self, result: QuizResult, commit_now: bool = True) -> QuizResult:
        """Write one graded answer to the log."""
        result.user_id = self.user_id
        self.session.add(result)
        if commit_now:
            await persistence.commit(self.session, "save quiz result")
        else:
            async with store_operation(self.session, "save quiz result"):
                await self.session.flush()

        self.entries.insert(0, result)
        del self.entries[self.limit:]
        logger.debug(
            "Logged %s answer for word %s (user %s)",
            "correct" if result.correct else "wrong",
            result.word_id,
            self.user_id,
        )
        return result

"""Shared handling of database failures for the store services."""

import logging
from contextlib import asynccontextmanager

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from vocabdash.errors import StoreError

logger = logging.getLogger(__name__)


@asynccontextmanager
async def store_operation(session: AsyncSession, action: str):
    """Run database work; on failure roll back and raise StoreError.

    The failed action leaves no partial writes behind and is not retried.
    """
    try:
        yield
    except SQLAlchemyError as exc:
        logger.exception("Database error while trying to %s", action)
        await session.rollback()
        raise StoreError(f"Could not {action}, please try again later") from exc


async def commit(session: AsyncSession, action: str) -> None:
    async with store_operation(session, action):
        await session.commit()

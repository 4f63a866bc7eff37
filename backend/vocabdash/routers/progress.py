"""Progress endpoints: summary, daily activity and word distributions."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query

from vocabdash.clock import get_timezone
from vocabdash.config import get_settings
from vocabdash.dependencies import get_history_log, get_word_store
from vocabdash.models.progress import DailyActivity, DistributionResponse, TimeRange, UserProgress
from vocabdash.services.history_log import HistoryLog
from vocabdash.services.progress import (
    compute_progress,
    daily_activity,
    difficulty_distribution,
    language_distribution,
)
from vocabdash.services.word_store import WordStore

router = APIRouter()
settings = get_settings()


@router.get("/progress", response_model=UserProgress)
async def get_progress(
    store: Annotated[WordStore, Depends(get_word_store)],
    history: Annotated[HistoryLog, Depends(get_history_log)],
):
    """Totals, accuracy and streak, recomputed from current data."""
    words = await store.list()
    entries = await history.fetch_recent()
    return compute_progress(words, entries, tz=get_timezone(settings.TIMEZONE))


@router.get("/progress/activity", response_model=list[DailyActivity])
async def get_activity(
    history: Annotated[HistoryLog, Depends(get_history_log)],
    time_range: TimeRange = Query(default="week", alias="range"),
):
    """Answers per day over the last week, month or year."""
    entries = await history.fetch_recent()
    return daily_activity(entries, time_range, tz=get_timezone(settings.TIMEZONE))


@router.get("/progress/distribution", response_model=DistributionResponse)
async def get_distribution(store: Annotated[WordStore, Depends(get_word_store)]):
    words = await store.list()
    return DistributionResponse(
        languages=language_distribution(words),
        difficulties=difficulty_distribution(words),
    )

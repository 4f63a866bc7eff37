from typing import Annotated, Optional

from fastapi import APIRouter, Depends, Query

from vocabdash.dependencies import get_history_log
from vocabdash.models.quiz_result import QuizResultRead
from vocabdash.services.history_log import HistoryLog

router = APIRouter()


@router.get("/history", response_model=list[QuizResultRead])
async def get_history(
    history: Annotated[HistoryLog, Depends(get_history_log)],
    limit: Optional[int] = Query(default=None, ge=1, le=1000),
):
    """Most recent graded answers, newest first."""
    return await history.fetch_recent(limit)

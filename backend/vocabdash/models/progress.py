from datetime import date
from typing import Literal, Optional

from sqlmodel import SQLModel


TimeRange = Literal["week", "month", "all"]


class UserProgress(SQLModel):
    """Summary statistics derived from the word list and quiz history."""

    total_words: int = 0
    correct_answers: int = 0
    total_answers: int = 0
    accuracy: int = 0  # percentage, 0-100
    streak: int = 0  # consecutive days with at least one answer
    last_study_date: Optional[date] = None


class DailyActivity(SQLModel):
    """Answers given on one calendar day."""

    day: date
    correct: int = 0
    total: int = 0


class DistributionResponse(SQLModel):
    """Word counts grouped by language and by difficulty."""

    languages: dict[str, int]
    difficulties: dict[str, int]

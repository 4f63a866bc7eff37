"""
Progress aggregation - pure functions over a words/history snapshot.

Nothing here touches the database; routers load the current words and
recent history and recompute on every request.
"""

from collections import Counter
from datetime import date, datetime, timedelta, tzinfo
from typing import Iterable, Optional, Sequence

from vocabdash.clock import as_utc, local_date, local_today, utcnow
from vocabdash.errors import ValidationError
from vocabdash.models.progress import DailyActivity, TimeRange, UserProgress
from vocabdash.models.quiz_result import QuizResult
from vocabdash.models.word import Difficulty, Word

# How far back each activity range reaches, in days
TIME_RANGE_DAYS: dict[str, int] = {
    "week": 7,
    "month": 30,
    "all": 365,
}


def percentage(part: int, total: int) -> int:
    """Whole-number percentage, halves rounded up; 0 when total is 0."""
    if total <= 0:
        return 0
    return (200 * part + total) // (2 * total)


def calculate_streak(study_days: set[date], today: date) -> int:
    """Count consecutive study days ending today, or yesterday if today is still empty."""
    yesterday = today - timedelta(days=1)
    if today in study_days:
        cursor = today
    elif yesterday in study_days:
        cursor = yesterday
    else:
        return 0

    streak = 0
    while cursor in study_days:
        streak += 1
        cursor -= timedelta(days=1)
    return streak


def compute_progress(
    words: Sequence[Word],
    history: Sequence[QuizResult],
    today: Optional[date] = None,
    tz: Optional[tzinfo] = None,
) -> UserProgress:
    today = today or local_today(tz)
    correct_answers = sum(1 for r in history if r.correct)
    total_answers = len(history)
    study_days = {local_date(r.timestamp, tz) for r in history}

    return UserProgress(
        total_words=len(words),
        correct_answers=correct_answers,
        total_answers=total_answers,
        accuracy=percentage(correct_answers, total_answers),
        streak=calculate_streak(study_days, today),
        last_study_date=max(study_days) if study_days else None,
    )


def daily_activity(
    history: Iterable[QuizResult],
    time_range: TimeRange = "week",
    now: Optional[datetime] = None,
    tz: Optional[tzinfo] = None,
) -> list[DailyActivity]:
    """Answers given in the last N days (N by range), grouped per day, oldest day first.

    Days without answers are omitted.
    """
    if time_range not in TIME_RANGE_DAYS:
        raise ValidationError(f"Unknown time range: {time_range}")

    cutoff = as_utc(now or utcnow()) - timedelta(days=TIME_RANGE_DAYS[time_range])

    days: dict[date, DailyActivity] = {}
    for result in history:
        if as_utc(result.timestamp) < cutoff:
            continue
        day = local_date(result.timestamp, tz)
        activity = days.setdefault(day, DailyActivity(day=day))
        activity.total += 1
        if result.correct:
            activity.correct += 1

    return [days[day] for day in sorted(days)]


def language_distribution(words: Iterable[Word]) -> dict[str, int]:
    counts = Counter(w.language for w in words)
    return {language: counts[language] for language in sorted(counts)}


def difficulty_distribution(words: Iterable[Word]) -> dict[str, int]:
    counts = Counter(Difficulty(w.difficulty).value for w in words)
    return {level.value: counts.get(level.value, 0) for level in Difficulty}

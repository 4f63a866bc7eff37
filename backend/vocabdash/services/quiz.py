"""
Quiz session engine - typed-answer quizzes over the user's words.

A session moves idle -> active -> completed. Words are fixed when the
session starts; each answer is written back to the word store and the
history log before the session itself records it.
"""

from __future__ import annotations

import logging
import random
from enum import Enum
from typing import Iterable, Optional

from vocabdash.clock import utcnow
from vocabdash.config import get_settings
from vocabdash.errors import InvalidStateError, NoCandidatesError, ValidationError
from vocabdash.models.quiz_result import QuizResult
from vocabdash.models.word import Word, WordRead
from vocabdash.services.history_log import HistoryLog
from vocabdash.services.progress import percentage
from vocabdash.services.word_store import WordStore

logger = logging.getLogger(__name__)


class QuizState(str, Enum):
    IDLE = "idle"
    ACTIVE = "active"
    COMPLETED = "completed"


def grade(answer: str, expected: str) -> bool:
    """Exact match after trimming whitespace and ignoring case."""
    return answer.strip().lower() == expected.strip().lower()


def select_candidates(
    words: Iterable[Word],
    language: Optional[str] = None,
    difficulty: Optional[str] = None,
) -> list[Word]:
    return [
        w
        for w in words
        if (not language or w.language == language)
        and (not difficulty or w.difficulty == difficulty)
    ]


class QuizSession:
    """In-memory quiz for one user. Never persisted."""

    def __init__(self, rng: Optional[random.Random] = None):
        self.rng = rng or random.Random()
        self.words: list[WordRead] = []
        self.current_index = 0
        self.results: list[QuizResult] = []
        self.answered = False
        self.started = False

    @property
    def state(self) -> QuizState:
        if not self.started:
            return QuizState.IDLE
        if self.current_index < len(self.words):
            return QuizState.ACTIVE
        return QuizState.COMPLETED

    @property
    def is_active(self) -> bool:
        return self.state == QuizState.ACTIVE

    @property
    def total_questions(self) -> int:
        return len(self.words)

    @property
    def current_question(self) -> Optional[WordRead]:
        if self.is_active:
            return self.words[self.current_index]
        return None

    @property
    def score(self) -> int:
        return percentage(sum(1 for r in self.results if r.correct), len(self.results))

    def start(
        self,
        words: Iterable[Word],
        language: Optional[str] = None,
        difficulty: Optional[str] = None,
        count: Optional[int] = None,
    ) -> list[WordRead]:
        """Pick up to `count` distinct words matching the filters.

        Raises ValidationError for a non-positive count and
        NoCandidatesError when nothing matches; the session is then
        left as it was.
        """
        if count is None:
            count = get_settings().DEFAULT_QUIZ_COUNT
        if isinstance(count, bool) or not isinstance(count, int) or count < 1:
            raise ValidationError("Question count must be a positive integer")

        pool = select_candidates(words, language, difficulty)
        if not pool:
            raise NoCandidatesError("No words match the selected filters")

        self.rng.shuffle(pool)
        self.words = [WordRead.model_validate(w) for w in pool[:count]]
        self.current_index = 0
        self.results = []
        self.answered = False
        self.started = True

        logger.info(
            "Quiz started with %d of %d candidates (language=%s, difficulty=%s)",
            len(self.words),
            len(pool),
            language or "*",
            difficulty or "*",
        )
        return self.words

    async def submit_answer(
        self,
        word_id: str,
        answer: str,
        store: WordStore,
        history: HistoryLog,
    ) -> bool:
        """Grade the current question and write the outcome back.

        The word statistics and the history entry are committed together;
        if either write fails the error propagates and the session does
        not record the answer.
        """
        question = self.current_question
        if question is None:
            raise InvalidStateError("There is no active question")
        if question.id != word_id:
            raise InvalidStateError(f"Word {word_id} is not the current question")
        if self.answered:
            raise InvalidStateError("The current question has already been answered")

        correct = grade(answer, question.translation)
        now = utcnow()

        # Claimed before the first await so an interleaved answer is rejected
        self.answered = True
        try:
            await store.record_review(word_id, correct, reviewed_at=now, commit_now=False)
            result = await history.append(
                QuizResult(word_id=word_id, correct=correct, timestamp=now),
                commit_now=False,
            )
            await store.commit("record quiz answer")
        except Exception:
            self.answered = False
            raise

        self.results.append(result)
        return correct

    def next(self) -> Optional[WordRead]:
        """Advance to the next question; returns None once the quiz is completed."""
        if not self.is_active:
            raise InvalidStateError("There is no active quiz to advance")

        self.current_index += 1
        self.answered = False
        if not self.is_active:
            logger.info(
                "Quiz completed: %d answers, score %d%%", len(self.results), self.score
            )
        return self.current_question

    def abandon(self) -> None:
        """Discard the session and return to idle."""
        self.words = []
        self.current_index = 0
        self.results = []
        self.answered = False
        self.started = False


class QuizSessionRegistry:
    """Holds the live quiz session of each user."""

    def __init__(self, rng: Optional[random.Random] = None):
        self.rng = rng
        self._sessions: dict[str, QuizSession] = {}

    def get(self, user_id: str) -> QuizSession:
        session = self._sessions.get(user_id)
        if session is None:
            session = QuizSession(self.rng)
            self._sessions[user_id] = session
        return session

    def discard(self, user_id: str) -> None:
        self._sessions.pop(user_id, None)


# Singleton instance
_registry: Optional[QuizSessionRegistry] = None


def get_quiz_registry() -> QuizSessionRegistry:
    """Get the singleton QuizSessionRegistry."""
    global _registry

    if _registry is None:
        _registry = QuizSessionRegistry()
    return _registry

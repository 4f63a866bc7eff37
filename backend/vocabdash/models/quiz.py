from typing import Optional

from sqlmodel import SQLModel

from vocabdash.models.quiz_result import QuizResultRead
from vocabdash.models.word import Difficulty


class QuizStartRequest(SQLModel):
    """Filters and size for a new quiz; missing filters mean no restriction."""

    language: Optional[str] = None
    difficulty: Optional[Difficulty] = None
    count: Optional[int] = None


class QuizQuestion(SQLModel):
    """A word as shown to the learner, without its translation."""

    word_id: str
    original: str
    language: str
    example: Optional[str] = None
    category: Optional[str] = None
    difficulty: Difficulty


class AnswerRequest(SQLModel):
    word_id: str
    answer: str


class AnswerResponse(SQLModel):
    correct: bool
    expected: str
    score: int


class QuizStateResponse(SQLModel):
    """Snapshot of the user's quiz session."""

    state: str
    current_index: int
    total_questions: int
    answered: bool
    current_question: Optional[QuizQuestion] = None
    results: list[QuizResultRead] = []
    score: int = 0

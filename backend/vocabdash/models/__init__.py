from vocabdash.models.user import User, RefreshToken
from vocabdash.models.word import Word, WordCreate, WordUpdate, WordRead, Difficulty
from vocabdash.models.quiz_result import QuizResult, QuizResultRead
from vocabdash.models.progress import UserProgress, DailyActivity, DistributionResponse, TimeRange
from vocabdash.models.quiz import (
    QuizStartRequest,
    QuizQuestion,
    AnswerRequest,
    AnswerResponse,
    QuizStateResponse,
)

__all__ = [
    "User",
    "RefreshToken",
    "Word",
    "WordCreate",
    "WordUpdate",
    "WordRead",
    "Difficulty",
    "QuizResult",
    "QuizResultRead",
    "UserProgress",
    "DailyActivity",
    "DistributionResponse",
    "TimeRange",
    "QuizStartRequest",
    "QuizQuestion",
    "AnswerRequest",
    "AnswerResponse",
    "QuizStateResponse",
]

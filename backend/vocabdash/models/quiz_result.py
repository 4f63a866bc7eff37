from datetime import datetime
import uuid

from sqlmodel import SQLModel, Field

from vocabdash.clock import utcnow


class QuizResultBase(SQLModel):
    """Shared fields for a graded answer."""

    # Plain reference: the word may be deleted while its history stays.
    word_id: str = Field(index=True)
    correct: bool
    timestamp: datetime = Field(default_factory=utcnow, index=True)


class QuizResult(QuizResultBase, table=True):
    """Append-only history entry."""

    __tablename__ = "quiz_results"

    id: str = Field(default_factory=lambda: str(uuid.uuid4()), primary_key=True)
    user_id: str = Field(foreign_key="users.id", index=True)


class QuizResultRead(QuizResultBase):
    """Schema for history responses."""

    id: str

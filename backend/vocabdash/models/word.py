from datetime import datetime
from enum import Enum
from typing import Optional
import uuid

from sqlmodel import SQLModel, Field

from vocabdash.clock import utcnow


class Difficulty(str, Enum):
    """Static, user-assigned difficulty label."""

    easy = "easy"
    medium = "medium"
    hard = "hard"


class WordBase(SQLModel):
    """Shared fields for word data."""

    original: str
    translation: str
    language: str
    example: Optional[str] = None
    category: Optional[str] = None
    difficulty: Difficulty = Difficulty.medium


class Word(WordBase, table=True):
    """Vocabulary entry owned by a single user."""

    __tablename__ = "words"

    id: str = Field(default_factory=lambda: str(uuid.uuid4()), primary_key=True)
    user_id: str = Field(foreign_key="users.id", index=True)
    created_at: datetime = Field(default_factory=utcnow, index=True)
    last_reviewed: Optional[datetime] = None
    review_count: int = Field(default=0)
    correct_count: int = Field(default=0)


class WordCreate(WordBase):
    """Schema for adding a word."""

    difficulty: Optional[Difficulty] = None


class WordUpdate(SQLModel):
    """Partial update; unset fields are left untouched."""

    original: Optional[str] = None
    translation: Optional[str] = None
    language: Optional[str] = None
    example: Optional[str] = None
    category: Optional[str] = None
    difficulty: Optional[Difficulty] = None
    last_reviewed: Optional[datetime] = None
    review_count: Optional[int] = None
    correct_count: Optional[int] = None


class WordRead(WordBase):
    """Schema for word responses."""

    id: str
    created_at: datetime
    last_reviewed: Optional[datetime] = None
    review_count: int = 0
    correct_count: int = 0

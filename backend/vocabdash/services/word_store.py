"""
Word store - the user's vocabulary collection.

Every mutation returns the affected record and patches the locally loaded
list, so callers never need to refetch after a write.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Optional, Union

from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from vocabdash.clock import utcnow
from vocabdash.errors import NotFoundError, ValidationError
from vocabdash.models.word import Difficulty, Word, WordCreate, WordUpdate
from vocabdash.services import persistence
from vocabdash.services.persistence import store_operation

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = ("original", "translation", "language")
OPTIONAL_TEXT_FIELDS = ("example", "category")
EDITABLE_FIELDS = {
    "original",
    "translation",
    "language",
    "example",
    "category",
    "difficulty",
    "last_reviewed",
    "review_count",
    "correct_count",
}

WordFields = Union[WordCreate, WordUpdate, dict]


def _as_dict(fields: WordFields, exclude_unset: bool = False) -> dict[str, Any]:
    if isinstance(fields, dict):
        return dict(fields)
    return fields.model_dump(exclude_unset=exclude_unset)


def _parse_difficulty(value: Any) -> Difficulty:
    try:
        return Difficulty(value)
    except ValueError:
        raise ValidationError(
            f"difficulty must be one of: {', '.join(d.value for d in Difficulty)}"
        ) from None


def _clean_required(name: str, value: Any) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(f"{name} is required")
    return value.strip()


def _clean_optional(value: Any) -> Optional[str]:
    """Blank text is stored as None."""
    if isinstance(value, str):
        value = value.strip()
    return value or None


class WordStore:
    """Word collection of a single user, backed by one database session."""

    def __init__(self, session: AsyncSession, user_id: str):
        self.session = session
        self.user_id = user_id
        self.words: list[Word] = []

    async def list(self) -> list[Word]:
        """Load all of the user's words, newest first."""
        stmt = (
            select(Word)
            .where(Word.user_id == self.user_id)
            .order_by(Word.created_at.desc())
        )
        async with store_operation(self.session, "load words"):
            result = await self.session.execute(stmt)
            self.words = list(result.scalars().all())
        return self.words

    async def get(self, word_id: str) -> Word:
        async with store_operation(self.session, "load word"):
            word = await self.session.get(Word, word_id)
        if word is None or word.user_id != self.user_id:
            raise NotFoundError(f"Word {word_id} not found")
        return word

    async def add(self, fields: WordFields) -> Word:
        """Create a word with zeroed review statistics."""
        data = _as_dict(fields)
        for name in REQUIRED_FIELDS:
            data[name] = _clean_required(name, data.get(name))

        difficulty = data.get("difficulty")
        word = Word(
            user_id=self.user_id,
            original=data["original"],
            translation=data["translation"],
            language=data["language"],
            example=_clean_optional(data.get("example")),
            category=_clean_optional(data.get("category")),
            difficulty=_parse_difficulty(difficulty) if difficulty else Difficulty.medium,
            created_at=utcnow(),
            review_count=0,
            correct_count=0,
        )
        self.session.add(word)
        await persistence.commit(self.session, "add word")

        self.words.insert(0, word)
        logger.debug("Added word %s for user %s", word.id, self.user_id)
        return word

    async def update(self, word_id: str, fields: WordFields, commit_now: bool = True) -> Word:
        """Merge the given fields into an existing word.

        Fields that are absent (or None) are left untouched; a blank example
        or category clears it. The review counters must stay non-negative
        with correct_count <= review_count.
        """
        changes = {
            name: value
            for name, value in _as_dict(fields, exclude_unset=True).items()
            if value is not None
        }
        unknown = set(changes) - EDITABLE_FIELDS
        if unknown:
            raise ValidationError(f"Cannot update fields: {', '.join(sorted(unknown))}")

        word = await self.get(word_id)

        for name in REQUIRED_FIELDS:
            if name in changes:
                changes[name] = _clean_required(name, changes[name])
        for name in OPTIONAL_TEXT_FIELDS:
            if name in changes:
                changes[name] = _clean_optional(changes[name])
        if "difficulty" in changes:
            changes["difficulty"] = _parse_difficulty(changes["difficulty"])

        review_count = changes.get("review_count", word.review_count)
        correct_count = changes.get("correct_count", word.correct_count)
        if review_count < 0 or correct_count < 0:
            raise ValidationError("Review counts cannot be negative")
        if correct_count > review_count:
            raise ValidationError("correct_count cannot exceed review_count")

        for name, value in changes.items():
            setattr(word, name, value)

        if commit_now:
            await persistence.commit(self.session, "update word")
        else:
            async with store_operation(self.session, "update word"):
                await self.session.flush()

        self._replace_local(word)
        return word

    async def record_review(
        self,
        word_id: str,
        correct: bool,
        reviewed_at: Optional[datetime] = None,
        commit_now: bool = True,
    ) -> Word:
        """Count one graded answer against a word."""
        word = await self.get(word_id)
        return await self.update(
            word_id,
            {
                "review_count": word.review_count + 1,
                "correct_count": word.correct_count + (1 if correct else 0),
                "last_reviewed": reviewed_at or utcnow(),
            },
            commit_now=commit_now,
        )

    async def delete(self, word_id: str) -> None:
        """Remove a word. Deleting an absent word is not an error."""
        async with store_operation(self.session, "load word"):
            word = await self.session.get(Word, word_id)

        if word is not None and word.user_id == self.user_id:
            await self.session.delete(word)
            await persistence.commit(self.session, "delete word")
            logger.debug("Deleted word %s for user %s", word_id, self.user_id)

        self.words = [w for w in self.words if w.id != word_id]

    async def commit(self, action: str = "save changes") -> None:
        await persistence.commit(self.session, action)

    # Pure queries over the loaded words

    def by_language(self, language: str) -> list[Word]:
        return [w for w in self.words if w.language == language]

    def search(
        self,
        term: Optional[str] = None,
        language: Optional[str] = None,
        difficulty: Optional[str] = None,
    ) -> list[Word]:
        """Filter loaded words by a substring of original/translation and optional labels."""
        needle = (term or "").strip().lower()
        return [
            w
            for w in self.words
            if (not needle or needle in w.original.lower() or needle in w.translation.lower())
            and (not language or w.language == language)
            and (not difficulty or w.difficulty == difficulty)
        ]

    def languages(self) -> list[str]:
        return sorted({w.language for w in self.words if w.language})

    def categories(self) -> list[str]:
        return sorted({w.category for w in self.words if w.category})

    def _replace_local(self, word: Word) -> None:
        for index, existing in enumerate(self.words):
            if existing.id == word.id:
                self.words[index] = word
                return

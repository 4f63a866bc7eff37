"""Vocabulary endpoints: list, search, add, edit and delete words."""

from typing import Annotated, Optional

from fastapi import APIRouter, Depends, Query, Response, status

from vocabdash.dependencies import get_word_store
from vocabdash.models.word import Difficulty, WordCreate, WordRead, WordUpdate
from vocabdash.services.word_store import WordStore

router = APIRouter()


@router.get("/words", response_model=list[WordRead])
async def list_words(
    store: Annotated[WordStore, Depends(get_word_store)],
    q: Optional[str] = Query(default=None, description="Substring of original or translation"),
    language: Optional[str] = None,
    difficulty: Optional[Difficulty] = None,
):
    """List the user's words, newest first, optionally filtered."""
    await store.list()
    return store.search(q, language, difficulty)


@router.get("/words/languages", response_model=list[str])
async def list_languages(store: Annotated[WordStore, Depends(get_word_store)]):
    await store.list()
    return store.languages()


@router.get("/words/categories", response_model=list[str])
async def list_categories(store: Annotated[WordStore, Depends(get_word_store)]):
    await store.list()
    return store.categories()


@router.post("/words", response_model=WordRead, status_code=status.HTTP_201_CREATED)
async def add_word(
    word: WordCreate,
    store: Annotated[WordStore, Depends(get_word_store)],
):
    """Add a word. Original, translation and language are required."""
    return await store.add(word)


@router.patch("/words/{word_id}", response_model=WordRead)
async def update_word(
    word_id: str,
    changes: WordUpdate,
    store: Annotated[WordStore, Depends(get_word_store)],
):
    """Edit a word; only the fields present in the body change."""
    return await store.update(word_id, changes)


@router.delete("/words/{word_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_word(
    word_id: str,
    store: Annotated[WordStore, Depends(get_word_store)],
):
    """Delete a word. Deleting a missing word also succeeds."""
    await store.delete(word_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)

"""
Quiz router - API layer for typed-answer quizzes.

Session state lives in the in-process registry; grading and write-back
are delegated to the quiz service.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Response, status

from vocabdash.auth.dependencies import get_current_active_user
from vocabdash.dependencies import get_history_log, get_word_store
from vocabdash.models.quiz import (
    AnswerRequest,
    AnswerResponse,
    QuizQuestion,
    QuizStartRequest,
    QuizStateResponse,
)
from vocabdash.models.quiz_result import QuizResultRead
from vocabdash.models.user import User
from vocabdash.services.history_log import HistoryLog
from vocabdash.services.quiz import QuizSession, QuizSessionRegistry, get_quiz_registry
from vocabdash.services.word_store import WordStore

router = APIRouter()


def build_state(quiz: QuizSession) -> QuizStateResponse:
    question = quiz.current_question
    return QuizStateResponse(
        state=quiz.state.value,
        current_index=quiz.current_index,
        total_questions=quiz.total_questions,
        answered=quiz.answered,
        current_question=QuizQuestion(
            word_id=question.id,
            original=question.original,
            language=question.language,
            example=question.example,
            category=question.category,
            difficulty=question.difficulty,
        ) if question else None,
        results=[QuizResultRead.model_validate(r) for r in quiz.results],
        score=quiz.score,
    )


@router.post("/quiz/start", response_model=QuizStateResponse)
async def start_quiz(
    request: QuizStartRequest,
    current_user: Annotated[User, Depends(get_current_active_user)],
    store: Annotated[WordStore, Depends(get_word_store)],
    registry: Annotated[QuizSessionRegistry, Depends(get_quiz_registry)],
):
    """Start a new quiz, replacing any quiz in progress."""
    words = await store.list()
    quiz = registry.get(current_user.id)
    quiz.start(
        words,
        language=request.language or None,
        difficulty=request.difficulty,
        count=request.count,
    )
    return build_state(quiz)


@router.get("/quiz", response_model=QuizStateResponse)
async def get_quiz(
    current_user: Annotated[User, Depends(get_current_active_user)],
    registry: Annotated[QuizSessionRegistry, Depends(get_quiz_registry)],
):
    """Current quiz state; idle when no quiz has been started."""
    return build_state(registry.get(current_user.id))


@router.post("/quiz/answer", response_model=AnswerResponse)
async def submit_answer(
    request: AnswerRequest,
    current_user: Annotated[User, Depends(get_current_active_user)],
    store: Annotated[WordStore, Depends(get_word_store)],
    history: Annotated[HistoryLog, Depends(get_history_log)],
    registry: Annotated[QuizSessionRegistry, Depends(get_quiz_registry)],
):
    """Grade an answer to the current question."""
    quiz = registry.get(current_user.id)
    question = quiz.current_question
    correct = await quiz.submit_answer(request.word_id, request.answer, store, history)
    return AnswerResponse(correct=correct, expected=question.translation, score=quiz.score)


@router.post("/quiz/next", response_model=QuizStateResponse)
async def next_question(
    current_user: Annotated[User, Depends(get_current_active_user)],
    registry: Annotated[QuizSessionRegistry, Depends(get_quiz_registry)],
):
    """Move to the next question; the quiz completes after the last one."""
    quiz = registry.get(current_user.id)
    quiz.next()
    return build_state(quiz)


@router.delete("/quiz", status_code=status.HTTP_204_NO_CONTENT)
async def abandon_quiz(
    current_user: Annotated[User, Depends(get_current_active_user)],
    registry: Annotated[QuizSessionRegistry, Depends(get_quiz_registry)],
):
    """Discard the quiz in progress. Writes already made are kept."""
    registry.get(current_user.id).abandon()
    registry.discard(current_user.id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)

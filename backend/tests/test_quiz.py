"""Tests for the quiz session engine."""
import asyncio
import random

import pytest
from sqlalchemy.exc import OperationalError

from vocabdash.errors import (
    InvalidStateError,
    NoCandidatesError,
    NotFoundError,
    StoreError,
    ValidationError,
)
from vocabdash.models.word import Word
from vocabdash.services.history_log import HistoryLog
from vocabdash.services.quiz import QuizSession, QuizSessionRegistry, QuizState, grade


@pytest.fixture
async def words(store):
    """Three Spanish words and one German word."""
    for original, translation, language, difficulty in [
        ("casa", "house", "Spanish", "easy"),
        ("perro", "dog", "Spanish", "medium"),
        ("gato", "cat", "Spanish", "easy"),
        ("Baum", "tree", "German", "hard"),
    ]:
        await store.add(
            {"original": original, "translation": translation, "language": language, "difficulty": difficulty}
        )
    return await store.list()


@pytest.fixture
def quiz():
    return QuizSession(random.Random(42))


class TestGrading:
    """Grading is trimmed, case-insensitive exact matching."""

    @pytest.mark.parametrize("answer", ["casa", " Casa ", "CASA", "\tcasa\n"])
    def test_case_and_whitespace_insensitive(self, answer):
        assert grade(answer, "Casa")

    @pytest.mark.parametrize("answer", ["casas", "cas", "c asa", ""])
    def test_no_partial_credit(self, answer):
        assert not grade(answer, "Casa")


class TestStart:
    """Tests for starting a session."""

    async def test_count_larger_than_pool(self, quiz, words):
        """Asking for 5 of 3 matching words yields 3 distinct questions."""
        selected = quiz.start(words, language="Spanish", count=5)

        assert len(selected) == 3
        assert len({w.id for w in selected}) == 3
        assert quiz.state == QuizState.ACTIVE
        assert quiz.current_index == 0
        assert quiz.current_question == selected[0]

    async def test_filters_combine(self, quiz, words):
        selected = quiz.start(words, language="Spanish", difficulty="easy", count=10)
        assert sorted(w.original for w in selected) == ["casa", "gato"]

    async def test_no_filters_uses_all_words(self, quiz, words):
        assert len(quiz.start(words, count=10)) == 4

    async def test_count_limits_selection(self, quiz, words):
        assert len(quiz.start(words, count=2)) == 2

    async def test_default_count(self, quiz, words):
        assert len(quiz.start(words)) == 4

    async def test_same_seed_same_selection(self, words):
        first = QuizSession(random.Random(3)).start(words, count=4)
        second = QuizSession(random.Random(3)).start(words, count=4)
        assert [w.id for w in first] == [w.id for w in second]

    async def test_selection_does_not_reorder_input(self, quiz, words):
        before = [w.id for w in words]
        quiz.start(words, count=4)
        assert [w.id for w in words] == before

    async def test_no_candidates_stays_idle(self, quiz, words):
        with pytest.raises(NoCandidatesError):
            quiz.start(words, language="Italian")
        assert quiz.state == QuizState.IDLE
        assert quiz.current_question is None

    async def test_empty_word_list(self, quiz):
        with pytest.raises(NoCandidatesError):
            quiz.start([], count=3)

    @pytest.mark.parametrize("count", [0, -2])
    async def test_non_positive_count_rejected(self, quiz, words, count):
        with pytest.raises(ValidationError):
            quiz.start(words, count=count)
        assert quiz.state == QuizState.IDLE

    async def test_restart_resets_progress(self, quiz, words, store, history):
        quiz.start(words, count=2)
        question = quiz.current_question
        await quiz.submit_answer(question.id, question.translation, store, history)
        quiz.next()

        quiz.start(words, count=3)

        assert quiz.current_index == 0
        assert quiz.results == []
        assert quiz.answered is False
        assert quiz.total_questions == 3

    async def test_words_are_snapshotted(self, quiz, words, store):
        """Later edits do not change a running session's questions."""
        german = next(w for w in words if w.language == "German")
        quiz.start(words, language="German")
        await store.update(german.id, {"translation": "wood"})

        assert quiz.current_question.translation == "tree"


class TestSubmitAnswer:
    """Tests for grading answers and writing them back."""

    async def test_correct_answer_updates_word_and_history(self, quiz, words, store, history):
        quiz.start(words, count=1)
        question = quiz.current_question

        correct = await quiz.submit_answer(question.id, f"  {question.translation.upper()} ", store, history)

        assert correct is True
        word = await store.get(question.id)
        assert word.review_count == 1
        assert word.correct_count == 1
        assert word.last_reviewed is not None
        entries = await history.fetch_recent()
        assert [(e.word_id, e.correct) for e in entries] == [(question.id, True)]
        assert [r.correct for r in quiz.results] == [True]

    async def test_wrong_answer_counts_review_only(self, quiz, words, store, history):
        quiz.start(words, count=1)
        question = quiz.current_question

        assert await quiz.submit_answer(question.id, "definitely wrong", store, history) is False

        word = await store.get(question.id)
        assert (word.review_count, word.correct_count) == (1, 0)
        assert quiz.score == 0

    async def test_wrong_word_id_rejected(self, quiz, words, store, history):
        quiz.start(words, count=2)
        other = quiz.words[1]

        with pytest.raises(InvalidStateError):
            await quiz.submit_answer(other.id, other.translation, store, history)

        assert quiz.results == []
        assert (await store.get(other.id)).review_count == 0
        assert await history.fetch_recent() == []

    async def test_without_active_question(self, quiz, store, history):
        with pytest.raises(InvalidStateError):
            await quiz.submit_answer("any", "thing", store, history)

    async def test_answer_once_per_question(self, quiz, words, store, history):
        quiz.start(words, count=2)
        question = quiz.current_question
        await quiz.submit_answer(question.id, question.translation, store, history)

        with pytest.raises(InvalidStateError):
            await quiz.submit_answer(question.id, question.translation, store, history)

        assert (await store.get(question.id)).review_count == 1

    async def test_interleaved_answers_count_once(self, quiz, words, store, history):
        """A second answer sent while the first is still being saved is rejected."""
        quiz.start(words, count=2)
        question = quiz.current_question

        outcomes = await asyncio.gather(
            quiz.submit_answer(question.id, question.translation, store, history),
            quiz.submit_answer(question.id, question.translation, store, history),
            return_exceptions=True,
        )

        assert outcomes[0] is True
        assert isinstance(outcomes[1], InvalidStateError)
        assert (await store.get(question.id)).review_count == 1
        assert len(await history.fetch_recent()) == 1
        assert len(quiz.results) == 1

    async def test_failed_answer_can_be_retried(self, quiz, words, store, history, session, monkeypatch):
        quiz.start(words, count=1)
        question = quiz.current_question

        async def broken_commit():
            raise OperationalError("COMMIT", {}, Exception("database is locked"))

        monkeypatch.setattr(session, "commit", broken_commit)
        with pytest.raises(StoreError):
            await quiz.submit_answer(question.id, question.translation, store, history)
        monkeypatch.undo()

        assert await quiz.submit_answer(question.id, question.translation, store, history) is True
        assert (await store.get(question.id)).review_count == 1

    async def test_deleted_word_is_not_found(self, quiz, words, store, history):
        quiz.start(words, count=1)
        question = quiz.current_question
        await store.delete(question.id)

        with pytest.raises(NotFoundError):
            await quiz.submit_answer(question.id, question.translation, store, history)
        assert quiz.results == []

    async def test_failed_write_leaves_session_and_data_unchanged(
        self, quiz, words, store, history, session, session_maker, monkeypatch
    ):
        """Word statistics and the history entry are committed together or not at all."""
        quiz.start(words, count=1)
        question = quiz.current_question

        async def broken_commit():
            raise OperationalError("COMMIT", {}, Exception("database is locked"))

        monkeypatch.setattr(session, "commit", broken_commit)

        with pytest.raises(StoreError):
            await quiz.submit_answer(question.id, question.translation, store, history)

        assert quiz.results == []
        assert quiz.answered is False
        async with session_maker() as fresh:
            stored = await fresh.get(Word, question.id)
            assert stored.review_count == 0
            assert await HistoryLog(fresh, store.user_id).fetch_recent() == []


class TestProgression:
    """Tests for next(), score and abandoning."""

    async def test_next_walks_to_completion(self, quiz, words):
        quiz.start(words, count=2)
        second = quiz.words[1]

        assert quiz.next() == second
        assert quiz.state == QuizState.ACTIVE
        assert quiz.next() is None
        assert quiz.state == QuizState.COMPLETED
        assert quiz.current_question is None
        assert quiz.current_index == quiz.total_questions

    async def test_next_after_completion_rejected(self, quiz, words):
        quiz.start(words, count=1)
        quiz.next()
        with pytest.raises(InvalidStateError):
            quiz.next()

    async def test_next_when_idle_rejected(self, quiz):
        with pytest.raises(InvalidStateError):
            quiz.next()

    async def test_score(self, quiz, words, store, history):
        """correct, wrong, correct -> 67"""
        quiz.start(words, count=3)
        for should_pass in (True, False, True):
            question = quiz.current_question
            answer = question.translation if should_pass else "nope"
            await quiz.submit_answer(question.id, answer, store, history)
            quiz.next()

        assert quiz.state == QuizState.COMPLETED
        assert quiz.score == 67

    async def test_score_without_results(self, quiz, words):
        quiz.start(words, count=2)
        assert quiz.score == 0

    async def test_abandon(self, quiz, words):
        quiz.start(words, count=2)
        quiz.abandon()
        assert quiz.state == QuizState.IDLE
        assert quiz.total_questions == 0


class TestRegistry:
    def test_one_session_per_user(self):
        registry = QuizSessionRegistry(random.Random(1))
        assert registry.get("a") is registry.get("a")
        assert registry.get("a") is not registry.get("b")

    def test_discard(self):
        registry = QuizSessionRegistry()
        first = registry.get("a")
        registry.discard("a")
        registry.discard("a")
        assert registry.get("a") is not first

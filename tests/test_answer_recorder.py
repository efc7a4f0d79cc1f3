"""
Tests for AnswerRecorder

Tests cover:
- Saving answers and advancing the position
- Monotonic position under overwrites
- Fail-closed behaviour on completed sessions
- Validation of question ids and answers
"""
import pytest

from daily_quiz.exceptions import InvalidSessionStateError, NotFoundError, QuizValidationError
from daily_quiz.services.answer_recorder import AnswerRecorder

from tests.conftest import NOON_UTC


@pytest.fixture
def started(engine):
    quiz = engine.generate_daily_quiz("2024-01-15")
    session = engine.start_quiz_session("user-1", quiz.id, "UTC")
    return quiz, session


class TestSaveQuizAnswer:
    """Test recording answers."""
    
    def test_answer_is_stored_and_index_advances(self, engine, started):
        quiz, session = started
        
        updated = engine.save_quiz_answer(session.id, quiz.question_ids[0], "B")
        
        assert updated.answers == {quiz.question_ids[0]: "B"}
        assert updated.current_index == 1
    
    def test_last_activity_updated(self, engine, started, clock):
        quiz, session = started
        clock.advance(minutes=3)
        
        updated = engine.save_quiz_answer(session.id, quiz.question_ids[0], "B")
        
        assert updated.last_activity_at == clock()
        assert updated.started_at == NOON_UTC
    
    def test_overwriting_an_answer_keeps_position(self, engine, started):
        quiz, session = started
        engine.save_quiz_answer(session.id, quiz.question_ids[0], "A")
        engine.save_quiz_answer(session.id, quiz.question_ids[1], "A")
        
        updated = engine.save_quiz_answer(session.id, quiz.question_ids[0], "C")
        
        assert updated.answers[quiz.question_ids[0]] == "C"
        assert len(updated.answers) == 2
        assert updated.current_index == 2
    
    def test_index_never_decreases(self, engine, started):
        quiz, session = started
        answer_order = [0, 0, 2, 1, 2, 4, 3, 0]
        
        indexes = [
            engine.save_quiz_answer(session.id, quiz.question_ids[i], "A").current_index
            for i in answer_order
        ]
        
        assert indexes == sorted(indexes)
        assert indexes[-1] == 5
    
    def test_index_capped_at_question_count(self, engine, repos, started):
        quiz, session = started
        repos.sessions.put(session.model_copy(update={"current_index": 5}))
        
        updated = engine.save_quiz_answer(session.id, quiz.question_ids[0], "A")
        
        assert updated.current_index == 5
    
    def test_correctness_hint_is_not_stored(self, engine, started):
        quiz, session = started
        
        updated = engine.save_quiz_answer(session.id, quiz.question_ids[0], "D", is_correct_hint=True)
        
        assert updated.answers == {quiz.question_ids[0]: "D"}


class TestSaveQuizAnswerErrors:
    """Test rejected answers."""
    
    def test_unknown_session(self, engine):
        with pytest.raises(NotFoundError, match="Quiz session not found"):
            engine.save_quiz_answer("missing", "q1", "A")
    
    def test_completed_session_rejected(self, engine, started):
        quiz, session = started
        engine.complete_quiz_session(session.id)
        
        with pytest.raises(InvalidSessionStateError, match="not active"):
            engine.save_quiz_answer(session.id, quiz.question_ids[0], "A")
        
        assert engine.get_quiz_session(session.id).answers == {}
    
    def test_question_outside_quiz_rejected(self, engine, started):
        _, session = started
        
        with pytest.raises(QuizValidationError):
            engine.save_quiz_answer(session.id, "not-in-quiz", "A")
    
    @pytest.mark.parametrize("answer", ["", "   ", None])
    def test_empty_answer_rejected(self, engine, started, answer):
        quiz, session = started
        
        with pytest.raises(QuizValidationError):
            engine.save_quiz_answer(session.id, quiz.question_ids[0], answer)
    
    def test_completion_between_read_and_write(self, repos, clock, started):
        """A session completed after the status check still rejects the write."""
        quiz, session = started
        
        class CompletesOnRead:
            def __init__(self, inner):
                self.inner = inner
            
            def get(self, session_id):
                snapshot = self.inner.get(session_id)
                self.inner.complete(session_id, "user-1", [], clock(), 5, 0, 0, False, lambda record: record)
                return snapshot
            
            def update_progress(self, *args):
                return self.inner.update_progress(*args)
        
        recorder = AnswerRecorder(CompletesOnRead(repos.sessions), repos.quizzes, clock=clock)
        
        with pytest.raises(InvalidSessionStateError):
            recorder.save_quiz_answer(session.id, quiz.question_ids[0], "A")

"""
Tests for SessionManager

Tests cover:
- Creating a session with the initial state
- Idempotent resume, including completed sessions
- Race-safe creation
- Lookup errors and progress/timeout flags
"""
import threading

import pytest

from daily_quiz.exceptions import NotFoundError, QuizValidationError

from tests.conftest import NOON_UTC


class TestStartQuizSession:
    """Test starting a new session."""
    
    def test_new_session_initial_state(self, engine):
        quiz = engine.generate_daily_quiz("2024-01-15")
        
        session = engine.start_quiz_session("user-1", quiz.id, "America/New_York")
        
        assert session.user_id == "user-1"
        assert session.daily_quiz_id == quiz.id
        assert session.current_index == 0
        assert session.answers == {}
        assert session.status == "in_progress"
        assert session.timezone == "America/New_York"
        assert session.started_at == NOON_UTC
        assert session.last_activity_at == NOON_UTC
        assert session.completed_at is None
    
    def test_default_timezone_is_utc(self, engine):
        quiz = engine.generate_daily_quiz("2024-01-15")
        assert engine.start_quiz_session("user-1", quiz.id).timezone == "UTC"
    
    def test_unknown_quiz_rejected(self, engine):
        with pytest.raises(NotFoundError):
            engine.start_quiz_session("user-1", "no-such-quiz", "UTC")
    
    def test_unknown_timezone_rejected(self, engine):
        quiz = engine.generate_daily_quiz("2024-01-15")
        with pytest.raises(QuizValidationError):
            engine.start_quiz_session("user-1", quiz.id, "Not/AZone")
    
    def test_users_get_separate_sessions(self, engine):
        quiz = engine.generate_daily_quiz("2024-01-15")
        
        first = engine.start_quiz_session("user-1", quiz.id)
        second = engine.start_quiz_session("user-2", quiz.id)
        
        assert first.id != second.id


class TestResumeQuizSession:
    """Test idempotent resume semantics."""
    
    def test_second_start_returns_same_session(self, engine):
        quiz = engine.generate_daily_quiz("2024-01-15")
        
        first = engine.start_quiz_session("user-1", quiz.id, "UTC")
        second = engine.start_quiz_session("user-1", quiz.id, "UTC")
        
        assert first.id == second.id
    
    def test_resume_mid_quiz_keeps_progress(self, engine, clock):
        """Resuming at index 2 with two answers returns that exact session."""
        quiz = engine.generate_daily_quiz("2024-01-15")
        session = engine.start_quiz_session("user-1", quiz.id, "UTC")
        engine.save_quiz_answer(session.id, quiz.question_ids[0], "A")
        clock.advance(minutes=5)
        engine.save_quiz_answer(session.id, quiz.question_ids[1], "B")
        
        resumed = engine.start_quiz_session("user-1", quiz.id, "UTC")
        
        assert resumed.id == session.id
        assert resumed.current_index == 2
        assert len(resumed.answers) == 2
        assert resumed.status == "in_progress"
    
    def test_completed_session_returned_as_is(self, engine):
        quiz = engine.generate_daily_quiz("2024-01-15")
        session = engine.start_quiz_session("user-1", quiz.id)
        engine.complete_quiz_session(session.id)
        
        again = engine.start_quiz_session("user-1", quiz.id)
        
        assert again.id == session.id
        assert again.status == "completed"
    
    def test_resume_ignores_new_timezone(self, engine):
        quiz = engine.generate_daily_quiz("2024-01-15")
        engine.start_quiz_session("user-1", quiz.id, "Asia/Tokyo")
        
        assert engine.start_quiz_session("user-1", quiz.id, "UTC").timezone == "Asia/Tokyo"
    
    def test_concurrent_starts_create_one_session(self, engine, repos):
        quiz = engine.generate_daily_quiz("2024-01-15")
        barrier = threading.Barrier(8)
        ids = []
        
        def worker():
            barrier.wait()
            ids.append(engine.start_quiz_session("user-1", quiz.id, "UTC").id)
        
        threads = [threading.Thread(target=worker) for _ in range(8)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()
        
        assert len(ids) == 8
        assert len(set(ids)) == 1
        assert len(repos.sessions._sessions) == 1


class TestSessionLookup:
    """Test reading sessions back."""
    
    def test_get_quiz_session(self, engine):
        quiz = engine.generate_daily_quiz("2024-01-15")
        session = engine.start_quiz_session("user-1", quiz.id)
        
        assert engine.get_quiz_session(session.id).id == session.id
    
    def test_unknown_session_message(self, engine):
        with pytest.raises(NotFoundError, match="Quiz session not found"):
            engine.get_quiz_session("missing")
    
    def test_find_session_returns_none_when_absent(self, engine):
        quiz = engine.generate_daily_quiz("2024-01-15")
        assert engine.session_manager.find_session("nobody", quiz.id) is None


class TestSessionProgress:
    """Test progress view and timeout flags."""
    
    def test_fresh_session_progress(self, engine):
        quiz = engine.generate_daily_quiz("2024-01-15")
        session = engine.start_quiz_session("user-1", quiz.id)
        
        progress = engine.get_session_progress(session.id)
        
        assert progress.answered == 0
        assert progress.total == 5
        assert progress.percentage == 0
        assert progress.current_question.id == quiz.question_ids[0]
        assert progress.can_continue is True
        assert progress.is_expired is False
        assert progress.is_inactive is False
    
    def test_progress_after_answers(self, engine):
        quiz = engine.generate_daily_quiz("2024-01-15")
        session = engine.start_quiz_session("user-1", quiz.id)
        for question_id in quiz.question_ids[:3]:
            engine.save_quiz_answer(session.id, question_id, "A")
        
        progress = engine.get_session_progress(session.id)
        
        assert progress.answered == 3
        assert progress.percentage == 60
        assert progress.current_question.id == quiz.question_ids[3]
    
    def test_no_current_question_when_all_answered(self, engine):
        quiz = engine.generate_daily_quiz("2024-01-15")
        session = engine.start_quiz_session("user-1", quiz.id)
        for question_id in quiz.question_ids:
            engine.save_quiz_answer(session.id, question_id, "A")
        
        progress = engine.get_session_progress(session.id)
        
        assert progress.percentage == 100
        assert progress.current_question is None
    
    def test_inactive_after_an_hour(self, engine, clock):
        quiz = engine.generate_daily_quiz("2024-01-15")
        session = engine.start_quiz_session("user-1", quiz.id)
        clock.advance(minutes=61)
        
        progress = engine.get_session_progress(session.id)
        
        assert progress.is_inactive is True
        assert progress.is_expired is False
        assert progress.can_continue is True
    
    def test_expired_after_a_day(self, engine, clock):
        quiz = engine.generate_daily_quiz("2024-01-15")
        session = engine.start_quiz_session("user-1", quiz.id)
        clock.advance(hours=25)
        
        progress = engine.get_session_progress(session.id)
        
        assert progress.is_expired is True
        assert progress.can_continue is False
        assert progress.time_elapsed == 25 * 3600
    
    def test_completed_session_cannot_continue(self, engine):
        quiz = engine.generate_daily_quiz("2024-01-15")
        session = engine.start_quiz_session("user-1", quiz.id)
        engine.complete_quiz_session(session.id)
        
        assert engine.get_session_progress(session.id).can_continue is False

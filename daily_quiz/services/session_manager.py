"""
Quiz session lifecycle service
Creates, resumes and reports on a user's attempt at a daily quiz
"""
import logging
from datetime import datetime
from typing import Callable, Optional

from daily_quiz.config import settings
from daily_quiz.exceptions import NotFoundError
from daily_quiz.repositories import DailyQuizRepository, QuestionPool, SessionRepository
from daily_quiz.schemas.session import QuizSessionRecord, SessionProgress
from daily_quiz.utils.dates import resolve_timezone, utc_now
from daily_quiz.utils.scoring import percentage

logger = logging.getLogger(__name__)


class SessionManager:
    """
    Service for starting and resuming quiz sessions
    
    A user has at most one session per daily quiz. Starting again returns
    that session whatever its status, so a page reload or a second tab
    resumes instead of restarting.
    """
    
    def __init__(
        self,
        sessions: SessionRepository,
        quizzes: DailyQuizRepository,
        questions: QuestionPool,
        clock: Callable[[], datetime] = utc_now,
        session_timeout: Optional[int] = None,
        inactivity_timeout: Optional[int] = None
    ):
        self.sessions = sessions
        self.quizzes = quizzes
        self.questions = questions
        self.clock = clock
        self.session_timeout = session_timeout or settings.SESSION_TIMEOUT_SECONDS
        self.inactivity_timeout = inactivity_timeout or settings.SESSION_INACTIVITY_SECONDS
    
    def start_quiz_session(
        self,
        user_id: str,
        daily_quiz_id: str,
        timezone: str = None
    ) -> QuizSessionRecord:
        """
        Start a session, or return the one the user already has
        
        Args:
            user_id: Caller's user id
            daily_quiz_id: Quiz the session belongs to
            timezone: IANA timezone the user plays in
            
        Returns:
            Existing session (any status) or a new in-progress session
        """
        timezone = timezone or settings.DEFAULT_TIMEZONE
        resolve_timezone(timezone)
        
        existing = self.sessions.find(user_id, daily_quiz_id)
        if existing:
            logger.info(
                f"Resuming quiz session {existing.id} for user {user_id} "
                f"(status={existing.status}, index={existing.current_index})"
            )
            return existing
        
        if self.quizzes.get(daily_quiz_id) is None:
            raise NotFoundError("Daily quiz not found")
        
        session, created = self.sessions.insert_if_absent(
            user_id,
            daily_quiz_id,
            timezone,
            self.clock()
        )
        if created:
            logger.info(f"Quiz session created: {session.id} for user {user_id}, quiz {daily_quiz_id}")
        
        return session
    
    def get_quiz_session(self, session_id: str) -> QuizSessionRecord:
        """Load a session or raise NotFoundError"""
        session = self.sessions.get(session_id)
        if session is None:
            raise NotFoundError("Quiz session not found")
        return session
    
    def find_session(self, user_id: str, daily_quiz_id: str) -> Optional[QuizSessionRecord]:
        return self.sessions.find(user_id, daily_quiz_id)
    
    def get_session_progress(self, session_id: str) -> SessionProgress:
        """
        Session state with progress and timeout flags
        
        A session is expired once it is older than the session timeout and
        inactive once nothing was answered for the inactivity timeout.
        """
        session = self.get_quiz_session(session_id)
        
        quiz = self.quizzes.get(session.daily_quiz_id)
        if quiz is None:
            raise NotFoundError("Quiz not found")
        
        total = len(quiz.question_ids)
        answered = len(session.answers)
        
        current_question = None
        if session.current_index < total:
            current_id = quiz.question_ids[session.current_index]
            found = self.questions.get_many([current_id])
            if found:
                current_question = found[0].public()
        
        now = self.clock()
        time_elapsed = (now - session.started_at).total_seconds()
        time_since_last_activity = (now - session.last_activity_at).total_seconds()
        is_expired = time_elapsed > self.session_timeout
        
        return SessionProgress(
            session=session,
            answered=answered,
            total=total,
            percentage=percentage(answered, total),
            current_question=current_question,
            is_expired=is_expired,
            is_inactive=time_since_last_activity > self.inactivity_timeout,
            can_continue=session.status == "in_progress" and not is_expired,
            time_elapsed=time_elapsed,
            time_since_last_activity=time_since_last_activity
        )

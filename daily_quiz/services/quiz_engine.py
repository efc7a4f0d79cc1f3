"""
Quiz engine facade
Wires every service over one set of repositories
"""
import random
from datetime import date, datetime
from typing import Callable, Dict, Optional, Union

from daily_quiz.repositories import Repositories
from daily_quiz.schemas.quiz import DailyQuizRecord
from daily_quiz.schemas.session import QuizResult, QuizSessionRecord, SessionProgress
from daily_quiz.schemas.status import StreakRecord, UserQuizStatus
from daily_quiz.services.answer_recorder import AnswerRecorder
from daily_quiz.services.quiz_composer import QuizComposer
from daily_quiz.services.scorer import Scorer
from daily_quiz.services.session_manager import SessionManager
from daily_quiz.services.status_aggregator import StatusAggregator
from daily_quiz.services.streak_tracker import StreakTracker
from daily_quiz.utils.cache import CacheService
from daily_quiz.utils.dates import utc_now


class QuizEngine:
    """Entry point for the API layer; one instance per request"""
    
    def __init__(
        self,
        repositories: Repositories,
        cache: Optional[CacheService] = None,
        clock: Callable[[], datetime] = utc_now,
        rng: Optional[random.Random] = None,
        distribution: Optional[Dict[str, int]] = None
    ):
        self.repositories = repositories
        self.composer = QuizComposer(
            repositories.quizzes,
            repositories.questions,
            cache=cache,
            distribution=distribution,
            rng=rng,
            clock=clock
        )
        self.session_manager = SessionManager(
            repositories.sessions,
            repositories.quizzes,
            repositories.questions,
            clock=clock
        )
        self.answer_recorder = AnswerRecorder(
            repositories.sessions,
            repositories.quizzes,
            clock=clock
        )
        self.streak_tracker = StreakTracker(repositories.streaks)
        self.scorer = Scorer(
            repositories.sessions,
            repositories.quizzes,
            repositories.questions,
            repositories.attempts,
            self.streak_tracker,
            clock=clock
        )
        self.status_aggregator = StatusAggregator(
            self.composer,
            self.session_manager,
            self.streak_tracker,
            clock=clock
        )
    
    def generate_daily_quiz(self, quiz_date: Union[str, date]) -> DailyQuizRecord:
        return self.composer.generate_daily_quiz(quiz_date)
    
    def get_current_daily_quiz(self, timezone: str = None) -> DailyQuizRecord:
        return self.composer.get_current_daily_quiz(timezone)
    
    def start_quiz_session(self, user_id: str, daily_quiz_id: str, timezone: str = None) -> QuizSessionRecord:
        return self.session_manager.start_quiz_session(user_id, daily_quiz_id, timezone)
    
    def get_quiz_session(self, session_id: str) -> QuizSessionRecord:
        return self.session_manager.get_quiz_session(session_id)
    
    def get_session_progress(self, session_id: str) -> SessionProgress:
        return self.session_manager.get_session_progress(session_id)
    
    def save_quiz_answer(
        self,
        session_id: str,
        question_id: str,
        answer: str,
        is_correct_hint: Optional[bool] = None
    ) -> QuizSessionRecord:
        return self.answer_recorder.save_quiz_answer(session_id, question_id, answer, is_correct_hint)
    
    def complete_quiz_session(self, session_id: str) -> QuizResult:
        return self.scorer.complete_quiz_session(session_id)
    
    def get_user_quiz_status(self, user_id: str, timezone: str = None) -> UserQuizStatus:
        return self.status_aggregator.get_user_quiz_status(user_id, timezone)
    
    def has_completed_daily_quiz(self, user_id: str, timezone: str = None) -> bool:
        return self.status_aggregator.has_completed_daily_quiz(user_id, timezone)
    
    def get_streak(self, user_id: str) -> StreakRecord:
        return self.streak_tracker.get_streak(user_id)

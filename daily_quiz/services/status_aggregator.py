"""
Per-user daily quiz status
"""
import logging
from datetime import datetime
from typing import Callable

from daily_quiz.config import settings
from daily_quiz.schemas.status import StreakInfo, UserQuizStatus
from daily_quiz.services.quiz_composer import QuizComposer
from daily_quiz.services.session_manager import SessionManager
from daily_quiz.services.streak_tracker import StreakTracker
from daily_quiz.utils.dates import local_date, utc_now

logger = logging.getLogger(__name__)


class StatusAggregator:
    """Combines today's quiz, the user's session and streak into one view"""
    
    def __init__(
        self,
        composer: QuizComposer,
        session_manager: SessionManager,
        streak_tracker: StreakTracker,
        clock: Callable[[], datetime] = utc_now
    ):
        self.composer = composer
        self.session_manager = session_manager
        self.streak_tracker = streak_tracker
        self.clock = clock
    
    def get_user_quiz_status(self, user_id: str, timezone: str = None) -> UserQuizStatus:
        """
        Status of today's quiz for a user
        
        "Today" is the calendar date in the user's timezone. Today's quiz
        is composed if nobody has requested it yet.
        """
        timezone = timezone or settings.DEFAULT_TIMEZONE
        today = local_date(timezone, self.clock())
        
        todays_quiz = self.composer.generate_daily_quiz(today)
        session = self.session_manager.find_session(user_id, todays_quiz.id)
        streak = self.streak_tracker.get_streak(user_id)
        
        has_completed_today = session is not None and session.status == "completed"
        current_session = session if session is not None and session.status == "in_progress" else None
        
        logger.debug(
            f"Status for user {user_id} on {today}: completed={has_completed_today}, "
            f"active_session={current_session.id if current_session else None}"
        )
        
        return UserQuizStatus(
            has_completed_today=has_completed_today,
            current_session=current_session,
            todays_quiz=todays_quiz,
            streak_info=StreakInfo(
                current=streak.current_streak,
                longest=streak.longest_streak
            )
        )
    
    def has_completed_daily_quiz(self, user_id: str, timezone: str = None) -> bool:
        """Whether today's quiz is completed; never composes a missing quiz"""
        timezone = timezone or settings.DEFAULT_TIMEZONE
        today = local_date(timezone, self.clock())
        
        quiz = self.composer.find_daily_quiz(today)
        if quiz is None:
            return False
        
        session = self.session_manager.find_session(user_id, quiz.id)
        return session is not None and session.status == "completed"

"""
Pydantic schemas for streaks and the per-user status view
"""
from datetime import date, datetime
from pydantic import BaseModel
from typing import Optional

from daily_quiz.schemas.base import EngineRecord
from daily_quiz.schemas.quiz import DailyQuizRecord
from daily_quiz.schemas.session import QuizSessionRecord


class StreakRecord(EngineRecord):
    """Consecutive perfect completion counters for a user"""
    user_id: str
    current_streak: int = 0
    longest_streak: int = 0
    last_perfect_date: Optional[date] = None
    updated_at: Optional[datetime] = None


class StreakInfo(BaseModel):
    current: int
    longest: int


class UserQuizStatus(BaseModel):
    """Everything a client needs to render today's quiz entry point"""
    has_completed_today: bool
    current_session: Optional[QuizSessionRecord] = None
    todays_quiz: DailyQuizRecord
    streak_info: StreakInfo

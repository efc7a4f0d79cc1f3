"""
Streak model - consecutive perfect daily quiz completions
"""
from sqlalchemy import Column, String, Integer, Date, TIMESTAMP
from daily_quiz.database import Base
from daily_quiz.utils.dates import utc_now


class Streak(Base):
    """
    Streaks table - one row per user, upserted on session completion
    """
    __tablename__ = "streaks"
    
    user_id = Column(String(64), primary_key=True)
    current_streak = Column(Integer, nullable=False, default=0)
    longest_streak = Column(Integer, nullable=False, default=0)
    last_perfect_date = Column(Date, nullable=True)
    updated_at = Column(TIMESTAMP(timezone=True), nullable=False, default=utc_now, onupdate=utc_now)
    
    def __repr__(self):
        return f"<Streak(user_id={self.user_id}, current={self.current_streak}, longest={self.longest_streak})>"

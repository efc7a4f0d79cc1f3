"""
QuizSession model - a user's attempt at a daily quiz
"""
from sqlalchemy import Column, String, Integer, Boolean, TIMESTAMP, ForeignKey, UniqueConstraint
from daily_quiz.database import Base
from daily_quiz.models.types import JSONType, new_id
from daily_quiz.utils.dates import utc_now


class QuizSession(Base):
    """
    Quiz sessions table - at most one row per (user_id, daily_quiz_id)
    
    Score columns stay NULL until the session is completed.
    """
    __tablename__ = "quiz_sessions"
    
    id = Column(String(36), primary_key=True, default=new_id)
    user_id = Column(String(64), nullable=False, index=True)
    daily_quiz_id = Column(String(36), ForeignKey("daily_quizzes.id"), nullable=False)
    current_index = Column(Integer, nullable=False, default=0)
    answers = Column(JSONType, nullable=False, default=dict)  # {question_id: answer}
    status = Column(String(20), nullable=False, default="in_progress")
    timezone = Column(String(64), nullable=False, default="UTC")
    started_at = Column(TIMESTAMP(timezone=True), nullable=False, default=utc_now)
    last_activity_at = Column(TIMESTAMP(timezone=True), nullable=False, default=utc_now)
    completed_at = Column(TIMESTAMP(timezone=True), nullable=True)
    
    # Written once by the scorer
    total_questions = Column(Integer, nullable=True)
    correct_answers = Column(Integer, nullable=True)
    score = Column(Integer, nullable=True)
    streak_updated = Column(Boolean, nullable=True)
    
    __table_args__ = (
        UniqueConstraint("user_id", "daily_quiz_id", name="uq_quiz_sessions_user_quiz"),
    )
    
    def __repr__(self):
        return f"<QuizSession(id={self.id}, user_id={self.user_id}, status={self.status})>"

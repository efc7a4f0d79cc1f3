"""
QuizAttempt model - immutable per-question grading records
"""
from sqlalchemy import Column, String, Boolean, TIMESTAMP, ForeignKey, UniqueConstraint
from daily_quiz.database import Base
from daily_quiz.models.types import new_id
from daily_quiz.utils.dates import utc_now


class QuizAttempt(Base):
    """
    Quiz attempts table - one row per question of a completed session
    """
    __tablename__ = "quiz_attempts"
    
    id = Column(String(36), primary_key=True, default=new_id)
    session_id = Column(String(36), ForeignKey("quiz_sessions.id"), nullable=False, index=True)
    user_id = Column(String(64), nullable=False, index=True)
    question_id = Column(String(36), nullable=False)
    submitted_answer = Column(String(255), nullable=True)  # NULL when unanswered
    is_correct = Column(Boolean, nullable=False)
    recorded_at = Column(TIMESTAMP(timezone=True), nullable=False, default=utc_now)
    
    __table_args__ = (
        UniqueConstraint("session_id", "question_id", name="uq_quiz_attempts_session_question"),
    )
    
    def __repr__(self):
        return f"<QuizAttempt(session_id={self.session_id}, question_id={self.question_id}, correct={self.is_correct})>"

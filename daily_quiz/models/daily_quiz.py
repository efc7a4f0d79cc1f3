"""
DailyQuiz model - one fixed question set per calendar day
"""
from sqlalchemy import Column, String, Date, TIMESTAMP
from daily_quiz.database import Base
from daily_quiz.models.types import JSONType, new_id
from daily_quiz.utils.dates import utc_now


class DailyQuiz(Base):
    """
    Daily quizzes table - the unique constraint on date is what makes
    concurrent composition converge on a single row
    """
    __tablename__ = "daily_quizzes"
    
    id = Column(String(36), primary_key=True, default=new_id)
    date = Column(Date, unique=True, nullable=False, index=True)
    question_ids = Column(JSONType, nullable=False)  # ordered question ids
    created_at = Column(TIMESTAMP(timezone=True), nullable=False, default=utc_now)
    
    def __repr__(self):
        return f"<DailyQuiz(id={self.id}, date={self.date})>"

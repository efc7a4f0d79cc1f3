"""
Question model - approved questions served by the question pool
"""
from sqlalchemy import Column, String, Text, TIMESTAMP, Index
from daily_quiz.database import Base
from daily_quiz.models.types import JSONType, new_id
from daily_quiz.utils.dates import utc_now


class Question(Base):
    """
    Questions table - authored and moderated outside this service, read-only here
    """
    __tablename__ = "questions"
    
    id = Column(String(36), primary_key=True, default=new_id)
    verse_ref = Column(String(20), nullable=False)  # "2:255"
    prompt = Column(Text, nullable=False)
    choices = Column(JSONType, nullable=False)  # ["A ...", "B ...", ...]
    correct_answer = Column(String(255), nullable=False)
    difficulty = Column(String(10), nullable=False)  # easy | medium | hard
    approved_at = Column(TIMESTAMP(timezone=True), nullable=True)
    created_at = Column(TIMESTAMP(timezone=True), nullable=False, default=utc_now)
    
    __table_args__ = (
        Index("ix_questions_difficulty_approved", "difficulty", "approved_at"),
    )
    
    def __repr__(self):
        return f"<Question(id={self.id}, difficulty={self.difficulty}, verse_ref={self.verse_ref})>"

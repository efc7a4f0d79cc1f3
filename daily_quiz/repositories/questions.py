"""
Question pool - read-only access to approved questions
"""
from abc import ABC, abstractmethod
from typing import Iterable, List, Optional

from sqlalchemy.orm import Session

from daily_quiz.models import Question
from daily_quiz.repositories.base import store_errors
from daily_quiz.schemas.quiz import QuestionRecord


class QuestionPool(ABC):
    """Provider of approved questions, owned outside this service"""
    
    @abstractmethod
    def list_approved(self, difficulty: str, limit: Optional[int] = None) -> List[QuestionRecord]:
        """Approved questions of one difficulty, newest first"""
    
    @abstractmethod
    def get_many(self, question_ids: Iterable[str]) -> List[QuestionRecord]:
        """Questions for the given ids, in no particular order"""


class SqlQuestionPool(QuestionPool):
    
    def __init__(self, db: Session):
        self.db = db
    
    def list_approved(self, difficulty: str, limit: Optional[int] = None) -> List[QuestionRecord]:
        with store_errors(self.db, f"fetch {difficulty} questions"):
            query = (
                self.db.query(Question)
                .filter(Question.difficulty == difficulty)
                .filter(Question.approved_at.isnot(None))
                .order_by(Question.created_at.desc(), Question.id)
            )
            if limit is not None:
                query = query.limit(limit)
            return [QuestionRecord.model_validate(row) for row in query.all()]
    
    def get_many(self, question_ids: Iterable[str]) -> List[QuestionRecord]:
        ids = list(question_ids)
        if not ids:
            return []
        with store_errors(self.db, "fetch quiz questions"):
            rows = self.db.query(Question).filter(Question.id.in_(ids)).all()
            return [QuestionRecord.model_validate(row) for row in rows]

"""
Read access to per-question attempt records

Attempts are written by SessionRepository.complete, in the same
transaction that marks the session completed.
"""
from abc import ABC, abstractmethod
from typing import List

from sqlalchemy.orm import Session

from daily_quiz.models import QuizAttempt
from daily_quiz.repositories.base import store_errors
from daily_quiz.schemas.session import AttemptRecord


class AttemptRepository(ABC):
    
    @abstractmethod
    def list_for_session(self, session_id: str) -> List[AttemptRecord]:
        ...


class SqlAttemptRepository(AttemptRepository):
    
    def __init__(self, db: Session):
        self.db = db
    
    def list_for_session(self, session_id: str) -> List[AttemptRecord]:
        with store_errors(self.db, "load quiz attempts"):
            rows = (
                self.db.query(QuizAttempt)
                .filter(QuizAttempt.session_id == session_id)
                .all()
            )
            return [AttemptRecord.model_validate(row) for row in rows]

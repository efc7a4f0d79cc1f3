"""
Daily quiz storage with insert-if-absent creation keyed by date
"""
import logging
from abc import ABC, abstractmethod
from datetime import date, datetime
from typing import List, Optional, Tuple

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from daily_quiz.exceptions import PersistenceError
from daily_quiz.models import DailyQuiz
from daily_quiz.repositories.base import store_errors
from daily_quiz.schemas.quiz import DailyQuizRecord

logger = logging.getLogger(__name__)


class DailyQuizRepository(ABC):
    
    @abstractmethod
    def get(self, quiz_id: str) -> Optional[DailyQuizRecord]:
        ...
    
    @abstractmethod
    def get_by_date(self, quiz_date: date) -> Optional[DailyQuizRecord]:
        ...
    
    @abstractmethod
    def insert_if_absent(
        self,
        quiz_date: date,
        question_ids: List[str],
        created_at: datetime
    ) -> Tuple[DailyQuizRecord, bool]:
        """
        Create the quiz for ``quiz_date`` unless one already exists
        
        Returns:
            Tuple of (stored quiz, whether this call created it). When another
            writer won the race the stored quiz is theirs.
        """


class SqlDailyQuizRepository(DailyQuizRepository):
    
    def __init__(self, db: Session):
        self.db = db
    
    def get(self, quiz_id: str) -> Optional[DailyQuizRecord]:
        with store_errors(self.db, "load daily quiz"):
            row = self.db.query(DailyQuiz).filter(DailyQuiz.id == quiz_id).first()
            return DailyQuizRecord.model_validate(row) if row else None
    
    def get_by_date(self, quiz_date: date) -> Optional[DailyQuizRecord]:
        with store_errors(self.db, "load daily quiz"):
            row = self.db.query(DailyQuiz).filter(DailyQuiz.date == quiz_date).first()
            return DailyQuizRecord.model_validate(row) if row else None
    
    def insert_if_absent(
        self,
        quiz_date: date,
        question_ids: List[str],
        created_at: datetime
    ) -> Tuple[DailyQuizRecord, bool]:
        quiz = DailyQuiz(date=quiz_date, question_ids=list(question_ids), created_at=created_at)
        self.db.add(quiz)
        
        try:
            self.db.commit()
        except IntegrityError:
            # Unique constraint on date: another request created it first
            self.db.rollback()
            existing = self.get_by_date(quiz_date)
            if existing is None:
                raise PersistenceError(f"Failed to create daily quiz for {quiz_date}")
            logger.warning(f"Daily quiz for {quiz_date} created concurrently, using {existing.id}")
            return existing, False
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Failed to create daily quiz: {str(e)}")
            raise PersistenceError(f"Failed to create daily quiz: {str(e)}") from e
        
        self.db.refresh(quiz)
        return DailyQuizRecord.model_validate(quiz), True

"""
Quiz session storage

Creation is insert-if-absent on (user_id, daily_quiz_id). Answer writes and
completion are conditional updates on ``status = 'in_progress'``, so a
completed session can never be mutated and can only be completed once.
Completion also applies the streak change in the same transaction.
"""
import logging
from abc import ABC, abstractmethod
from datetime import datetime
from typing import Dict, List, Optional, Tuple

from sqlalchemy import update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from daily_quiz.exceptions import PersistenceError
from daily_quiz.models import QuizAttempt, QuizSession
from daily_quiz.repositories.base import store_errors
from daily_quiz.repositories.streaks import StreakMutation, apply_streak_mutation
from daily_quiz.schemas.session import AttemptRecord, QuizSessionRecord

logger = logging.getLogger(__name__)


class SessionRepository(ABC):
    
    @abstractmethod
    def get(self, session_id: str) -> Optional[QuizSessionRecord]:
        ...
    
    @abstractmethod
    def find(self, user_id: str, daily_quiz_id: str) -> Optional[QuizSessionRecord]:
        ...
    
    @abstractmethod
    def insert_if_absent(
        self,
        user_id: str,
        daily_quiz_id: str,
        timezone: str,
        now: datetime
    ) -> Tuple[QuizSessionRecord, bool]:
        """Create a fresh in-progress session unless the pair already has one"""
    
    @abstractmethod
    def update_progress(
        self,
        session_id: str,
        answers: Dict[str, str],
        current_index: int,
        last_activity_at: datetime
    ) -> Optional[QuizSessionRecord]:
        """
        Overwrite answers and position of an in-progress session
        
        Returns:
            Updated session, or None when the session is not in progress
        """
    
    @abstractmethod
    def complete(
        self,
        session_id: str,
        user_id: str,
        attempts: List[AttemptRecord],
        completed_at: datetime,
        total_questions: int,
        correct_answers: int,
        score: int,
        streak_updated: bool,
        streak_mutation: StreakMutation
    ) -> bool:
        """
        Atomically complete an in-progress session
        
        The status flip, the attempts and the user's streak change are
        written together or not at all.
        
        Returns:
            False when the session was already completed (nothing written)
        """


class SqlSessionRepository(SessionRepository):
    
    def __init__(self, db: Session):
        self.db = db
    
    def get(self, session_id: str) -> Optional[QuizSessionRecord]:
        with store_errors(self.db, "load quiz session"):
            row = self.db.query(QuizSession).filter(QuizSession.id == session_id).first()
            return QuizSessionRecord.model_validate(row) if row else None
    
    def find(self, user_id: str, daily_quiz_id: str) -> Optional[QuizSessionRecord]:
        with store_errors(self.db, "load quiz session"):
            row = (
                self.db.query(QuizSession)
                .filter(
                    QuizSession.user_id == user_id,
                    QuizSession.daily_quiz_id == daily_quiz_id
                )
                .first()
            )
            return QuizSessionRecord.model_validate(row) if row else None
    
    def insert_if_absent(
        self,
        user_id: str,
        daily_quiz_id: str,
        timezone: str,
        now: datetime
    ) -> Tuple[QuizSessionRecord, bool]:
        session = QuizSession(
            user_id=user_id,
            daily_quiz_id=daily_quiz_id,
            current_index=0,
            answers={},
            status="in_progress",
            timezone=timezone,
            started_at=now,
            last_activity_at=now
        )
        self.db.add(session)
        
        try:
            self.db.commit()
        except IntegrityError:
            # Unique constraint on (user_id, daily_quiz_id)
            self.db.rollback()
            existing = self.find(user_id, daily_quiz_id)
            if existing is None:
                raise PersistenceError("Failed to create quiz session")
            logger.warning(
                f"Quiz session for user {user_id} and quiz {daily_quiz_id} "
                f"created concurrently, using {existing.id}"
            )
            return existing, False
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Failed to create quiz session: {str(e)}")
            raise PersistenceError(f"Failed to create quiz session: {str(e)}") from e
        
        self.db.refresh(session)
        return QuizSessionRecord.model_validate(session), True
    
    def update_progress(
        self,
        session_id: str,
        answers: Dict[str, str],
        current_index: int,
        last_activity_at: datetime
    ) -> Optional[QuizSessionRecord]:
        with store_errors(self.db, "save answer"):
            result = self.db.execute(
                update(QuizSession)
                .where(QuizSession.id == session_id, QuizSession.status == "in_progress")
                .values(
                    answers=dict(answers),
                    current_index=current_index,
                    last_activity_at=last_activity_at
                )
                .execution_options(synchronize_session=False)
            )
            if result.rowcount == 0:
                self.db.rollback()
                return None
            self.db.commit()
        
        return self.get(session_id)
    
    def complete(
        self,
        session_id: str,
        user_id: str,
        attempts: List[AttemptRecord],
        completed_at: datetime,
        total_questions: int,
        correct_answers: int,
        score: int,
        streak_updated: bool,
        streak_mutation: StreakMutation
    ) -> bool:
        args = (
            session_id, user_id, attempts, completed_at,
            total_questions, correct_answers, score, streak_updated, streak_mutation
        )
        with store_errors(self.db, "complete quiz session"):
            try:
                return self._complete(*args)
            except IntegrityError:
                # The user's first streak row was created concurrently; the
                # whole completion was rolled back and can run again
                self.db.rollback()
                logger.warning(f"Streak row for user {user_id} created concurrently, retrying completion")
            return self._complete(*args)
    
    def _complete(
        self,
        session_id: str,
        user_id: str,
        attempts: List[AttemptRecord],
        completed_at: datetime,
        total_questions: int,
        correct_answers: int,
        score: int,
        streak_updated: bool,
        streak_mutation: StreakMutation
    ) -> bool:
        result = self.db.execute(
            update(QuizSession)
            .where(QuizSession.id == session_id, QuizSession.status == "in_progress")
            .values(
                status="completed",
                completed_at=completed_at,
                total_questions=total_questions,
                correct_answers=correct_answers,
                score=score,
                streak_updated=streak_updated
            )
            .execution_options(synchronize_session=False)
        )
        if result.rowcount == 0:
            self.db.rollback()
            return False
        
        self.db.add_all([
            QuizAttempt(
                session_id=attempt.session_id,
                user_id=attempt.user_id,
                question_id=attempt.question_id,
                submitted_answer=attempt.submitted_answer,
                is_correct=attempt.is_correct,
                recorded_at=attempt.recorded_at
            )
            for attempt in attempts
        ])
        apply_streak_mutation(self.db, user_id, streak_mutation)
        self.db.commit()
        
        return True

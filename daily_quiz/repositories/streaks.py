"""
Streak storage with atomic per-user read-modify-write
"""
import logging
from abc import ABC, abstractmethod
from typing import Callable, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from daily_quiz.models import Streak
from daily_quiz.repositories.base import store_errors
from daily_quiz.schemas.status import StreakRecord

logger = logging.getLogger(__name__)

StreakMutation = Callable[[StreakRecord], StreakRecord]


class StreakRepository(ABC):
    
    @abstractmethod
    def get(self, user_id: str) -> Optional[StreakRecord]:
        ...
    
    @abstractmethod
    def update(self, user_id: str, mutate: StreakMutation) -> StreakRecord:
        """
        Apply ``mutate`` to the user's record atomically, creating it first if needed
        
        ``mutate`` receives the current record (zeros for a new user) and
        returns the record to store.
        """


def apply_streak_mutation(db: Session, user_id: str, mutate: StreakMutation) -> Streak:
    """
    Lock the user's streak row and apply ``mutate`` to it, without committing
    
    A missing row is added to the session; committing it can raise
    IntegrityError when a concurrent transaction created the same user's row.
    """
    row = (
        db.query(Streak)
        .filter(Streak.user_id == user_id)
        .with_for_update()
        .first()
    )
    current = StreakRecord.model_validate(row) if row else StreakRecord(user_id=user_id)
    updated = mutate(current)
    
    if row is None:
        row = Streak(user_id=user_id)
        db.add(row)
    row.current_streak = updated.current_streak
    row.longest_streak = updated.longest_streak
    row.last_perfect_date = updated.last_perfect_date
    return row


class SqlStreakRepository(StreakRepository):
    
    def __init__(self, db: Session):
        self.db = db
    
    def get(self, user_id: str) -> Optional[StreakRecord]:
        with store_errors(self.db, "load streak"):
            row = self.db.query(Streak).filter(Streak.user_id == user_id).first()
            return StreakRecord.model_validate(row) if row else None
    
    def update(self, user_id: str, mutate: StreakMutation) -> StreakRecord:
        with store_errors(self.db, "update streak"):
            try:
                row = apply_streak_mutation(self.db, user_id, mutate)
                self.db.commit()
            except IntegrityError:
                # First row for this user created concurrently; re-run against it
                self.db.rollback()
                logger.warning(f"Streak row for user {user_id} created concurrently, retrying update")
                row = apply_streak_mutation(self.db, user_id, mutate)
                self.db.commit()
            
            self.db.refresh(row)
            return StreakRecord.model_validate(row)

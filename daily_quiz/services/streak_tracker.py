"""
Streak tracking service
Consecutive perfect daily quiz completions
"""
import logging
from datetime import date
from typing import Union

from daily_quiz.repositories import StreakRepository
from daily_quiz.repositories.streaks import StreakMutation
from daily_quiz.schemas.status import StreakRecord
from daily_quiz.utils.dates import parse_quiz_date, previous_day

logger = logging.getLogger(__name__)


class StreakTracker:
    """
    Service for maintaining per-user streak counters
    
    Rules:
    - Perfect score on the day after the last perfect day: streak + 1
    - Perfect score after a gap (or first ever): streak = 1
    - Perfect score on the same day again: unchanged
    - Imperfect score: current streak = 0, longest streak kept
    - Completions of quizzes dated before the last perfect day are ignored
    
    Each rule is a mutation of the stored record. The scorer hands the
    mutation to the session store so it commits with the completion.
    """
    
    def __init__(self, streaks: StreakRepository):
        self.streaks = streaks
    
    def perfect_mutation(self, quiz_date: Union[str, date]) -> StreakMutation:
        quiz_date = parse_quiz_date(quiz_date)
        
        def extend(record: StreakRecord) -> StreakRecord:
            last = record.last_perfect_date
            if last is not None and quiz_date <= last:
                return record
            
            if last == previous_day(quiz_date):
                current = record.current_streak + 1
            else:
                current = 1
            
            return record.model_copy(update={
                "current_streak": current,
                "longest_streak": max(record.longest_streak, current),
                "last_perfect_date": quiz_date,
            })
        
        return extend
    
    def imperfect_mutation(self, quiz_date: Union[str, date]) -> StreakMutation:
        quiz_date = parse_quiz_date(quiz_date)
        
        def reset(record: StreakRecord) -> StreakRecord:
            last = record.last_perfect_date
            if last is not None and quiz_date < last:
                return record
            return record.model_copy(update={"current_streak": 0})
        
        return reset
    
    def on_perfect_completion(self, user_id: str, quiz_date: Union[str, date]) -> StreakRecord:
        """Extend or restart the streak for a 100% score on ``quiz_date``"""
        updated = self.streaks.update(user_id, self.perfect_mutation(quiz_date))
        logger.info(
            f"Streak for user {user_id} after perfect {quiz_date}: "
            f"current={updated.current_streak}, longest={updated.longest_streak}"
        )
        return updated
    
    def on_imperfect_completion(self, user_id: str, quiz_date: Union[str, date]) -> StreakRecord:
        """Break the current streak; the longest streak is preserved"""
        updated = self.streaks.update(user_id, self.imperfect_mutation(quiz_date))
        logger.info(f"Streak for user {user_id} reset after imperfect {quiz_date} (longest={updated.longest_streak})")
        return updated
    
    def get_streak(self, user_id: str) -> StreakRecord:
        """Current counters, zeros when the user has none yet"""
        return self.streaks.get(user_id) or StreakRecord(user_id=user_id)

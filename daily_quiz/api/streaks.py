"""
Streak API endpoints
"""
from fastapi import APIRouter, Depends

from daily_quiz.api.dependencies import get_engine
from daily_quiz.schemas.status import StreakRecord
from daily_quiz.services.quiz_engine import QuizEngine

router = APIRouter(prefix="/api/users", tags=["streaks"])


@router.get("/{user_id}/streak", response_model=StreakRecord)
def get_streak(
    user_id: str,
    engine: QuizEngine = Depends(get_engine)
):
    """Current and longest streak of perfect daily quizzes"""
    return engine.get_streak(user_id)

"""
Daily quiz and status API endpoints
"""
from fastapi import APIRouter, Depends, Query
import logging

from daily_quiz.api.dependencies import get_engine
from daily_quiz.schemas.quiz import DailyQuizResponse, QuizGenerateRequest
from daily_quiz.schemas.status import UserQuizStatus
from daily_quiz.services.quiz_engine import QuizEngine
from daily_quiz.utils.dates import utc_now

router = APIRouter(prefix="/api/quiz", tags=["quiz"])
logger = logging.getLogger(__name__)


@router.get("/daily", response_model=DailyQuizResponse)
def get_daily_quiz(
    timezone: str = Query("UTC", description="IANA timezone of the user"),
    engine: QuizEngine = Depends(get_engine)
):
    """
    Get today's quiz for the caller's timezone
    
    Questions are returned without their correct answers.
    """
    quiz = engine.get_current_daily_quiz(timezone)
    return engine.composer.build_response(quiz)


@router.post("/daily/generate", response_model=DailyQuizResponse)
def generate_daily_quiz(
    request: QuizGenerateRequest,
    engine: QuizEngine = Depends(get_engine)
):
    """
    Generate (or fetch) the daily quiz for a date
    
    - Designed to be called by a scheduler to pre-generate quizzes
    - Defaults to today in UTC
    - Idempotent: the same date always yields the same quiz
    """
    target_date = request.date or utc_now().date().isoformat()
    logger.info(f"Daily quiz generation requested for {target_date}")
    
    quiz = engine.generate_daily_quiz(target_date)
    return engine.composer.build_response(quiz)


@router.get("/status", response_model=UserQuizStatus)
def get_quiz_status(
    user_id: str = Query(..., min_length=1),
    timezone: str = Query("UTC", description="IANA timezone of the user"),
    engine: QuizEngine = Depends(get_engine)
):
    """
    Get the user's status for today's quiz
    
    Returns:
    - Whether today's quiz is completed
    - The in-progress session, if any
    - Today's quiz
    - Current and longest streak
    """
    return engine.get_user_quiz_status(user_id, timezone)

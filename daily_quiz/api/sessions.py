"""
Quiz session API endpoints
"""
from fastapi import APIRouter, Depends
import logging

from daily_quiz.api.dependencies import get_engine
from daily_quiz.exceptions import SessionExpiredError
from daily_quiz.schemas.session import (
    AnswerSubmission,
    QuizResult,
    SessionProgress,
    SessionStartRequest,
    SessionStartResponse,
)
from daily_quiz.services.quiz_engine import QuizEngine

router = APIRouter(prefix="/api/quiz/sessions", tags=["sessions"])
logger = logging.getLogger(__name__)


@router.post("/start", response_model=SessionStartResponse)
def start_session(
    request: SessionStartRequest,
    engine: QuizEngine = Depends(get_engine)
):
    """
    Start or resume the session for today's quiz
    
    Calling this again returns the same session, including a completed one.
    """
    quiz = engine.get_current_daily_quiz(request.timezone)
    session = engine.start_quiz_session(request.user_id, quiz.id, request.timezone)
    
    return SessionStartResponse(
        session=session,
        quiz=engine.composer.build_response(quiz)
    )


@router.get("/{session_id}", response_model=SessionProgress)
def get_session(
    session_id: str,
    engine: QuizEngine = Depends(get_engine)
):
    """Get session state, progress and timeout flags"""
    return engine.get_session_progress(session_id)


@router.put("/{session_id}/answer", response_model=SessionProgress)
def save_answer(
    session_id: str,
    submission: AnswerSubmission,
    engine: QuizEngine = Depends(get_engine)
):
    """
    Save an answer and advance the session
    
    Rejects completed sessions (409) and sessions past their timeout (410).
    """
    progress = engine.get_session_progress(session_id)
    if progress.session.status == "in_progress" and progress.is_expired:
        logger.info(f"Rejected answer for expired session {session_id}")
        raise SessionExpiredError("Quiz session has expired")
    
    engine.save_quiz_answer(
        session_id,
        submission.question_id,
        submission.answer,
        submission.is_correct
    )
    return engine.get_session_progress(session_id)


@router.post("/{session_id}/complete", response_model=QuizResult)
def complete_session(
    session_id: str,
    engine: QuizEngine = Depends(get_engine)
):
    """
    Complete and grade a session
    
    Safe to retry: a completed session returns its original result.
    """
    return engine.complete_quiz_session(session_id)

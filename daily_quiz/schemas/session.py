"""
Pydantic schemas for quiz sessions, answers and results
"""
from datetime import datetime
from pydantic import BaseModel, Field
from typing import Dict, List, Literal, Optional

from daily_quiz.schemas.base import EngineRecord
from daily_quiz.schemas.quiz import DailyQuizResponse, PublicQuestion

SessionStatus = Literal["in_progress", "completed"]


class QuizSessionRecord(EngineRecord):
    """One user's attempt at a daily quiz"""
    id: str
    user_id: str
    daily_quiz_id: str
    current_index: int = 0
    answers: Dict[str, str] = Field(default_factory=dict)
    status: SessionStatus = "in_progress"
    timezone: str = "UTC"
    started_at: datetime
    last_activity_at: datetime
    completed_at: Optional[datetime] = None
    
    # Populated on completion
    total_questions: Optional[int] = None
    correct_answers: Optional[int] = None
    score: Optional[int] = None
    streak_updated: Optional[bool] = None
    
    @property
    def is_completed(self) -> bool:
        return self.status == "completed"


class AttemptRecord(EngineRecord):
    """Immutable grading record for one question"""
    session_id: str
    user_id: str
    question_id: str
    submitted_answer: Optional[str] = None
    is_correct: bool
    recorded_at: datetime


class AnswerResult(BaseModel):
    """Per-question breakdown in a quiz result"""
    question_id: str
    submitted_answer: Optional[str] = None
    correct_answer: Optional[str] = None
    is_correct: bool


class QuizResult(BaseModel):
    """Outcome of completing a session"""
    session_id: str
    total_questions: int
    correct_answers: int
    score: int = Field(..., ge=0, le=100)
    answers: List[AnswerResult]
    streak_updated: bool
    time_spent: float  # seconds


class SessionProgress(BaseModel):
    """Session state with progress and timeout flags"""
    session: QuizSessionRecord
    answered: int
    total: int
    percentage: int
    current_question: Optional[PublicQuestion] = None
    is_expired: bool
    is_inactive: bool
    can_continue: bool
    time_elapsed: float  # seconds since start
    time_since_last_activity: float


class SessionStartRequest(BaseModel):
    """Request schema for starting (or resuming) today's session"""
    user_id: str = Field(..., min_length=1)
    timezone: str = "UTC"


class SessionStartResponse(BaseModel):
    """Session plus the quiz it belongs to"""
    session: QuizSessionRecord
    quiz: DailyQuizResponse


class AnswerSubmission(BaseModel):
    """Schema for saving a single answer"""
    question_id: str = Field(..., min_length=1)
    answer: str = Field(..., min_length=1, description="Answer cannot be empty")
    is_correct: Optional[bool] = Field(None, description="Client-side hint, never trusted for grading")

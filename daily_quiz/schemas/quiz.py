"""
Pydantic schemas for questions and daily quizzes
"""
import datetime as dt
from pydantic import BaseModel, Field
from typing import List, Literal, Optional

from daily_quiz.schemas.base import EngineRecord

Difficulty = Literal["easy", "medium", "hard"]


class PublicQuestion(BaseModel):
    """Question as shown to a quiz taker - never includes the answer"""
    id: str
    verse_ref: str
    prompt: str
    choices: List[str]
    difficulty: Difficulty


class QuestionRecord(EngineRecord):
    """Approved question from the pool, including its correct answer"""
    id: str
    verse_ref: str
    prompt: str
    choices: List[str]
    correct_answer: str
    difficulty: Difficulty
    approved_at: Optional[dt.datetime] = None
    created_at: Optional[dt.datetime] = None
    
    @property
    def chapter(self) -> str:
        """Scripture chapter of the verse reference ("2" for "2:255")"""
        return self.verse_ref.split(":", 1)[0].strip()
    
    def public(self) -> PublicQuestion:
        return PublicQuestion(
            id=self.id,
            verse_ref=self.verse_ref,
            prompt=self.prompt,
            choices=self.choices,
            difficulty=self.difficulty,
        )


class DailyQuizRecord(EngineRecord):
    """The fixed question set for one calendar day"""
    id: str
    date: dt.date
    question_ids: List[str]
    created_at: dt.datetime


class QuizGenerateRequest(BaseModel):
    """Request schema for daily quiz generation"""
    date: Optional[str] = Field(
        None,
        pattern=r"^\d{4}-\d{2}-\d{2}$",
        description="Quiz date (YYYY-MM-DD), defaults to today in UTC"
    )


class DailyQuizResponse(BaseModel):
    """Daily quiz with hydrated questions, answers stripped"""
    id: str
    date: dt.date
    question_ids: List[str]
    questions: List[PublicQuestion]
    total_questions: int
    difficulties: dict

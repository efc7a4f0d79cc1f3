"""
FastAPI dependencies shared by the routers
"""
from fastapi import Depends
from sqlalchemy.orm import Session

from daily_quiz.database import get_db
from daily_quiz.repositories import sql_repositories
from daily_quiz.services.quiz_engine import QuizEngine
from daily_quiz.utils.cache import cache_service


def get_engine(db: Session = Depends(get_db)) -> QuizEngine:
    """Quiz engine bound to the request's database session"""
    return QuizEngine(sql_repositories(db), cache=cache_service)

"""
Storage layer - one repository interface per entity

Services depend only on the abstract repositories; ``sql_repositories``
binds the SQLAlchemy implementations to a database session.
"""
from dataclasses import dataclass

from sqlalchemy.orm import Session

from daily_quiz.repositories.attempts import AttemptRepository, SqlAttemptRepository
from daily_quiz.repositories.daily_quizzes import DailyQuizRepository, SqlDailyQuizRepository
from daily_quiz.repositories.questions import QuestionPool, SqlQuestionPool
from daily_quiz.repositories.sessions import SessionRepository, SqlSessionRepository
from daily_quiz.repositories.streaks import SqlStreakRepository, StreakRepository


@dataclass
class Repositories:
    questions: QuestionPool
    quizzes: DailyQuizRepository
    sessions: SessionRepository
    attempts: AttemptRepository
    streaks: StreakRepository


def sql_repositories(db: Session) -> Repositories:
    return Repositories(
        questions=SqlQuestionPool(db),
        quizzes=SqlDailyQuizRepository(db),
        sessions=SqlSessionRepository(db),
        attempts=SqlAttemptRepository(db),
        streaks=SqlStreakRepository(db),
    )


__all__ = [
    "Repositories",
    "sql_repositories",
    "AttemptRepository",
    "DailyQuizRepository",
    "QuestionPool",
    "SessionRepository",
    "StreakRepository",
]

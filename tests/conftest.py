import os

# Settings are read at import time
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ["REDIS_URL"] = ""

import random
from datetime import date, datetime, timezone

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from daily_quiz.database import init_db
from daily_quiz.repositories import sql_repositories
from daily_quiz.services.quiz_engine import QuizEngine

from tests.fakes import FrozenClock, in_memory_repositories, make_question

NOON_UTC = datetime(2024, 1, 15, 12, 0, tzinfo=timezone.utc)
QUIZ_DATE = date(2024, 1, 15)

# Scenario quiz: q1..q5 with correct answers A, B, C, A, A
SCENARIO_ANSWERS = {"q1": "A", "q2": "B", "q3": "C", "q4": "A", "q5": "A"}


def build_question_bank():
    """6 easy, 6 medium and 3 hard approved questions over distinct chapters"""
    bank = []
    for tier, count in (("easy", 6), ("medium", 6), ("hard", 3)):
        for i in range(count):
            bank.append(make_question(
                f"{tier}-{i}",
                difficulty=tier,
                correct_answer="A",
                verse_ref=f"{len(bank) + 1}:{i + 1}",
            ))
    return bank


def scenario_questions():
    tiers = ["easy", "easy", "medium", "medium", "hard"]
    return [
        make_question(qid, difficulty=tier, correct_answer=answer, verse_ref=f"{n}:1")
        for n, ((qid, answer), tier) in enumerate(zip(SCENARIO_ANSWERS.items(), tiers), start=1)
    ]


@pytest.fixture
def clock():
    return FrozenClock(NOON_UTC)


@pytest.fixture
def repos():
    return in_memory_repositories(build_question_bank())


@pytest.fixture
def engine(repos, clock):
    return QuizEngine(repos, clock=clock, rng=random.Random(42))


@pytest.fixture
def scenario_repos():
    return in_memory_repositories(scenario_questions())


@pytest.fixture
def scenario_engine(scenario_repos, clock):
    return QuizEngine(scenario_repos, clock=clock, rng=random.Random(7))


@pytest.fixture
def scenario_quiz(scenario_repos, clock):
    """The fixed q1..q5 quiz stored for QUIZ_DATE"""
    quiz, _ = scenario_repos.quizzes.insert_if_absent(QUIZ_DATE, list(SCENARIO_ANSWERS), clock())
    return quiz


@pytest.fixture
def sql_engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    init_db(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def db(sql_engine):
    session = sessionmaker(autocommit=False, autoflush=False, bind=sql_engine)()
    yield session
    session.close()


@pytest.fixture
def sql_repos(db):
    return sql_repositories(db)

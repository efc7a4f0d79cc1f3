"""
Database engine, session factory and declarative base
"""
import logging
from typing import Generator

from sqlalchemy import create_engine
from sqlalchemy.orm import Session, declarative_base, sessionmaker

from daily_quiz.config import settings

logger = logging.getLogger(__name__)

Base = declarative_base()


def create_db_engine(database_url: str):
    """
    Create a SQLAlchemy engine for the given URL
    
    SQLite needs check_same_thread disabled because FastAPI serves
    sync endpoints from a thread pool.
    """
    connect_args = {}
    if database_url.startswith("sqlite"):
        connect_args["check_same_thread"] = False
    
    return create_engine(
        database_url,
        pool_pre_ping=True,
        connect_args=connect_args
    )


engine = create_db_engine(settings.DATABASE_URL)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_db() -> Generator[Session, None, None]:
    """FastAPI dependency yielding a request-scoped database session"""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def init_db(bind=None) -> None:
    """Create all tables that do not exist yet"""
    # Import models so they register with Base.metadata
    from daily_quiz import models  # noqa: F401
    
    Base.metadata.create_all(bind=bind or engine)
    logger.info("Database tables ensured")

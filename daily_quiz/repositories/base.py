"""
Helpers shared by the SQLAlchemy repositories
"""
import logging
from contextlib import contextmanager

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from daily_quiz.exceptions import PersistenceError

logger = logging.getLogger(__name__)


@contextmanager
def store_errors(db: Session, action: str):
    """
    Roll back on any failure; re-raise store failures as PersistenceError
    
    Args:
        db: Session to roll back
        action: Short description used in the error message
    """
    try:
        yield
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Failed to {action}: {str(e)}")
        raise PersistenceError(f"Failed to {action}: {str(e)}") from e
    except Exception:
        db.rollback()
        raise

"""
Date and timezone helpers

Daily boundaries are per user: "today" is always the calendar date in the
caller's IANA timezone, recomputed on every call.
"""
from datetime import date, datetime, timedelta, timezone
from typing import Union
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from daily_quiz.exceptions import QuizValidationError


def utc_now() -> datetime:
    """Timezone-aware current UTC time"""
    return datetime.now(timezone.utc)


def ensure_utc(value: datetime) -> datetime:
    """Attach UTC to naive datetimes (SQLite drops tzinfo on read)"""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def resolve_timezone(name: str) -> ZoneInfo:
    """
    Look up an IANA timezone
    
    Raises:
        QuizValidationError: unknown or malformed timezone name
    """
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError, OSError) as e:
        raise QuizValidationError(f"Unknown timezone: {name}") from e


def local_date(timezone_name: str, now: datetime) -> date:
    """Calendar date of ``now`` as seen in ``timezone_name``"""
    return ensure_utc(now).astimezone(resolve_timezone(timezone_name)).date()


def parse_quiz_date(value: Union[str, date]) -> date:
    """
    Normalize a quiz date key
    
    Accepts a date or a strict YYYY-MM-DD string.
    """
    if isinstance(value, datetime):
        raise QuizValidationError("Quiz date must be a calendar date, not a datetime")
    if isinstance(value, date):
        return value
    if not isinstance(value, str) or len(value) != 10:
        raise QuizValidationError(f"Date must be in YYYY-MM-DD format: {value!r}")
    try:
        return date.fromisoformat(value)
    except ValueError as e:
        raise QuizValidationError(f"Date must be in YYYY-MM-DD format: {value!r}") from e


def previous_day(value: date) -> date:
    return value - timedelta(days=1)

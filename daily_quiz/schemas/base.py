"""
Shared base for records read back from the store
"""
from datetime import datetime
from pydantic import BaseModel, field_validator

from daily_quiz.utils.dates import ensure_utc


class EngineRecord(BaseModel):
    """Record built from ORM rows; naive timestamps are read back as UTC"""
    
    class Config:
        from_attributes = True
    
    @field_validator("*")
    @classmethod
    def _attach_utc(cls, value):
        if isinstance(value, datetime):
            return ensure_utc(value)
        return value

"""
Configuration management using Pydantic Settings
"""
from pydantic_settings import BaseSettings
from typing import List


class Settings(BaseSettings):
    """Application settings loaded from environment variables"""
    
    # Database
    DATABASE_URL: str
    
    # Redis (empty string disables caching)
    REDIS_URL: str = "redis://redis:6379/0"
    
    # Application
    APP_NAME: str = "Daily Quiz Engine"
    APP_VERSION: str = "1.0.0"
    DEBUG: bool = False
    ALLOWED_ORIGINS: List[str] = ["http://localhost:3000", "http://localhost:8000"]
    
    # Rate Limiting
    RATE_LIMIT_PER_MINUTE: int = 60
    RATE_LIMIT_PER_HOUR: int = 1000
    
    # Daily quiz composition
    DAILY_QUIZ_CACHE_TTL: int = 86400  # 24 hours, quizzes never change
    QUIZ_EASY_COUNT: int = 2
    QUIZ_MEDIUM_COUNT: int = 2
    QUIZ_HARD_COUNT: int = 1
    QUIZ_CANDIDATE_MULTIPLIER: int = 5
    
    # Sessions
    SESSION_TIMEOUT_SECONDS: int = 24 * 60 * 60
    SESSION_INACTIVITY_SECONDS: int = 60 * 60
    DEFAULT_TIMEZONE: str = "UTC"
    
    # Logging
    LOG_LEVEL: str = "INFO"
    
    class Config:
        env_file = ".env"
        case_sensitive = True


# Global settings instance
settings = Settings()

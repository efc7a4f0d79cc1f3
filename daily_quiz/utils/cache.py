"""
Redis cache utility for daily quiz caching
"""
import redis
import json
import logging
from datetime import date
from typing import Optional, Any
from daily_quiz.config import settings

logger = logging.getLogger(__name__)


class CacheService:
    """
    Redis-based caching service for daily quizzes
    
    Daily quizzes are never mutated once created, so a cached copy can
    only go stale by expiring. Any Redis failure degrades to a cache miss.
    """
    
    KEY_PREFIX = "daily_quiz"
    
    def __init__(self, redis_client: Optional[Any] = None, redis_url: Optional[str] = None):
        self.redis_client = redis_client
        if self.redis_client is not None:
            return
        
        redis_url = settings.REDIS_URL if redis_url is None else redis_url
        if not redis_url:
            logger.info("Redis URL not configured. Caching disabled.")
            return
        
        try:
            self.redis_client = redis.from_url(
                redis_url,
                decode_responses=True,
                socket_connect_timeout=5
            )
            # Test connection
            self.redis_client.ping()
            logger.info("Redis connection established")
        except Exception as e:
            logger.warning(f"Redis connection failed: {str(e)}. Caching disabled.")
            self.redis_client = None
    
    @property
    def enabled(self) -> bool:
        return self.redis_client is not None
    
    def daily_quiz_key(self, quiz_date: date) -> str:
        """
        Generate deterministic cache key for a quiz date
        
        Args:
            quiz_date: Calendar day of the quiz
            
        Returns:
            Cache key string
        """
        return f"{self.KEY_PREFIX}:{quiz_date.isoformat()}"
    
    def get(self, key: str) -> Optional[Any]:
        """
        Get value from cache
        
        Args:
            key: Cache key
            
        Returns:
            Cached value or None
        """
        if not self.redis_client:
            return None
        
        try:
            value = self.redis_client.get(key)
            if value:
                logger.info(f"Cache hit: {key}")
                return json.loads(value)
            logger.info(f"Cache miss: {key}")
            return None
        except Exception as e:
            logger.error(f"Cache get error: {str(e)}")
            return None
    
    def set(
        self,
        key: str,
        value: Any,
        ttl: int = None
    ) -> bool:
        """
        Set value in cache
        
        Args:
            key: Cache key
            value: Value to cache (must be JSON serializable)
            ttl: Time to live in seconds (default from settings)
            
        Returns:
            Success status
        """
        if not self.redis_client:
            return False
        
        try:
            ttl = ttl or settings.DAILY_QUIZ_CACHE_TTL
            serialized = json.dumps(value)
            self.redis_client.setex(key, ttl, serialized)
            logger.info(f"Cache set: {key} (TTL: {ttl}s)")
            return True
        except Exception as e:
            logger.error(f"Cache set error: {str(e)}")
            return False


# Global instance
cache_service = CacheService()

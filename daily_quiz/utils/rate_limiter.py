"""
Rate limiting middleware for API endpoints
"""
import time
from collections import defaultdict
from fastapi import Request, HTTPException
from typing import Callable, Dict, Iterable
import logging

from daily_quiz.config import settings

logger = logging.getLogger(__name__)


class RateLimiter:
    """
    In-memory sliding-window rate limiter
    Production: Use Redis for distributed rate limiting
    """
    
    EXEMPT_PATHS = ("/health", "/docs", "/redoc", "/openapi.json")
    
    def __init__(
        self,
        requests_per_minute: int = 60,
        requests_per_hour: int = 1000,
        clock: Callable[[], float] = time.time,
        exempt_paths: Iterable[str] = EXEMPT_PATHS
    ):
        self.requests_per_minute = requests_per_minute
        self.requests_per_hour = requests_per_hour
        self.clock = clock
        self.exempt_paths = frozenset(exempt_paths)
        
        # Storage: {client_id: [timestamp, ...]}
        self.minute_tracker: Dict[str, list] = defaultdict(list)
        self.hour_tracker: Dict[str, list] = defaultdict(list)
    
    def is_exempt(self, path: str) -> bool:
        return path in self.exempt_paths
    
    def _get_client_id(self, request: Request) -> str:
        """Extract client identifier from request"""
        # Callers identify the user themselves; authentication lives upstream
        user_id = request.headers.get("x-user-id") or request.query_params.get("user_id")
        if user_id:
            return f"user:{user_id}"
        
        # Fallback to IP address
        client_ip = request.client.host if request.client else "unknown"
        return f"ip:{client_ip}"
    
    def _cleanup_old_entries(self, tracker: Dict[str, list], window_seconds: int, now: float):
        """Remove entries older than window"""
        cutoff_time = now - window_seconds
        
        for client_id in list(tracker.keys()):
            tracker[client_id] = [ts for ts in tracker[client_id] if ts > cutoff_time]
            
            # Remove empty entries
            if not tracker[client_id]:
                del tracker[client_id]
    
    def _reject(self, client_id: str, window: str, limit: int, retry_after: int) -> None:
        logger.warning(f"Rate limit exceeded ({window}): {client_id}")
        raise HTTPException(
            status_code=429,
            detail={
                "error": "rate_limit_exceeded",
                "message": f"Too many requests. Limit: {limit} requests per {window}",
                "retry_after": retry_after
            }
        )
    
    def check(self, client_id: str) -> None:
        """
        Record a request for ``client_id`` if it is within both limits
        
        Raises:
            HTTPException: 429 if rate limit exceeded
        """
        now = self.clock()
        
        self._cleanup_old_entries(self.minute_tracker, 60, now)
        self._cleanup_old_entries(self.hour_tracker, 3600, now)
        
        minute_requests = len(self.minute_tracker[client_id])
        if minute_requests >= self.requests_per_minute:
            self._reject(client_id, "minute", self.requests_per_minute, 60)
        
        hour_requests = len(self.hour_tracker[client_id])
        if hour_requests >= self.requests_per_hour:
            self._reject(client_id, "hour", self.requests_per_hour, 3600)
        
        self.minute_tracker[client_id].append(now)
        self.hour_tracker[client_id].append(now)
        
        logger.debug(f"Rate limit check passed: {client_id} (minute: {minute_requests+1}, hour: {hour_requests+1})")
    
    async def check_rate_limit(self, request: Request) -> None:
        """Apply limits to an incoming request"""
        self.check(self._get_client_id(request))
    
    def reset(self) -> None:
        self.minute_tracker.clear()
        self.hour_tracker.clear()


# Global instance
rate_limiter = RateLimiter(
    requests_per_minute=settings.RATE_LIMIT_PER_MINUTE,
    requests_per_hour=settings.RATE_LIMIT_PER_HOUR
)

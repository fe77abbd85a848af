"""
Rate limiting and retry utilities for outbound API requests.
"""

from app.services.rate_limiting.limiter import RateLimiter, get_rate_limiter
from app.services.rate_limiting.retry import is_retryable, retry_with_backoff

__all__ = ["RateLimiter", "get_rate_limiter", "is_retryable", "retry_with_backoff"]

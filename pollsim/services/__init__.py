# Services module
from .rate_limiter import RateLimiter, get_rate_limiter
from .poll_store import PollStore

__all__ = [
    "RateLimiter",
    "get_rate_limiter",
    "PollStore",
]

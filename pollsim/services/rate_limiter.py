"""Lifetime budget of LLM calls for the service process."""

import logging
from typing import Any, Dict, Optional

from ..config import settings
from ..core.errors import QuotaExceeded

logger = logging.getLogger(__name__)


class RateLimiter:
    """
    Caps the total number of LLM calls made by the process.

    The counter starts at zero and is never reset: once ``limit`` calls
    have been allowed, every later call is denied until the process
    restarts. Callers run on a single event loop and the counter is only
    touched from synchronous code, so no lock is needed.
    """

    DEFAULT_LIMIT = 50

    def __init__(self, limit: Optional[int] = None):
        self.limit = self.DEFAULT_LIMIT if limit is None else limit
        self._used = 0

    @property
    def used(self) -> int:
        return self._used

    @property
    def remaining(self) -> int:
        return max(0, self.limit - self._used)

    def try_consume(self) -> bool:
        """Take one unit of the budget. Returns False once it is spent."""
        if self._used >= self.limit:
            logger.warning(f"API call limit reached ({self.limit} calls), denying request")
            return False
        self._used += 1
        logger.debug(f"API call {self._used}/{self.limit} allowed")
        return True

    def consume(self) -> None:
        """Take one unit of the budget or raise QuotaExceeded."""
        if not self.try_consume():
            raise QuotaExceeded(self.limit)

    def get_status(self) -> Dict[str, Any]:
        """Get the budget status."""
        return {
            "used": self._used,
            "limit": self.limit,
            "remaining": self.remaining,
            "exhausted": self._used >= self.limit,
        }


# Global rate limiter instance
_rate_limiter: Optional[RateLimiter] = None


def get_rate_limiter() -> RateLimiter:
    """Get the process-wide rate limiter instance."""
    global _rate_limiter
    if _rate_limiter is None:
        _rate_limiter = RateLimiter(limit=settings.api_call_limit)
    return _rate_limiter

"""Answers free-text questions about a stored poll."""

import logging

from ..providers.base import BaseProvider, ChatMessage
from ..services.rate_limiter import RateLimiter
from .errors import GenerationFailed, QuotaExceeded
from .prompts import FALLBACK_ANSWER, QUESTION_SYSTEM_PROMPT, build_question_prompt
from .survey import PollContext

logger = logging.getLogger(__name__)


class QuestionAnswerer:
    """Re-queries the LLM with a poll's full content as context."""

    def __init__(
        self,
        provider: BaseProvider,
        rate_limiter: RateLimiter,
        max_tokens: int = 1024,
        temperature: float = 0.7,
    ):
        self.provider = provider
        self.rate_limiter = rate_limiter
        self.max_tokens = max_tokens
        self.temperature = temperature

    async def answer(self, question: str, context: PollContext) -> str:
        """Answer ``question`` using only the poll data in ``context``."""
        self.rate_limiter.consume()

        try:
            response = await self.provider.generate(
                messages=[ChatMessage(role="user", content=build_question_prompt(question, context))],
                system=QUESTION_SYSTEM_PROMPT,
                max_tokens=self.max_tokens,
                temperature=self.temperature,
            )
        except (QuotaExceeded, GenerationFailed):
            raise
        except Exception as e:
            logger.error(f"Answering question about {context.topic!r} failed: {e}", exc_info=True)
            raise GenerationFailed(str(e), prefix="Failed to answer analysis question")

        if not response.content:
            logger.warning(f"Empty answer from {response.model}, using fallback")
            return FALLBACK_ANSWER
        return response.content

"""FastAPI dependencies wiring the survey services together."""

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from ..config import settings
from ..core.analysis_generator import AnalysisGenerator
from ..core.question_answerer import QuestionAnswerer
from ..db.database import get_db
from ..providers.factory import get_provider
from ..services.poll_store import PollStore
from ..services.rate_limiter import get_rate_limiter


def get_analysis_generator() -> AnalysisGenerator:
    """Analysis generator sharing the process-wide rate limiter."""
    return AnalysisGenerator(
        provider=get_provider(),
        rate_limiter=get_rate_limiter(),
        step_delay=settings.step_delay_seconds,
        cardinality_policy=settings.cardinality_policy,
        max_tokens=settings.llm_max_tokens,
        temperature=settings.llm_temperature,
    )


def get_question_answerer() -> QuestionAnswerer:
    """Question answerer sharing the process-wide rate limiter."""
    return QuestionAnswerer(
        provider=get_provider(),
        rate_limiter=get_rate_limiter(),
        temperature=settings.llm_temperature,
    )


def get_poll_store(db: AsyncSession = Depends(get_db)) -> PollStore:
    return PollStore(db)

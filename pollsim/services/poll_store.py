"""Persistence of generated polls."""

import logging
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.errors import PersistenceFailed
from ..core.survey import AnalysisResult
from ..db.models import Poll

logger = logging.getLogger(__name__)


class PollStore:
    """
    Single-row insert and lookup of polls.

    Nested survey data is stored as JSON in its camelCase wire form, so a
    row can be served back without conversion.
    """

    def __init__(self, db: AsyncSession):
        self.db = db

    async def create(self, result: AnalysisResult, created_at: Optional[str] = None) -> Poll:
        """Insert a poll and return it with its generated id."""
        data = result.model_dump(mode="json", by_alias=True)
        poll = Poll(
            topic=result.topic,
            prompt=result.prompt,
            summary=result.summary,
            personas=data["personas"],
            questions=data["questions"],
            followup_responses=data["followupResponses"],
            created_at=created_at or datetime.now(timezone.utc).isoformat(),
            analysis_steps=data["analysisSteps"],
        )

        try:
            self.db.add(poll)
            await self.db.commit()
            await self.db.refresh(poll)
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.error(f"Failed to store poll {result.topic!r}: {e}", exc_info=True)
            raise PersistenceFailed(str(e))

        logger.info(f"Stored poll {poll.id}: {poll.topic!r}")
        return poll

    async def get(self, poll_id: int) -> Optional[Poll]:
        """Look up a poll by id, returning None when it does not exist."""
        try:
            result = await self.db.execute(
                select(Poll).where(Poll.id == poll_id)
            )
        except SQLAlchemyError as e:
            logger.error(f"Failed to load poll {poll_id}: {e}", exc_info=True)
            raise PersistenceFailed(str(e))
        return result.scalar_one_or_none()

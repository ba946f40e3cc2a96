"""SQLAlchemy models for stored polls."""

from sqlalchemy import (
    Column,
    Integer,
    String,
    Text,
    JSON,
)

from .database import Base


class Poll(Base):
    """One generated survey simulation. Rows are never updated."""
    __tablename__ = "polls"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    topic = Column(Text, nullable=False)
    prompt = Column(Text, nullable=False)
    summary = Column(Text, nullable=False)
    personas = Column(JSON, nullable=False)
    questions = Column(JSON, nullable=False)
    followup_responses = Column(JSON, nullable=False, default=list)
    created_at = Column(String(64), nullable=False)  # ISO-8601 text
    analysis_steps = Column(JSON, nullable=False, default=list)

    def __repr__(self) -> str:
        return f"<Poll id={self.id} topic={self.topic!r}>"

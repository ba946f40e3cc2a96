"""Poll API routes."""

import logging
from typing import List

from fastapi import APIRouter, Depends, Path
from pydantic import BaseModel, Field

from ...core.analysis_generator import AnalysisGenerator
from ...core.errors import PollNotFound, ValidationFailed
from ...core.question_answerer import QuestionAnswerer
from ...core.survey import (
    AnalysisStep,
    CamelModel,
    FollowupResponse,
    Persona,
    PollContext,
    SurveyQuestion,
)
from ...services.poll_store import PollStore
from ..dependencies import get_analysis_generator, get_poll_store, get_question_answerer
from ..websocket.progress_handler import ConnectionManager, get_connection_manager

logger = logging.getLogger(__name__)

router = APIRouter()


# Request/Response Models

class CreatePollRequest(BaseModel):
    """Request to generate a new poll."""
    prompt: str = Field(..., min_length=1)


class AskQuestionRequest(BaseModel):
    """Request to ask a question about a poll."""
    question: str = Field(..., min_length=1)


class AskQuestionResponse(BaseModel):
    """Answer to a question about a poll."""
    answer: str


class PollResponse(CamelModel):
    """A stored poll."""
    id: int
    topic: str
    prompt: str
    summary: str
    personas: List[Persona]
    questions: List[SurveyQuestion]
    followup_responses: List[FollowupResponse] = []
    created_at: str
    analysis_steps: List[AnalysisStep] = []


# Routes

@router.post("", response_model=PollResponse)
async def create_poll(
    request: CreatePollRequest,
    generator: AnalysisGenerator = Depends(get_analysis_generator),
    store: PollStore = Depends(get_poll_store),
    connections: ConnectionManager = Depends(get_connection_manager),
):
    """Generate a simulated survey for a topic and store it."""
    if not request.prompt.strip():
        raise ValidationFailed("Prompt is required")
    logger.info(f"Generating poll for prompt {request.prompt!r}")

    # The poll id is only known once the row is written
    async def on_progress(step: AnalysisStep):
        await connections.broadcast_step(None, step)

    analysis = await generator.generate(request.prompt, on_progress=on_progress)
    poll = await store.create(analysis)
    return PollResponse.model_validate(poll)


@router.get("/{poll_id}", response_model=PollResponse)
async def get_poll(
    poll_id: int = Path(..., ge=1),
    store: PollStore = Depends(get_poll_store),
):
    """Get a specific poll."""
    poll = await store.get(poll_id)
    if not poll:
        raise PollNotFound(poll_id)
    return PollResponse.model_validate(poll)


@router.post("/{poll_id}/ask", response_model=AskQuestionResponse)
async def ask_question(
    request: AskQuestionRequest,
    poll_id: int = Path(..., ge=1),
    store: PollStore = Depends(get_poll_store),
    answerer: QuestionAnswerer = Depends(get_question_answerer),
):
    """Ask the LLM a question about a stored poll."""
    if not request.question.strip():
        raise ValidationFailed("Question is required")

    poll = await store.get(poll_id)
    if not poll:
        raise PollNotFound(poll_id)

    answer = await answerer.answer(request.question, PollContext.model_validate(poll))
    return AskQuestionResponse(answer=answer)

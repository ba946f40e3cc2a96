"""Typed survey data produced by the LLM and stored with each poll."""

import json
import re
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field, ValidationError, field_validator
from pydantic.alias_generators import to_camel

from .errors import MalformedResponse

# A single fenced block wrapping the whole completion, e.g. ```json ... ```
_CODE_FENCE = re.compile(r"\A\s*```[\w-]*\s*\n(.*?)\n\s*```\s*\Z", re.DOTALL)


class CamelModel(BaseModel):
    """Base model that reads and writes camelCase JSON keys."""

    class Config:
        alias_generator = to_camel
        populate_by_name = True
        from_attributes = True


def _parse_percentage(value: Any) -> Any:
    # The model sometimes answers "65%" or " 65 " instead of 65
    if isinstance(value, str):
        return value.strip().rstrip("%").strip()
    return value


class Persona(CamelModel):
    """A fabricated demographic profile answering the survey."""
    demographic: str
    age: str
    location: str
    background: str
    views: str


class DemographicResponse(CamelModel):
    """One persona's answer to a survey question."""
    demographic: str
    agreement: float = Field(ge=0, le=100)
    reasoning: str

    @field_validator("agreement", mode="before")
    @classmethod
    def parse_agreement(cls, value: Any) -> Any:
        return _parse_percentage(value)


class SurveyQuestion(CamelModel):
    """A survey item with its aggregate and per-persona agreement."""
    question: str
    agreement: float = Field(ge=0, le=100)
    demographic: str
    responses: List[DemographicResponse] = Field(default_factory=list)

    @field_validator("agreement", mode="before")
    @classmethod
    def parse_agreement(cls, value: Any) -> Any:
        return _parse_percentage(value)


class FollowupResponse(CamelModel):
    """A simulated interview exchange with one persona."""
    demographic: str
    question: str
    response: str


class AnalysisStepType(str, Enum):
    """Progress markers emitted while a poll is generated, in emission order."""
    PLANNING = "planning"
    QUESTIONS = "questions"
    PERSONAS = "personas"
    COMPLETE = "complete"


class AnalysisStep(CamelModel):
    """A progress marker, broadcast live and stored with the poll."""
    type: AnalysisStepType
    message: str
    timestamp: str = Field(
        default_factory=lambda: datetime.now(timezone.utc).isoformat()
    )


class PollContext(CamelModel):
    """The parts of a stored poll an LLM needs to answer questions about it."""
    topic: str
    summary: str
    personas: List[Persona] = Field(default_factory=list)
    questions: List[SurveyQuestion] = Field(default_factory=list)
    followup_responses: List[FollowupResponse] = Field(default_factory=list)


class SurveyPayload(PollContext):
    """The JSON object the survey prompt asks the LLM for."""
    personas: List[Persona]
    questions: List[SurveyQuestion]
    followup_responses: List[FollowupResponse]


class AnalysisResult(SurveyPayload):
    """A generated poll ready to be persisted."""
    prompt: str
    analysis_steps: List[AnalysisStep] = Field(default_factory=list)


def decode_survey_payload(text: Optional[str]) -> SurveyPayload:
    """Decode the raw LLM completion into a SurveyPayload.

    A markdown code fence around the whole completion is removed first.
    Raises MalformedResponse when the text is not a JSON object or when a
    required field is absent or has the wrong shape.
    """
    if not text:
        raise MalformedResponse("empty completion")

    fenced = _CODE_FENCE.match(text)
    if fenced:
        text = fenced.group(1)

    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise MalformedResponse(f"invalid JSON: {e}")

    if not isinstance(data, dict):
        raise MalformedResponse(f"expected a JSON object, got {type(data).__name__}")

    try:
        return SurveyPayload.model_validate(data)
    except ValidationError as e:
        problems = [
            f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}"
            for err in e.errors()
        ]
        raise MalformedResponse(
            f"{len(problems)} invalid field(s): {'; '.join(problems[:5])}",
            problems=problems,
        )


def check_cardinality(payload: SurveyPayload, followups_per_persona: int = 2) -> List[str]:
    """List the places where the payload breaks the requested cardinality.

    Every question should carry one response per persona and every persona
    should get exactly ``followups_per_persona`` follow-up responses.
    """
    problems: List[str] = []
    demographics = [p.demographic for p in payload.personas]

    for index, question in enumerate(payload.questions, start=1):
        answered = {r.demographic for r in question.responses}
        missing = [d for d in demographics if d not in answered]
        if missing:
            problems.append(
                f"question {index} has no response from: {', '.join(missing)}"
            )

    followup_counts: Dict[str, int] = {d: 0 for d in demographics}
    for followup in payload.followup_responses:
        if followup.demographic in followup_counts:
            followup_counts[followup.demographic] += 1

    for demographic, count in followup_counts.items():
        if count != followups_per_persona:
            problems.append(
                f"persona '{demographic}' has {count} follow-up responses, "
                f"expected {followups_per_persona}"
            )

    return problems

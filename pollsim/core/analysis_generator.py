"""Generates a simulated survey for a topic with a single LLM call."""

import asyncio
import inspect
import logging
from typing import Any, Awaitable, Callable, List, Optional, Union

from ..providers.base import BaseProvider, ChatMessage
from ..services.rate_limiter import RateLimiter
from .errors import GenerationFailed, MalformedResponse, QuotaExceeded
from .prompts import FOLLOWUPS_PER_PERSONA, SURVEY_SYSTEM_PROMPT, build_survey_prompt
from .survey import (
    AnalysisResult,
    AnalysisStep,
    AnalysisStepType,
    SurveyPayload,
    check_cardinality,
    decode_survey_payload,
)

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[AnalysisStep], Union[None, Awaitable[None]]]

STEP_MESSAGES = {
    AnalysisStepType.PLANNING: "Analyzing the topic and planning the survey structure...",
    AnalysisStepType.QUESTIONS: "Formulating 10 comprehensive survey questions to explore the topic...",
    AnalysisStepType.PERSONAS: "Creating diverse voter profiles and analyzing their detailed perspectives...",
    AnalysisStepType.COMPLETE: "Analysis complete! Generating comprehensive report with expanded survey data...",
}

CARDINALITY_POLICIES = ("ignore", "warn", "strict")


class AnalysisGenerator:
    """
    Turns a free-text topic into survey data.

    Each call to ``generate`` consumes one unit of the shared rate limiter,
    reports planning, questions, personas and complete steps in that order,
    and makes exactly one provider call. The pause between the first steps
    only paces the progress display.
    """

    def __init__(
        self,
        provider: BaseProvider,
        rate_limiter: RateLimiter,
        step_delay: float = 1.0,
        cardinality_policy: str = "warn",
        max_tokens: int = 4096,
        temperature: float = 0.7,
    ):
        if cardinality_policy not in CARDINALITY_POLICIES:
            raise ValueError(f"Unknown cardinality policy: {cardinality_policy}")
        self.provider = provider
        self.rate_limiter = rate_limiter
        self.step_delay = step_delay
        self.cardinality_policy = cardinality_policy
        self.max_tokens = max_tokens
        self.temperature = temperature

    async def generate(
        self,
        prompt: str,
        on_progress: Optional[ProgressCallback] = None,
    ) -> AnalysisResult:
        """Generate the survey for ``prompt``.

        Raises:
            QuotaExceeded: the call budget is spent; nothing was reported or sent
            MalformedResponse: the LLM output is not the requested survey JSON
            GenerationFailed: the provider call failed
        """
        self.rate_limiter.consume()

        steps: List[AnalysisStep] = []
        await self._report(AnalysisStepType.PLANNING, steps, on_progress)
        await self._pause()
        await self._report(AnalysisStepType.QUESTIONS, steps, on_progress)
        await self._pause()
        await self._report(AnalysisStepType.PERSONAS, steps, on_progress)

        try:
            response = await self.provider.generate(
                messages=[ChatMessage(role="user", content=build_survey_prompt(prompt))],
                system=SURVEY_SYSTEM_PROMPT,
                max_tokens=self.max_tokens,
                temperature=self.temperature,
                json_mode=True,
            )
        except (QuotaExceeded, GenerationFailed):
            raise
        except Exception as e:
            logger.error(f"Survey generation failed for {prompt!r}: {e}", exc_info=True)
            raise GenerationFailed(str(e))

        logger.info(
            f"Survey generated by {response.model}: "
            f"{response.input_tokens} input / {response.output_tokens} output tokens"
        )

        try:
            payload = decode_survey_payload(response.content)
        except MalformedResponse as e:
            logger.error(f"Discarding malformed survey for {prompt!r}: {e.detail}")
            raise

        self._apply_cardinality_policy(payload)

        await self._report(AnalysisStepType.COMPLETE, steps, on_progress)

        return AnalysisResult(
            topic=payload.topic,
            prompt=prompt,
            summary=payload.summary,
            personas=payload.personas,
            questions=payload.questions,
            followup_responses=payload.followup_responses,
            analysis_steps=steps,
        )

    def _apply_cardinality_policy(self, payload: SurveyPayload) -> None:
        if self.cardinality_policy == "ignore":
            return

        problems = check_cardinality(payload, followups_per_persona=FOLLOWUPS_PER_PERSONA)
        if not problems:
            return

        if self.cardinality_policy == "strict":
            raise MalformedResponse(
                f"survey breaks the requested structure: {'; '.join(problems)}",
                problems=problems,
            )
        for problem in problems:
            logger.warning(f"Survey cardinality mismatch: {problem}")

    async def _pause(self) -> None:
        if self.step_delay > 0:
            await asyncio.sleep(self.step_delay)

    async def _report(
        self,
        step_type: AnalysisStepType,
        steps: List[AnalysisStep],
        on_progress: Optional[ProgressCallback],
    ) -> None:
        step = AnalysisStep(type=step_type, message=STEP_MESSAGES[step_type])
        steps.append(step)
        logger.debug(f"Analysis step: {step_type.value}")

        if on_progress is None:
            return
        try:
            result: Any = on_progress(step)
            if inspect.isawaitable(result):
                await result
        except Exception as e:
            # Listener errors never abort generation
            logger.error(f"Progress callback failed on {step_type.value} step: {e}", exc_info=True)

"""Test doubles and sample survey data."""

from typing import Any, Dict, List, Optional

from pollsim.providers.base import BaseProvider, ChatMessage, ProviderResponse


class FakeProvider(BaseProvider):
    """Provider returning canned completions and recording every call."""

    provider_name = "fake"
    default_model = "fake-model"
    available_models = ["fake-model"]

    def __init__(self, responses: Optional[List[Any]] = None):
        super().__init__(api_key="test-key")
        self.responses = list(responses or [])
        self.calls: List[Dict[str, Any]] = []

    def queue(self, *responses: Any) -> None:
        self.responses.extend(responses)

    async def generate(
        self,
        messages: List[ChatMessage],
        model: Optional[str] = None,
        max_tokens: int = 4096,
        temperature: float = 0.7,
        system: Optional[str] = None,
        json_mode: bool = False,
        **kwargs,
    ) -> ProviderResponse:
        self.calls.append({
            "messages": messages,
            "system": system,
            "json_mode": json_mode,
            "max_tokens": max_tokens,
        })
        content = self.responses.pop(0) if self.responses else ""
        if isinstance(content, Exception):
            raise content
        return ProviderResponse(
            content=content,
            input_tokens=100,
            output_tokens=200,
            model=self.default_model,
        )

    def is_available(self) -> bool:
        return True


def make_survey(
    topic: str = "Capital Punishment in the UK",
    personas: int = 1,
    questions: int = 1,
    followups_per_persona: int = 2,
) -> Dict[str, Any]:
    """Build a survey payload in the shape the LLM is asked for."""
    demographics = [f"Group {i + 1}" for i in range(personas)]
    return {
        "topic": topic,
        "summary": "Opinion is sharply divided along generational lines.",
        "personas": [
            {
                "demographic": d,
                "age": "45-60",
                "location": "Northern England",
                "background": "Skilled trades, secondary education",
                "views": "Supports reinstatement for the most serious crimes",
            }
            for d in demographics
        ],
        "questions": [
            {
                "question": f"Question {q + 1}: should the death penalty be reinstated?",
                "agreement": 42,
                "demographic": "Older respondents agree more often",
                "responses": [
                    {"demographic": d, "agreement": 55, "reasoning": "Deterrence matters"}
                    for d in demographics
                ],
            }
            for q in range(questions)
        ],
        "followupResponses": [
            {
                "demographic": d,
                "question": f"Follow-up {n + 1} for {d}?",
                "response": "Justice has to be seen to be done.",
            }
            for d in demographics
            for n in range(followups_per_persona)
        ],
    }


"""Tests for the question answerer."""

import pytest

from pollsim.core.errors import GenerationFailed, QuotaExceeded
from pollsim.core.prompts import FALLBACK_ANSWER, QUESTION_SYSTEM_PROMPT
from pollsim.core.question_answerer import QuestionAnswerer
from pollsim.core.survey import PollContext
from pollsim.services.rate_limiter import RateLimiter
from tests.helpers import make_survey


@pytest.fixture
def context() -> PollContext:
    return PollContext.model_validate(make_survey(personas=2))


class TestAnswer:
    """Tests for QuestionAnswerer.answer."""

    async def test_returns_provider_text(self, answerer, fake_provider, context):
        fake_provider.queue("Group 1 is the most supportive.")

        answer = await answerer.answer("Who is most supportive?", context)

        assert answer == "Group 1 is the most supportive."

    async def test_prompt_carries_poll_and_question(self, answerer, fake_provider, context):
        fake_provider.queue("An answer")

        await answerer.answer("Who is most supportive?", context)

        call = fake_provider.calls[0]
        assert call["system"] == QUESTION_SYSTEM_PROMPT
        assert call["json_mode"] is False
        content = call["messages"][0].content
        assert "Topic: Capital Punishment in the UK" in content
        assert "Group 2" in content
        assert content.endswith("Question: Who is most supportive?")

    async def test_empty_content_falls_back(self, answerer, fake_provider, context):
        fake_provider.queue("")

        answer = await answerer.answer("Anything?", context)

        assert answer == FALLBACK_ANSWER

    async def test_quota_exceeded(self, fake_provider, context):
        answerer = QuestionAnswerer(fake_provider, RateLimiter(limit=0))

        with pytest.raises(QuotaExceeded):
            await answerer.answer("Anything?", context)

        assert fake_provider.calls == []

    async def test_provider_error(self, answerer, fake_provider, context):
        fake_provider.queue(TimeoutError("read timed out"))

        with pytest.raises(GenerationFailed) as exc_info:
            await answerer.answer("Anything?", context)

        assert exc_info.value.message == "Failed to answer analysis question: read timed out"

    async def test_consumes_one_unit(self, answerer, fake_provider, rate_limiter, context):
        fake_provider.queue("a", "b")

        await answerer.answer("One?", context)
        await answerer.answer("Two?", context)

        assert rate_limiter.used == 2

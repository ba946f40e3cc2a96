"""Tests for prompt templates."""

import json

import pytest

from pollsim.core.prompts import (
    FALLBACK_ANSWER,
    QUESTION_SYSTEM_PROMPT,
    SURVEY_SYSTEM_PROMPT,
    build_question_prompt,
    build_survey_prompt,
)
from pollsim.core.survey import PollContext
from tests.helpers import make_survey


class TestBuildSurveyPrompt:
    """Tests for build_survey_prompt."""

    @pytest.mark.parametrize("topic", [
        "death penalty in the UK",
        "Should voting be compulsory?",
        'Quotes "inside" the topic',
        "",
    ])
    def test_prompt_is_deterministic(self, topic):
        """Test the same topic always yields the same prompt."""
        assert build_survey_prompt(topic) == build_survey_prompt(topic)

    def test_topic_embedded_verbatim(self):
        topic = "Rent controls in Berlin & Munich (2024)"
        prompt = build_survey_prompt(topic)
        assert f'"{topic}"' in prompt

    def test_cardinality_requirements(self):
        """Test the fixed counts are requested."""
        prompt = build_survey_prompt("death penalty in the UK")
        assert "exactly 10 survey questions" in prompt
        assert "exactly 2 follow-up responses for EACH persona" in prompt
        assert "4-6 diverse personas" in prompt
        assert "responses from EVERY persona" in prompt

    def test_requests_single_json_object(self):
        prompt = build_survey_prompt("death penalty in the UK")
        assert "single JSON object" in prompt

    def test_required_fields_listed(self):
        prompt = build_survey_prompt("death penalty in the UK")
        for name in ("topic", "summary", "personas", "questions", "responses",
                     "followupResponses", "demographic", "agreement", "reasoning",
                     "age", "location", "background", "views"):
            assert f'"{name}"' in prompt

    def test_qualitative_requirements(self):
        prompt = build_survey_prompt("death penalty in the UK")
        assert "balanced" in prompt
        assert "multiple viewpoints" in prompt

    def test_different_topics_differ(self):
        assert build_survey_prompt("a") != build_survey_prompt("b")


class TestBuildQuestionPrompt:
    """Tests for build_question_prompt."""

    def test_contains_poll_context_and_question(self):
        context = PollContext.model_validate(make_survey(personas=2))
        prompt = build_question_prompt("Which group is most opposed?", context)

        assert "Topic: Capital Punishment in the UK" in prompt
        assert "Summary: Opinion is sharply divided" in prompt
        assert '"demographic": "Group 2"' in prompt
        assert '"reasoning": "Deterrence matters"' in prompt
        assert '"question": "Follow-up 1 for Group 1?"' in prompt
        assert prompt.endswith("Question: Which group is most opposed?")

    def test_personas_serialized_as_json(self):
        context = PollContext.model_validate(make_survey())
        prompt = build_question_prompt("Why?", context)

        start = prompt.index("Personas: ") + len("Personas: ")
        end = prompt.index("\nQuestions: ")
        personas = json.loads(prompt[start:end])
        assert personas[0]["location"] == "Northern England"

    def test_empty_followups(self):
        survey = make_survey(followups_per_persona=0)
        prompt = build_question_prompt("Why?", PollContext.model_validate(survey))
        assert "Follow-up Responses: []" in prompt


class TestSystemPrompts:
    def test_system_prompts(self):
        assert "political polling expert" in SURVEY_SYSTEM_PROMPT
        assert "only on the provided poll data" in QUESTION_SYSTEM_PROMPT

    def test_fallback_answer(self):
        assert FALLBACK_ANSWER == "I apologize, but I couldn't generate a response."

"""Prompt templates for survey generation and poll questions."""

import json
from typing import Any, List

from .survey import PollContext

QUESTION_COUNT = 10
FOLLOWUPS_PER_PERSONA = 2
MIN_PERSONAS = 4
MAX_PERSONAS = 6

SURVEY_SYSTEM_PROMPT = (
    "You are a political polling expert that generates detailed survey analysis."
)

QUESTION_SYSTEM_PROMPT = (
    "You are a political polling expert. Answer questions about the poll analysis "
    "in a clear and concise way. Base your answers only on the provided poll data."
)

FALLBACK_ANSWER = "I apologize, but I couldn't generate a response."

_SURVEY_FORMAT = """{
  "topic": "A clear, concise title for the analysis",
  "summary": "A detailed 2-3 paragraph analysis of the survey results, including key findings and trends",
  "personas": [
    {
      "demographic": "Label for this demographic group",
      "age": "Age range",
      "location": "Geographic location",
      "background": "Socioeconomic and educational background",
      "views": "Summary of their views on the topic"
    }
  ],
  "questions": [
    {
      "question": "The survey question",
      "agreement": "Average percentage of agreement across all demographics (0-100)",
      "demographic": "Summarized view across demographics",
      "responses": [
        {
          "demographic": "Which demographic group this represents",
          "agreement": "Percentage for this specific demographic (0-100)",
          "reasoning": "Brief explanation of their stance"
        }
      ]
    }
  ],
  "followupResponses": [
    {
      "demographic": "Which demographic group this represents",
      "question": "A thoughtful follow-up question based on their views",
      "response": "A detailed personal response from this demographic's perspective, including their reasoning and experiences"
    }
  ]
}"""


def build_survey_prompt(topic: str) -> str:
    """Build the instruction asking the LLM for a simulated survey of ``topic``.

    The result is deterministic for a given topic.
    """
    return f"""Analyze the following political topic and generate a detailed survey simulation: "{topic}"

Please provide a single JSON object in the following format:
{_SURVEY_FORMAT}

Important requirements:
1. Generate exactly {QUESTION_COUNT} survey questions
2. For each question, provide specific responses from EVERY persona
3. Generate exactly {FOLLOWUPS_PER_PERSONA} follow-up responses for EACH persona
4. Ensure each persona's views are well-reasoned and consistent across their responses
5. Make sure follow-up questions are unique and relevant to each persona's background

Generate {MIN_PERSONAS}-{MAX_PERSONAS} diverse personas, and ensure the analysis is balanced, data-driven, and considers multiple viewpoints. The follow-up responses should be detailed and reflect each persona's background and perspective."""


def _dump(items: List[Any]) -> str:
    return json.dumps(items, indent=2)


def build_question_prompt(question: str, context: PollContext) -> str:
    """Build the prompt answering ``question`` from a stored poll."""
    data = context.model_dump(mode="json", by_alias=True)
    return f"""Here is the poll data:
Topic: {context.topic}
Summary: {context.summary}
Personas: {_dump(data["personas"])}
Questions: {_dump(data["questions"])}
Follow-up Responses: {_dump(data["followupResponses"])}

Question: {question}"""

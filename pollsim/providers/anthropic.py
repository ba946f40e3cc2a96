"""Anthropic Claude provider implementation."""

import logging
from typing import List, Optional

from .base import BaseProvider, ProviderResponse, ChatMessage
from ..config import settings

logger = logging.getLogger(__name__)

# Claude has no response_format switch; JSON output is requested in the system prompt
JSON_MODE_INSTRUCTION = (
    "Respond with a single valid JSON object only. "
    "Do not wrap it in markdown code fences or add any commentary."
)


class AnthropicProvider(BaseProvider):
    """Provider for Anthropic Claude models."""

    provider_name = "anthropic"
    default_model = "claude-sonnet-4-20250514"
    available_models = [
        "claude-opus-4-20250514",
        "claude-sonnet-4-20250514",
        "claude-3-5-sonnet-20241022",
        "claude-3-5-haiku-20241022",
    ]

    def __init__(self, api_key: Optional[str] = None, **kwargs):
        super().__init__(api_key or settings.anthropic_api_key, **kwargs)
        self._client = None

    @property
    def client(self):
        """Lazy-load the Anthropic client."""
        if self._client is None:
            import anthropic
            self._client = anthropic.AsyncAnthropic(api_key=self.api_key)
        return self._client

    def is_available(self) -> bool:
        """Check if Anthropic is configured."""
        return bool(self.api_key)

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
        """Generate a complete response from Claude."""
        self.ensure_available()
        model = self.get_model(model)
        formatted_messages = self.format_messages(messages)

        if json_mode:
            system = f"{system}\n\n{JSON_MODE_INSTRUCTION}" if system else JSON_MODE_INSTRUCTION

        logger.debug(f"Anthropic request: model={model}, messages={len(formatted_messages)}, json_mode={json_mode}")
        response = await self.client.messages.create(
            model=model,
            max_tokens=max_tokens,
            temperature=temperature,
            system=system or "",
            messages=formatted_messages,
            **kwargs,
        )

        content = ""
        for block in response.content:
            if hasattr(block, "text"):
                content += block.text

        return ProviderResponse(
            content=content,
            input_tokens=response.usage.input_tokens,
            output_tokens=response.usage.output_tokens,
            model=model,
            stop_reason=response.stop_reason,
            metadata={
                "id": response.id,
            },
        )

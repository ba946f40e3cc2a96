"""OpenAI provider implementation."""

import logging
from typing import List, Optional, Dict

from .base import BaseProvider, ProviderResponse, ChatMessage
from ..config import settings

logger = logging.getLogger(__name__)


class OpenAIProvider(BaseProvider):
    """Provider for OpenAI chat completion models."""

    provider_name = "openai"
    default_model = "gpt-3.5-turbo"
    available_models = [
        "gpt-3.5-turbo",
        "gpt-4o",
        "gpt-4o-mini",
        "gpt-4-turbo",
    ]

    def __init__(self, api_key: Optional[str] = None, **kwargs):
        super().__init__(api_key or settings.openai_api_key, **kwargs)
        self._client = None

    @property
    def client(self):
        """Lazy-load the OpenAI client."""
        if self._client is None:
            from openai import AsyncOpenAI
            self._client = AsyncOpenAI(api_key=self.api_key)
        return self._client

    def is_available(self) -> bool:
        """Check if OpenAI is configured."""
        return bool(self.api_key)

    def format_messages(self, messages: List[ChatMessage], system: Optional[str] = None) -> List[Dict[str, str]]:
        """Format messages for OpenAI API, including system message."""
        formatted = []
        if system:
            formatted.append({"role": "system", "content": system})
        for msg in messages:
            if msg.role != "system":
                formatted.append({"role": msg.role, "content": msg.content})
        return formatted

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
        """Generate a complete response from OpenAI."""
        self.ensure_available()
        model = self.get_model(model)
        formatted_messages = self.format_messages(messages, system)

        if json_mode:
            kwargs["response_format"] = {"type": "json_object"}

        logger.debug(f"OpenAI request: model={model}, messages={len(formatted_messages)}, json_mode={json_mode}")
        response = await self.client.chat.completions.create(
            model=model,
            messages=formatted_messages,
            max_tokens=max_tokens,
            temperature=temperature,
            **kwargs,
        )

        choice = response.choices[0]
        content = choice.message.content or ""
        usage = response.usage

        return ProviderResponse(
            content=content,
            input_tokens=usage.prompt_tokens if usage else 0,
            output_tokens=usage.completion_tokens if usage else 0,
            model=model,
            stop_reason=choice.finish_reason,
            metadata={
                "id": response.id,
            },
        )

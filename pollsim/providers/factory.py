"""Provider factory for creating provider instances."""

from enum import Enum
from typing import Optional

from .base import BaseProvider
from .anthropic import AnthropicProvider
from .openai import OpenAIProvider
from ..config import settings


class ProviderType(str, Enum):
    """Supported provider types."""
    OPENAI = "openai"
    ANTHROPIC = "anthropic"


# Provider registry
_providers: dict[ProviderType, BaseProvider] = {}


def get_provider(provider_type: Optional[ProviderType | str] = None) -> BaseProvider:
    """
    Get or create a provider instance.

    Args:
        provider_type: The type of provider to get, defaults to LLM_PROVIDER

    Returns:
        A provider instance

    Raises:
        ValueError: If the provider type is unknown
    """
    if provider_type is None:
        provider_type = settings.llm_provider

    if isinstance(provider_type, str):
        try:
            provider_type = ProviderType(provider_type.lower())
        except ValueError:
            raise ValueError(f"Unknown provider type: {provider_type}")

    if provider_type not in _providers:
        if provider_type == ProviderType.OPENAI:
            _providers[provider_type] = OpenAIProvider(model=settings.llm_model)
        elif provider_type == ProviderType.ANTHROPIC:
            _providers[provider_type] = AnthropicProvider(model=settings.llm_model)
        else:
            raise ValueError(f"Unknown provider type: {provider_type}")

    return _providers[provider_type]


def get_available_providers() -> list[ProviderType]:
    """Get list of configured providers."""
    return [
        provider_type
        for provider_type in ProviderType
        if get_provider(provider_type).is_available()
    ]

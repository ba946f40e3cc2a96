# Providers module
from .base import BaseProvider, ChatMessage, ProviderResponse, ProviderNotConfigured
from .anthropic import AnthropicProvider
from .openai import OpenAIProvider
from .factory import get_provider, get_available_providers, ProviderType

__all__ = [
    "BaseProvider",
    "ChatMessage",
    "ProviderResponse",
    "ProviderNotConfigured",
    "AnthropicProvider",
    "OpenAIProvider",
    "get_provider",
    "get_available_providers",
    "ProviderType",
]

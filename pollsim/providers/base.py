"""Base provider interface for LLM completion services."""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import List, Optional, Dict, Any


@dataclass
class ProviderResponse:
    """Complete response from a provider."""
    content: str
    input_tokens: int
    output_tokens: int
    model: str
    stop_reason: Optional[str] = None
    metadata: Dict[str, Any] = field(default_factory=dict)

    @property
    def total_tokens(self) -> int:
        return self.input_tokens + self.output_tokens


@dataclass
class ChatMessage:
    """A message in a conversation."""
    role: str  # "user", "assistant", "system"
    content: str


class ProviderNotConfigured(RuntimeError):
    """The provider has no API key."""


class BaseProvider(ABC):
    """Abstract base class for LLM providers."""

    # Provider identification
    provider_name: str = "base"

    # Default models
    default_model: str = ""
    available_models: List[str] = []

    def __init__(self, api_key: Optional[str] = None, model: Optional[str] = None, **kwargs):
        self.api_key = api_key
        self.model = model
        self.kwargs = kwargs

    @abstractmethod
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
        """Generate a complete response.

        With ``json_mode`` the provider is asked to answer with a single
        JSON object.
        """
        pass

    def get_model(self, model: Optional[str] = None) -> str:
        """Get the model to use, falling back to the configured one, then the default."""
        if model and model in self.available_models:
            return model
        return self.model or self.default_model

    @abstractmethod
    def is_available(self) -> bool:
        """Check if this provider is configured and available."""
        pass

    def ensure_available(self) -> None:
        if not self.is_available():
            raise ProviderNotConfigured(f"{self.provider_name} API key is not configured")

    def format_messages(self, messages: List[ChatMessage]) -> List[Dict[str, str]]:
        """Format messages for the provider's API."""
        return [
            {"role": msg.role, "content": msg.content}
            for msg in messages
            if msg.role != "system"  # System messages handled separately
        ]

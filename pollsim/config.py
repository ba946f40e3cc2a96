"""Configuration management for the poll simulation service."""

from pydantic_settings import BaseSettings
from pydantic import Field
from typing import List, Literal, Optional


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # API Keys
    openai_api_key: Optional[str] = Field(default=None, alias="OPENAI_API_KEY")
    anthropic_api_key: Optional[str] = Field(default=None, alias="ANTHROPIC_API_KEY")

    # LLM provider selection
    llm_provider: str = Field(default="openai", alias="LLM_PROVIDER")
    llm_model: Optional[str] = Field(default=None, alias="LLM_MODEL")
    llm_temperature: float = Field(default=0.7, alias="LLM_TEMPERATURE")
    llm_max_tokens: int = Field(default=4096, alias="LLM_MAX_TOKENS")

    # Database
    database_url: str = Field(
        default="sqlite+aiosqlite:///./data/pollsim.db",
        alias="DATABASE_URL"
    )

    # Server settings
    host: str = Field(default="0.0.0.0", alias="HOST")
    port: int = Field(default=8000, alias="PORT")
    debug: bool = Field(default=False, alias="DEBUG")
    cors_origins: List[str] = Field(
        default=["http://localhost:3000", "http://localhost:5173", "http://127.0.0.1:5173"],
        alias="CORS_ORIGINS",
    )

    # Lifetime budget of LLM calls for the process
    api_call_limit: int = Field(default=50, alias="API_CALL_LIMIT")

    # Pause between progress steps while a poll is generated (0 disables)
    step_delay_seconds: float = Field(default=1.0, alias="STEP_DELAY_SECONDS")

    # What to do when the LLM ignores the requested response/follow-up counts
    cardinality_policy: Literal["ignore", "warn", "strict"] = Field(
        default="warn", alias="CARDINALITY_POLICY"
    )

    # WebSocket settings
    ws_filter_subscriptions: bool = Field(default=True, alias="WS_FILTER_SUBSCRIPTIONS")

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"


# Global settings instance
settings = Settings()


def get_settings() -> Settings:
    """Get the global settings instance."""
    return settings

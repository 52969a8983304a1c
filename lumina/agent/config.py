"""Agent and chat configuration with environment variable loading.

Pydantic-based configuration for the completion agent and the chat
endpoints. The model is reached through an OpenAI-compatible API; the
default base URL points at Groq.
"""

import os

from dotenv import load_dotenv
from pydantic import BaseModel, Field, field_validator

# Load environment variables from .env file
load_dotenv()

DEFAULT_BASE_URL = "https://api.groq.com/openai/v1"
DEFAULT_MODEL = "llama-3.3-70b-versatile"


class MissingCredentialsError(Exception):
    """Raised when a request carries no usable API keys."""

    def __init__(self, message: str = "Missing API keys") -> None:
        super().__init__(message)


class AgentConfig(BaseModel):
    """Configuration for the completion agent.

    Attributes:
        api_key: API key for model access.
        base_url: OpenAI-compatible API base URL.
        model_name: Model identifier to use.
        temperature: Sampling temperature (0.0 = deterministic, 2.0 = creative).
        max_tokens: Maximum tokens in generated response.
    """

    api_key: str = Field(
        default_factory=lambda: os.getenv("LLM_API_KEY", os.getenv("GROQ_API_KEY", "")),
        description="API key for LLM provider",
    )
    base_url: str | None = Field(
        default_factory=lambda: os.getenv("LLM_BASE_URL") or DEFAULT_BASE_URL,
        description="OpenAI-compatible API base URL",
    )
    model_name: str = Field(
        default_factory=lambda: os.getenv("LLM_MODEL", DEFAULT_MODEL),
        description="Model to use",
    )
    temperature: float = Field(
        default=0.1,
        ge=0.0,
        le=2.0,
        description="Sampling temperature for response generation",
    )
    max_tokens: int = Field(
        default=4096,
        ge=1,
        le=128000,
        description="Maximum tokens in generated response",
    )

    @field_validator("api_key")
    @classmethod
    def validate_api_key(cls, v: str) -> str:
        """Validate that API key is provided and non-empty."""
        if not v or not v.strip():
            raise ValueError(
                "API key required. Set LLM_API_KEY or GROQ_API_KEY in .env"
            )
        return v.strip()


class Credentials(BaseModel):
    """API keys resolved for a single request."""

    api_key: str
    groq_api_key: str


def _parse_timeout(raw: str | None) -> float | None:
    if not raw or not raw.strip():
        return None
    return float(raw)


class ChatSettings(BaseModel):
    """Server-side fallbacks and limits for the chat endpoints.

    Attributes:
        api_key: Primary API key used when a request does not send one.
        groq_api_key: Completion API key used when a request does not send one.
        fragment_timeout: Seconds to wait for each completion fragment.
            None waits indefinitely.
    """

    api_key: str | None = Field(
        default_factory=lambda: os.getenv("GOOGLE_API_KEY") or None,
    )
    groq_api_key: str | None = Field(
        default_factory=lambda: os.getenv("GROQ_API_KEY") or None,
    )
    fragment_timeout: float | None = Field(
        default_factory=lambda: _parse_timeout(os.getenv("CHAT_FRAGMENT_TIMEOUT")),
        gt=0,
    )

    def resolve_credentials(
        self,
        api_key: str | None = None,
        groq_api_key: str | None = None,
    ) -> Credentials:
        """Combine request-supplied keys with the environment fallbacks.

        Args:
            api_key: Primary key from the request, if any.
            groq_api_key: Completion key from the request, if any.

        Returns:
            Credentials with both keys present.

        Raises:
            MissingCredentialsError: If either key is missing after fallback.
        """
        primary = (api_key or "").strip() or self.api_key
        completion = (groq_api_key or "").strip() or self.groq_api_key
        if not primary or not completion:
            raise MissingCredentialsError()
        return Credentials(api_key=primary, groq_api_key=completion)


def get_agent_config(api_key: str | None = None) -> AgentConfig:
    """Create agent configuration from environment.

    Args:
        api_key: Optional key overriding the environment.

    Returns:
        Configured AgentConfig instance.

    Raises:
        ValueError: If no API key is set.
    """
    if api_key:
        return AgentConfig(api_key=api_key)
    return AgentConfig()


def get_chat_settings() -> ChatSettings:
    """Create chat settings from environment."""
    return ChatSettings()

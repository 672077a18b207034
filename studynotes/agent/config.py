"""Note generator configuration with environment variable loading.

Pydantic-based configuration for the note-taking agent.
Supports OpenAI and OpenAI-compatible APIs via custom base URL.
"""

import os

from dotenv import load_dotenv
from pydantic import BaseModel, Field, field_validator

# Load environment variables from .env file
load_dotenv()


class GeneratorConfig(BaseModel):
    """Configuration for note generation.

    Supports OpenAI and any OpenAI-compatible API via LLM_BASE_URL.

    Attributes:
        api_key: API key for model access.
        base_url: API base URL (None for OpenAI default).
        model_name: Model identifier to use.
        temperature: Sampling temperature (0.0 = deterministic, 2.0 = creative).
        max_tokens: Maximum tokens generated per chunk.
        chunk_size: Maximum characters of source text per chunk.
        max_concurrency: Maximum simultaneous model calls.
    """

    api_key: str = Field(
        default_factory=lambda: os.getenv("LLM_API_KEY", os.getenv("OPENAI_API_KEY", "")),
        description="API key for LLM provider",
    )
    base_url: str | None = Field(
        default_factory=lambda: os.getenv("LLM_BASE_URL") or None,
        description="API base URL (None for OpenAI default)",
    )
    model_name: str = Field(
        default_factory=lambda: os.getenv("LLM_MODEL", "gpt-4o-mini"),
        description="Model to use",
    )
    temperature: float = Field(
        default=0.7,
        ge=0.0,
        le=2.0,
        description="Sampling temperature for note generation",
    )
    max_tokens: int = Field(
        default=1000,
        ge=1,
        le=128000,
        description="Maximum tokens generated per chunk",
    )
    chunk_size: int = Field(
        default_factory=lambda: int(os.getenv("NOTES_CHUNK_SIZE", "4000")),
        ge=1,
        description="Maximum characters per chunk",
    )
    max_concurrency: int = Field(
        default_factory=lambda: int(os.getenv("NOTES_MAX_CONCURRENCY", "3")),
        ge=1,
        le=32,
        description="Maximum simultaneous model calls",
    )

    @field_validator("api_key")
    @classmethod
    def validate_api_key(cls, v: str) -> str:
        """Validate that API key is provided and non-empty."""
        if not v or not v.strip():
            raise ValueError(
                "API key required. Set LLM_API_KEY or OPENAI_API_KEY in .env"
            )
        return v.strip()


def get_generator_config() -> GeneratorConfig:
    """Create generator configuration from environment.

    Returns:
        Configured GeneratorConfig instance.

    Raises:
        ValueError: If no API key is set.
    """
    return GeneratorConfig()

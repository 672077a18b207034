"""Application configuration with environment variable loading.

Covers the database, file storage and upload limits. Model settings
live in :mod:`studynotes.agent.config`.
"""

import os

from dotenv import load_dotenv
from pydantic import BaseModel, Field, field_validator

load_dotenv()

MAX_UPLOAD_SIZE = 10 * 1024 * 1024  # 10MB


def _split_origins(value: str) -> list[str]:
    return [origin.strip() for origin in value.split(",") if origin.strip()]


class AppConfig(BaseModel):
    """Configuration for the web application.

    Attributes:
        database_url: SQLAlchemy URL of the document database.
        upload_dir: Directory where uploaded PDFs are stored.
        max_upload_size: Maximum accepted upload in bytes.
        rate_limit_per_minute: Uploads allowed per user per minute.
        cors_origins: Allowed CORS origins.
    """

    database_url: str = Field(
        default_factory=lambda: os.getenv("DATABASE_URL", "sqlite:///data/studynotes.db"),
        description="Document database URL",
    )
    upload_dir: str = Field(
        default_factory=lambda: os.getenv("UPLOAD_DIR", "data/uploads"),
        description="Directory for uploaded PDF files",
    )
    max_upload_size: int = Field(
        default_factory=lambda: int(os.getenv("MAX_UPLOAD_SIZE", str(MAX_UPLOAD_SIZE))),
        ge=1,
        description="Maximum upload size in bytes",
    )
    rate_limit_per_minute: int = Field(
        default_factory=lambda: int(os.getenv("RATE_LIMIT_PER_MINUTE", "10")),
        ge=1,
        description="Uploads allowed per user per minute",
    )
    cors_origins: list[str] = Field(
        default_factory=lambda: _split_origins(os.getenv("CORS_ORIGINS", "*")),
        description="Allowed CORS origins",
    )

    @field_validator("database_url")
    @classmethod
    def validate_database_url(cls, v: str) -> str:
        """Reject an empty database URL."""
        if not v or not v.strip():
            raise ValueError("DATABASE_URL must not be empty")
        return v.strip()


_app_config: AppConfig | None = None


def get_app_config() -> AppConfig:
    """Get or create the global application configuration."""
    global _app_config
    if _app_config is None:
        _app_config = AppConfig()
    return _app_config

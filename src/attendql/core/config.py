"""Process-wide configuration for AttendQL.

Settings are read once at startup and passed explicitly to the components
that need them.
"""

from __future__ import annotations

import os

from pydantic import BaseModel, Field

DEFAULT_DATABASE_URL = "sqlite:///./attendql.db"
DEFAULT_MODEL = "gpt-4"
DEFAULT_TEMPERATURE = 0.1
DEFAULT_TIMEOUT_SECONDS = 60.0


def get_database_url(url: str | None = None) -> str:
    """Resolve database URL from argument, environment variable, or default.

    Priority:
    1. Explicit URL argument
    2. ATTENDQL_DATABASE_URL environment variable
    3. Default: sqlite:///./attendql.db
    """
    if url:
        return url
    if env_url := os.getenv("ATTENDQL_DATABASE_URL"):
        return env_url
    return DEFAULT_DATABASE_URL


class Settings(BaseModel):
    """Immutable configuration for the store and the text-generation service."""

    database_url: str = Field(default=DEFAULT_DATABASE_URL, description="SQLAlchemy URL")
    openai_api_key: str | None = Field(default=None, description="Bearer credential")
    openai_base_url: str | None = Field(
        default=None, description="Override for the OpenAI-compatible endpoint"
    )
    model: str = Field(default=DEFAULT_MODEL, description="Model identifier")
    temperature: float = Field(default=DEFAULT_TEMPERATURE, ge=0.0, le=2.0)
    timeout_seconds: float = Field(default=DEFAULT_TIMEOUT_SECONDS, gt=0)

    model_config = {"frozen": True}

    @classmethod
    def from_env(cls, database_url: str | None = None) -> Settings:
        """Build settings from environment variables.

        Args:
            database_url: Explicit database URL, takes precedence over the environment

        Returns:
            Settings instance
        """
        return cls(
            database_url=get_database_url(database_url),
            openai_api_key=os.getenv("OPENAI_API_KEY"),
            openai_base_url=os.getenv("OPENAI_BASE_URL"),
            model=os.getenv("ATTENDQL_MODEL", DEFAULT_MODEL),
            temperature=float(os.getenv("ATTENDQL_TEMPERATURE", DEFAULT_TEMPERATURE)),
            timeout_seconds=float(os.getenv("ATTENDQL_TIMEOUT", DEFAULT_TIMEOUT_SECONDS)),
        )

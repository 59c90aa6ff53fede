# This project was developed with assistance from AI tools.
"""
Application configuration.

All settings read from environment variables with sensible local dev defaults.
Group related settings together; each group becomes a section future PRs extend.
"""

from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# Resolve project root .env regardless of CWD (matches inference/config.py approach)
_PROJECT_ROOT = Path(__file__).resolve().parents[4]
_ENV_FILE = _PROJECT_ROOT / ".env"


class Settings(BaseSettings):
    """Application settings -- single source of truth for env-driven config."""

    model_config = SettingsConfigDict(
        env_file=str(_ENV_FILE),
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # -- App --
    APP_NAME: str = "dealer-chat"
    DEBUG: bool = False

    # -- CORS --
    ALLOWED_HOSTS: list[str] = ["http://localhost:3000"]

    # -- Relay --
    ALLOWED_DOMAINS: list[str] = Field(
        default=[
            "toyota.com",
            "honda.com",
            "ford.com",
            "bmw.com",
            "mercedes.com",
            "localhost",
        ],
        description="Customer domains permitted to use the chat relay (exact, case-sensitive).",
    )
    CONTEXT_WINDOW: int = Field(
        default=10,
        description="Number of prior messages sent to the model with each turn.",
    )
    CHAT_MODEL_TIER: str = Field(
        default="chat",
        description="Model entry in config/models.yaml used for chat completions.",
    )
    DEFAULT_ASSISTANT: str = Field(
        default="dealership-support",
        description="Assistant profile used when no per-domain profile exists.",
    )

    # -- Widget embed --
    WIDGET_API_URL: str = "/api/chat"
    WIDGET_STYLESHEET_URL: str = "/chat-widget.css"
    WIDGET_BUNDLE_URL: str = "/chat-widget-bundle.js"
    WIDGET_PRIMARY_COLOR: str = "#007bff"

    # -- Observability (LangFuse) --
    LANGFUSE_PUBLIC_KEY: str | None = Field(
        default=None,
        description="LangFuse public key. When set (with secret key), tracing is active.",
    )
    LANGFUSE_SECRET_KEY: str | None = Field(
        default=None,
        description="LangFuse secret key.",
    )
    LANGFUSE_HOST: str | None = Field(
        default=None,
        description="LangFuse server URL (e.g. http://localhost:3001).",
    )


settings = Settings()

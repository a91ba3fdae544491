"""Configuration Management."""

import os
from functools import lru_cache
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()


def _api_key_from_env() -> str:
    return os.getenv("GEMINI_API_KEY") or os.getenv("GOOGLE_API_KEY") or ""


class Settings(BaseSettings):
    """Application settings from environment."""

    model_config = SettingsConfigDict(
        env_prefix="BUILDER_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",  # Ignore extra environment variables
    )

    # Server
    host: str = Field(default="0.0.0.0", description="HTTP bind address")
    port: int = Field(default=8000, description="HTTP port")

    # Model
    gemini_api_key: str = Field(default_factory=_api_key_from_env, description="Gemini API key")
    description_model: str = Field(default="gemini-2.5-flash", description="App description model")
    text_model: str = Field(default="gemini-2.5-flash", description="Text action model")
    code_model: str = Field(default="gemini-2.5-pro", description="Flutter code model")
    gemini_temperature: float = Field(default=0.2, ge=0.0, le=2.0, description="Model temperature")
    gemini_max_tokens: int = Field(default=8192, gt=0, description="Max output tokens")

    # Images
    image_model: str = Field(default="imagen-4.0-generate-001", description="Imagen model name")
    imagen_base_url: str = Field(
        default="https://generativelanguage.googleapis.com/v1beta",
        description="Imagen REST base URL",
    )
    imagen_timeout: float = Field(default=60.0, gt=0, description="Imagen request timeout")

    # Actions
    action_timeout: float | None = Field(
        default=None, gt=0, description="Per-action timeout in seconds (None = unbounded)"
    )

    # Logging
    log_level: str = Field(default="INFO", description="Log level")
    json_logs: bool = Field(default=False, description="Use JSON log format")

    # Caching
    enable_cache: bool = Field(default=True, description="Enable generated code caching")
    cache_size: int = Field(default=100, gt=0, description="Cache max size")
    cache_ttl: int = Field(default=3600, gt=0, description="Cache TTL (seconds)")

    # Deployment
    deploy_delay: float = Field(default=2.5, ge=0.0, description="Mock deploy delay (seconds)")
    deploy_failure_rate: float = Field(
        default=0.05, ge=0.0, le=1.0, description="Mock deploy transient failure probability"
    )

    # Auth
    google_client_id: str = Field(default="", description="Google Identity client id")

    # Validation
    max_message_length: int = Field(default=10_000, gt=0, description="Max message length")
    max_history_length: int = Field(default=50, gt=0, description="Max chat history length")


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()

"""
Model configuration with strong typing.
Centralized settings for Gemini API calls.
"""

from enum import Enum
import os

from pydantic import BaseModel, ConfigDict, Field, model_validator


class GeminiModelName(str, Enum):
    """Gemini model variants used by the builder."""

    FLASH = "gemini-2.5-flash"  # App descriptions and text actions
    PRO = "gemini-2.5-pro"  # Flutter code generation


class GeminiConfig(BaseModel):
    """Type-safe Gemini API configuration."""

    model_config = ConfigDict(frozen=True, use_enum_values=True)

    # Model selection
    model_name: str = Field(default=GeminiModelName.FLASH.value)
    api_key: str | None = Field(default=None)

    # Generation parameters
    temperature: float = Field(default=0.2, ge=0.0, le=2.0)
    max_tokens: int = Field(default=8192, ge=1, le=65536)
    top_p: float = Field(default=0.95, ge=0.0, le=1.0)
    top_k: int = Field(default=40, ge=1, le=100)

    # Instructions
    system_instruction: str | None = Field(default=None)

    # JSON mode
    json_mode: bool = Field(default=False)
    response_schema: dict | None = Field(default=None)

    @model_validator(mode="before")
    @classmethod
    def default_api_key(cls, data):
        """Fill the API key from the environment if not provided."""
        if isinstance(data, dict) and not data.get("api_key"):
            data = {**data, "api_key": os.getenv("GEMINI_API_KEY") or os.getenv("GOOGLE_API_KEY")}
        return data

    @property
    def is_pro_model(self) -> bool:
        return "pro" in self.model_name.lower()

    def with_updates(self, **updates) -> "GeminiConfig":
        """Create updated config (immutable pattern)."""
        return self.model_copy(update=updates)

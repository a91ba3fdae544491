"""Request validation with strict pydantic models."""

from pydantic import BaseModel, Field, field_validator, ConfigDict


# Validation limits
MAX_MESSAGE_LENGTH = 10_000
MAX_INPUT_LENGTH = 20_000
MAX_CREDENTIAL_LENGTH = 8_192


class ValidationError(Exception):
    """Validation failed."""

    pass


class RequestValidator(BaseModel):
    """Base validator with strict configuration."""

    model_config = ConfigDict(
        strict=True, validate_assignment=True, extra="forbid", frozen=True  # Immutable by default
    )


class ChatRequest(RequestValidator):
    """Validated chat message for the app builder.

    Empty prompts are allowed through so the workspace can answer with its
    own guidance message instead of a transport error.
    """

    message: str = Field(default="", max_length=MAX_MESSAGE_LENGTH)

    @field_validator("message")
    @classmethod
    def strip_message(cls, v: str) -> str:
        return v.strip()


class InputUpdateRequest(RequestValidator):
    """New value for a preview input field (kept verbatim, never stripped)."""

    value: str = Field(default="", max_length=MAX_INPUT_LENGTH)


class SignInRequest(RequestValidator):
    """Google Identity credential posted by the sign-in button."""

    credential: str = Field(min_length=1, max_length=MAX_CREDENTIAL_LENGTH)

    @field_validator("credential")
    @classmethod
    def validate_credential(cls, v: str) -> str:
        """Ensure the credential looks like a three-part JWT."""
        stripped = v.strip()
        if stripped.count(".") != 2:
            raise ValueError("Credential must be a JWT")
        return stripped


class ViewRequest(RequestValidator):
    """Active right-hand panel."""

    view: str = Field(pattern="^(preview|code)$")

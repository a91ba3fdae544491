"""Description Parser - model output to validated Application Description."""

from typing import Any

from pydantic import ValidationError as PydanticValidationError

from core import get_logger, ValidationError
from core.json import extract_json, validate_json_size, JSONParseError
from .models import AppDescription, GenerationResult

logger = get_logger(__name__)

MAX_DESCRIPTION_SIZE = 256 * 1024  # 256KB


class DescriptionParseError(ValidationError):
    """Model output is not a valid Application Description."""


def _load(content: str | dict[str, Any]) -> dict[str, Any]:
    if isinstance(content, dict):
        return content
    try:
        validate_json_size(content, MAX_DESCRIPTION_SIZE, "App description")
        return extract_json(content, repair=True)
    except JSONParseError as e:
        logger.error("json_parse_failed", error=str(e))
        raise DescriptionParseError(f"Invalid JSON: {e}") from e


def _warn_dangling(description: AppDescription) -> None:
    for component_id, reference in description.dangling_references():
        logger.warning("dangling_reference", component=component_id, reference=reference)


def parse_description(content: str | dict[str, Any]) -> AppDescription:
    """
    Parse an Application Description.

    Args:
        content: Raw model output or an already decoded object

    Raises:
        DescriptionParseError: On malformed JSON or an invalid structure
    """
    data = _load(content)
    # Refinement responses wrap the description; accept either shape
    if "components" not in data and isinstance(data.get("appDescription"), dict):
        data = data["appDescription"]

    try:
        description = AppDescription.model_validate(data)
    except PydanticValidationError as e:
        logger.error("invalid_description", errors=e.error_count())
        raise DescriptionParseError(f"Invalid app description: {e}") from e

    _warn_dangling(description)
    logger.info("description_parsed", components=len(description.components))
    return description


def parse_generation_result(content: str | dict[str, Any]) -> GenerationResult:
    """
    Parse a generate-or-refine response.

    A bare description (no ``appDescription`` wrapper) is accepted with an
    empty explanation.

    Raises:
        DescriptionParseError: On malformed JSON or an invalid structure
    """
    data = _load(content)
    if "appDescription" not in data and "components" in data:
        data = {"explanation": "", "appDescription": data}

    try:
        result = GenerationResult.model_validate(data)
    except PydanticValidationError as e:
        logger.error("invalid_generation_result", errors=e.error_count())
        raise DescriptionParseError(f"Invalid generation result: {e}") from e

    _warn_dangling(result.app_description)
    return result

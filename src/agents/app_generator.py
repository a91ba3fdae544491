"""
App Generator
Generates and refines Application Descriptions from natural language.
"""

import time
from typing import Any

from appspec import AppDescription, DescriptionParseError, GenerationResult, parse_generation_result
from core import get_logger, safe_json_dumps
from monitoring import metrics_collector
from .prompts import PromptBuilder


logger = get_logger(__name__)

GENERATION_ERROR_MESSAGE = "The AI returned an invalid app configuration. Please try again."


class GenerationError(Exception):
    """Description generation failed."""


class AppGenerator:
    """
    Turns a user prompt (and optionally the current app) into a new
    Application Description.

    The model is expected to be configured in JSON mode with the generation
    result schema and the architect system instruction.
    """

    def __init__(self, model: Any) -> None:
        self.model = model

    async def generate_or_refine(
        self,
        prompt: str,
        prior: AppDescription | None = None,
        history: list[tuple[str, str]] | None = None,
    ) -> GenerationResult:
        """
        Generate a new description, or refine ``prior`` when given.

        Args:
            prompt: User request
            prior: Description currently installed in the preview
            history: Earlier (role, text) conversation turns

        Returns:
            Explanation, changed files and the new description

        Raises:
            GenerationError: Model call failed or returned an invalid structure
        """
        kind = "refine" if prior is not None else "generate"
        current = safe_json_dumps(prior.to_wire(), indent=2) if prior is not None else None
        full_prompt = PromptBuilder.build_generation(prompt, current, history)

        logger.info("generating", kind=kind, prompt_length=len(prompt))
        start_time = time.time()

        try:
            response = await self.model.ainvoke(full_prompt)
        except Exception as e:
            metrics_collector.record_generation(kind, "error", time.time() - start_time)
            logger.error("model_failed", kind=kind, error=str(e))
            raise GenerationError(str(e) or GENERATION_ERROR_MESSAGE) from e

        try:
            result = parse_generation_result((response or "").strip())
        except DescriptionParseError as e:
            metrics_collector.record_generation(kind, "invalid", time.time() - start_time)
            logger.error("invalid_response", kind=kind, error=str(e), response=(response or "")[:500])
            raise GenerationError(GENERATION_ERROR_MESSAGE) from e

        metrics_collector.record_generation(kind, "success", time.time() - start_time)
        logger.info(
            "generated",
            kind=kind,
            components=len(result.app_description.components),
            files=list(result.files_changed),
        )
        return result

"""
Code Generator
Converts Application Descriptions into Flutter source via the code model.
"""

import re
import time
from typing import Any

from appspec import AppDescription
from core import get_logger, safe_json_dumps, LRUCache
from monitoring import metrics_collector
from .prompts import PromptBuilder


logger = get_logger(__name__)

_LEADING_FENCE = re.compile(r"^\s*```dart\s*")
_TRAILING_FENCE = re.compile(r"```\s*$")


class CodeGenerationError(Exception):
    """Source code generation failed."""


def strip_code_fences(text: str) -> str:
    """Remove a leading ```dart fence and a trailing ``` fence."""
    without_leading = _LEADING_FENCE.sub("", text, count=1)
    return _TRAILING_FENCE.sub("", without_leading, count=1).strip()


class CodeGenerator:
    """Flutter code generation with an LRU cache keyed by description."""

    def __init__(
        self,
        model: Any,
        enable_cache: bool = True,
        cache_size: int = 100,
        cache_ttl: int | None = 3600,
    ) -> None:
        self.model = model
        self.cache: LRUCache[str] | None = (
            LRUCache(max_size=cache_size, ttl_seconds=cache_ttl) if enable_cache else None
        )

    async def generate_source_code(self, description: AppDescription) -> str:
        """
        Generate one ``main.dart`` file for a description.

        Raises:
            CodeGenerationError: Model call failed or returned nothing
        """
        description_json = safe_json_dumps(description.to_wire(), indent=2)

        if self.cache is not None:
            cached = self.cache.get(description_json)
            metrics_collector.record_cache("code", cached is not None)
            if cached is not None:
                logger.debug("cache_hit", components=len(description.components))
                return cached

        start_time = time.time()
        try:
            response = await self.model.ainvoke(PromptBuilder.build_code(description_json))
        except Exception as e:
            metrics_collector.record_generation("code", "error", time.time() - start_time)
            logger.error("code_generation_failed", error=str(e))
            raise CodeGenerationError(str(e) or "Code generation failed.") from e

        code = strip_code_fences(response or "")
        if not code:
            metrics_collector.record_generation("code", "empty", time.time() - start_time)
            raise CodeGenerationError("The AI returned no source code. Please try again.")

        metrics_collector.record_generation("code", "success", time.time() - start_time)
        logger.info("code_generated", size=len(code))

        if self.cache is not None:
            self.cache.set(description_json, code)
        return code

"""Action Executor - Gemini text and Imagen image actions for the preview."""

import asyncio
import time
from collections.abc import Mapping
from typing import Any

from appspec import ActionType
from clients import ImagenClient, ImagenError
from core import get_logger
from monitoring import metrics_collector
from renderer import ActionExecutionError


logger = get_logger(__name__)

IMAGE_MIME_TYPE = "image/jpeg"


def build_action_prompt(inputs: Mapping[str, str]) -> str:
    """One ``label: value`` line per input, labels taken from snake_case ids."""
    return "\n".join(f"{key.replace('_', ' ')}: {value}" for key, value in inputs.items())


class GeminiActionExecutor:
    """Executes preview button actions.

    ``GENERATE_TEXT`` returns the model's raw text; ``GENERATE_IMAGE`` returns
    a ``data:`` URI ready to embed.
    """

    def __init__(
        self,
        text_model: Any,
        imagen: ImagenClient,
        timeout: float | None = None,
    ) -> None:
        self.text_model = text_model
        self.imagen = imagen
        self.timeout = timeout

    async def execute(self, action: ActionType, inputs: Mapping[str, str]) -> str:
        if action not in (ActionType.GENERATE_TEXT, ActionType.GENERATE_IMAGE):
            raise ActionExecutionError(f"Unsupported action: {action}")

        action_name = ActionType(action).value
        prompt = build_action_prompt(inputs)
        start_time = time.time()

        try:
            if self.timeout is None:
                result = await self._run(ActionType(action), prompt)
            else:
                result = await asyncio.wait_for(self._run(ActionType(action), prompt), self.timeout)
        except asyncio.TimeoutError as e:
            metrics_collector.record_action(action_name, "timeout", time.time() - start_time)
            logger.warning("action_timeout", action=action_name, timeout=self.timeout)
            raise ActionExecutionError("The action timed out. Please try again.") from e
        except ActionExecutionError:
            metrics_collector.record_action(action_name, "error", time.time() - start_time)
            raise
        except Exception as e:
            metrics_collector.record_action(action_name, "error", time.time() - start_time)
            logger.error("action_failed", action=action_name, error=str(e))
            raise ActionExecutionError(str(e) or "Action failed.") from e

        metrics_collector.record_action(action_name, "success", time.time() - start_time)
        return result

    async def _run(self, action: ActionType, prompt: str) -> str:
        match action:
            case ActionType.GENERATE_TEXT:
                return await self.text_model.ainvoke(prompt)
            case ActionType.GENERATE_IMAGE:
                return await self._generate_image(prompt)

    async def _generate_image(self, prompt: str) -> str:
        loop = asyncio.get_running_loop()
        try:
            encoded = await loop.run_in_executor(None, self.imagen.generate, prompt)
        except ImagenError as e:
            raise ActionExecutionError(str(e)) from e

        if not encoded:
            raise ActionExecutionError("Image generation failed.")
        return f"data:{IMAGE_MIME_TYPE};base64,{encoded}"

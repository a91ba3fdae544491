"""Action execution contract consumed by the renderer."""

from collections.abc import Mapping
from typing import Protocol

from appspec import ActionType


class ActionExecutionError(Exception):
    """A generative action failed downstream."""


class ActionExecutor(Protocol):
    """Runs one generative action.

    Implementations own any timeout/retry policy; the renderer awaits the
    call with no deadline of its own.
    """

    async def execute(self, action: ActionType, inputs: Mapping[str, str]) -> str:
        """
        Execute an action.

        Args:
            action: Action kind declared by the button
            inputs: Trigger id -> current value, in trigger order

        Returns:
            Plain text, or an embeddable image reference for image actions

        Raises:
            ActionExecutionError: On any downstream failure
        """
        ...

"""Live preview renderer: validation, state and the dynamic renderer."""

from .executor import ActionExecutionError, ActionExecutor
from .nodes import RenderNode
from .renderer import DynamicRenderer, UNKNOWN_ERROR
from .state import ButtonPhase, ExecutionState, RendererState
from .validation import validate, REQUIRED_MESSAGE

__all__ = [
    "ActionExecutionError",
    "ActionExecutor",
    "RenderNode",
    "DynamicRenderer",
    "UNKNOWN_ERROR",
    "ButtonPhase",
    "ExecutionState",
    "RendererState",
    "validate",
    "REQUIRED_MESSAGE",
]

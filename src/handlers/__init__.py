"""Request orchestration for the builder."""

from .workspace import EMPTY_PROMPT_MESSAGE, EXAMPLE_PROMPTS, Workspace

__all__ = ["EMPTY_PROMPT_MESSAGE", "EXAMPLE_PROMPTS", "Workspace"]

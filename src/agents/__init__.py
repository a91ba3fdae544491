"""AI agents: description generation, code generation and preview actions."""

from .app_generator import AppGenerator, GenerationError, GENERATION_ERROR_MESSAGE
from .chat import ChatHistory, ChatMessage, Explanation
from .code_generator import CodeGenerator, CodeGenerationError, strip_code_fences
from .executor import GeminiActionExecutor, build_action_prompt
from .prompts import ARCHITECT_SYSTEM_INSTRUCTION, FLUTTER_SYSTEM_INSTRUCTION, PromptBuilder

__all__ = [
    "AppGenerator",
    "GenerationError",
    "GENERATION_ERROR_MESSAGE",
    "ChatHistory",
    "ChatMessage",
    "Explanation",
    "CodeGenerator",
    "CodeGenerationError",
    "strip_code_fences",
    "GeminiActionExecutor",
    "build_action_prompt",
    "ARCHITECT_SYSTEM_INSTRUCTION",
    "FLUTTER_SYSTEM_INSTRUCTION",
    "PromptBuilder",
]

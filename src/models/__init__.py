"""
Models package - Gemini API integration.
Unified interface for model loading and configuration.
"""

from .config import GeminiConfig, GeminiModelName
from .loader import ModelLoader, GeminiModel, ModelLoadError

__all__ = [
    "GeminiConfig",
    "GeminiModelName",
    "GeminiModel",
    "ModelLoader",
    "ModelLoadError",
]

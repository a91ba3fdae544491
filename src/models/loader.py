"""Model Loader - Gemini API wrapper."""

import asyncio
import google.generativeai as genai

from core import get_logger
from .config import GeminiConfig


logger = get_logger(__name__)


class ModelLoadError(Exception):
    """Model loading failed."""
    pass


class GeminiModel:
    """Gemini API wrapper exposing sync and async completion."""

    def __init__(self, config: GeminiConfig):
        self.config = config
        genai.configure(api_key=config.api_key)

        generation_kwargs = {
            "temperature": config.temperature,
            "max_output_tokens": config.max_tokens,
            "top_p": config.top_p,
            "top_k": config.top_k,
        }
        if config.json_mode:
            generation_kwargs["response_mime_type"] = "application/json"
            if config.response_schema:
                generation_kwargs["response_schema"] = config.response_schema

        self.model = genai.GenerativeModel(
            model_name=config.model_name,
            generation_config=genai.GenerationConfig(**generation_kwargs),
            system_instruction=config.system_instruction,
        )

        logger.info("model_loaded", model=config.model_name, json_mode=config.json_mode)

    def invoke(self, prompt: str) -> str:
        """Non-streaming generation."""
        try:
            response = self.model.generate_content(prompt)
            return response.text
        except Exception as e:
            logger.error("invoke_error", model=self.config.model_name, error=str(e))
            raise

    async def ainvoke(self, prompt: str) -> str:
        """Async generation (runs the sync SDK call in the default thread pool)."""
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, self.invoke, prompt)


class ModelLoader:
    """Model lifecycle manager, one instance per distinct config."""

    _instances: dict[str, GeminiModel] = {}

    @classmethod
    def load(cls, config: GeminiConfig) -> GeminiModel:
        """Load (or reuse) a model for config."""
        key = config.model_dump_json()
        cached = cls._instances.get(key)
        if cached is not None:
            return cached

        logger.info("loading", model=config.model_name)
        try:
            model = GeminiModel(config)
        except Exception as e:
            logger.error("load_failed", model=config.model_name, error=str(e))
            raise ModelLoadError(f"Failed to load {config.model_name}") from e

        cls._instances[key] = model
        return model

    @classmethod
    def unload(cls) -> None:
        """Drop every loaded model."""
        if cls._instances:
            logger.info("unloading", count=len(cls._instances))
            cls._instances.clear()

"""Model Loader - Gemini API text generation."""

import asyncio
import time

import google.generativeai as genai

from ..core.logging_config import get_logger
from ..monitoring import metrics_collector
from .config import GeminiConfig


logger = get_logger(__name__)


class ModelLoadError(Exception):
    """Model loading failed."""
    pass


class GeminiModel:
    """Gemini API wrapper exposing LangChain-style invoke/ainvoke."""

    def __init__(self, config: GeminiConfig):
        self.config = config
        genai.configure(api_key=config.api_key)

        generation_config = genai.GenerationConfig(
            temperature=config.temperature,
            max_output_tokens=config.max_tokens,
            top_p=config.top_p,
            top_k=config.top_k,
            response_mime_type="application/json" if config.json_mode else None,
        )

        self.model = genai.GenerativeModel(
            model_name=config.model_name,
            generation_config=generation_config,
        )

        logger.info("model_loaded", model=config.model_name)

    def invoke(self, prompt: str) -> str:
        """Non-streaming generation."""
        start = time.time()
        try:
            response = self.model.generate_content(prompt)
            text = response.text
        except Exception as e:
            metrics_collector.record_llm_call(self.config.model_name, "error", time.time() - start)
            logger.error("invoke_error", error=str(e))
            raise
        metrics_collector.record_llm_call(self.config.model_name, "success", time.time() - start)
        return text

    async def ainvoke(self, prompt: str, **kwargs) -> str:
        """Async non-streaming generation (runs sync API in thread pool)."""
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, self.invoke, prompt)


def load_model(config: GeminiConfig) -> GeminiModel:
    """
    Load model with config.

    Raises:
        ModelLoadError: If the SDK rejects the configuration
    """
    logger.info("loading", model=config.model_name)
    try:
        return GeminiModel(config)
    except Exception as e:
        logger.error("load_failed", error=str(e))
        raise ModelLoadError(f"Failed to load {config.model_name}") from e

"""
Models package - Gemini API integration.
Configuration and loading of the text model behind the agents.
"""

from .config import GeminiConfig, GeminiModelName
from .loader import GeminiModel, ModelLoadError, load_model

__all__ = [
    "GeminiConfig",
    "GeminiModelName",
    "GeminiModel",
    "ModelLoadError",
    "load_model",
]

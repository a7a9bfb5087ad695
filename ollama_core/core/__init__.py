"""Errors, configuration and logging setup for ollama-core."""

from ollama_core.core.errors import DeserializationError, HttpOperationError, OllamaError
from ollama_core.core.config import Settings

__all__ = [
    "DeserializationError",
    "HttpOperationError",
    "OllamaError",
    "Settings",
]

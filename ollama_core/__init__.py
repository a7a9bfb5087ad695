"""
ollama-core - async client for a model server's model management API.

Example usage:

    from ollama_core import OllamaClient

    async with OllamaClient("http://localhost:11434") as client:
        result = await client.create_model("mymodel", "FROM llama2")
        print(result.status)
"""

from ollama_core.api import (
    CreateModel,
    CreateModelRequest,
    HttpRequest,
    LoadModel,
    LoadModelRequest,
    OllamaClient,
    ProgressStatus,
    PushModel,
    PushModelRequest,
    ServerSentEvent,
    StreamingResponse,
    StreamState,
    build_http_request,
)
from ollama_core.core import (
    DeserializationError,
    HttpOperationError,
    OllamaError,
    Settings,
)

__version__ = "0.1.0"

__all__ = [
    # Client
    "OllamaClient",
    # Requests
    "CreateModelRequest",
    "LoadModelRequest",
    "PushModelRequest",
    "HttpRequest",
    "build_http_request",
    # Results
    "CreateModel",
    "LoadModel",
    "ProgressStatus",
    "PushModel",
    # Streaming
    "ServerSentEvent",
    "StreamingResponse",
    "StreamState",
    # Errors
    "DeserializationError",
    "HttpOperationError",
    "OllamaError",
    # Config
    "Settings",
]

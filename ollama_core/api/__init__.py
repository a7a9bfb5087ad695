"""
API Client Module for ollama-core
==================================

This module provides the HTTP/SSE client for the model server API.

Components:
- client: OllamaClient facade, one method per operation
- models: request models and typed results
- serialization: request building and response decoding
- transport: request execution over httpx
- streaming: SSE parsing and StreamingResponse
- constants: default URL, timeout and endpoint paths
"""

from ollama_core.api.client import OllamaClient
from ollama_core.api.constants import DEFAULT_BASE_URL, DEFAULT_TIMEOUT
from ollama_core.api.models import (
    CreateModel,
    CreateModelRequest,
    LoadModel,
    LoadModelRequest,
    ProgressStatus,
    PushModel,
    PushModelRequest,
)
from ollama_core.api.serialization import HttpRequest, build_http_request, from_json
from ollama_core.api.streaming import ServerSentEvent, StreamingResponse, StreamState, iter_sse_events
from ollama_core.api.transport import execute_http_request, open_http_stream

__all__ = [
    # Client
    "OllamaClient",
    # Models
    "CreateModel",
    "CreateModelRequest",
    "LoadModel",
    "LoadModelRequest",
    "ProgressStatus",
    "PushModel",
    "PushModelRequest",
    # Serialization
    "HttpRequest",
    "build_http_request",
    "from_json",
    # Transport
    "execute_http_request",
    "open_http_stream",
    # Streaming
    "ServerSentEvent",
    "StreamingResponse",
    "StreamState",
    "iter_sse_events",
    # Constants
    "DEFAULT_BASE_URL",
    "DEFAULT_TIMEOUT",
]

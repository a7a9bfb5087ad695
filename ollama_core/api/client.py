"""
Model Server Client
===================

Async HTTP client for the model management endpoints of the model server.
Each operation validates its inputs by building a request model (so bad
arguments fail before any network call), executes it once, and decodes
the result.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Optional, Union

import httpx
import structlog

from ollama_core.api.constants import BLOBS_PATH, DEFAULT_BASE_URL, DEFAULT_TIMEOUT, EVENT_STREAM_CONTENT_TYPE
from ollama_core.api.models import (
    CreateModel,
    CreateModelRequest,
    LoadModel,
    LoadModelRequest,
    PushModel,
    PushModelRequest,
)
from ollama_core.api.serialization import HttpRequest, build_http_request, from_json
from ollama_core.api.streaming import StreamingResponse
from ollama_core.api.transport import execute_http_request, open_http_stream
from ollama_core.core.errors import HttpOperationError

if TYPE_CHECKING:
    from ollama_core.core.config import Settings


def _require_text(value: str, name: str) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ValueError(f"{name} must be a non-empty string")
    return value


class OllamaClient:
    """
    Client for the model server's model management API.

    Handles:
    - Model creation from a Modelfile (single result or streamed progress)
    - Loading and unloading models
    - Pushing models to a library (single result or streamed progress)
    - Blob upload and existence checks

    Example:
        async with OllamaClient("http://localhost:11434") as client:
            result = await client.create_model("mymodel", "FROM llama2")
            print(result.status)
    """

    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = DEFAULT_TIMEOUT,
        *,
        http_client: Optional[httpx.AsyncClient] = None,
        logger: Any = None,
    ):
        """
        Initialize the client.

        Args:
            base_url: Server base URL
            timeout: Request timeout in seconds
            http_client: Shared httpx client to use instead of creating one;
                the caller keeps ownership of it
            logger: structlog-style logger receiving debug/error events
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._owns_client = http_client is None
        self.client = http_client or httpx.AsyncClient(base_url=self.base_url, timeout=timeout)
        self.logger = logger or structlog.get_logger(__name__)

    @classmethod
    def from_settings(cls, settings: "Settings", **kwargs: Any) -> "OllamaClient":
        """Create a client from environment-derived settings."""
        return cls(settings.base_url, settings.timeout, **kwargs)

    async def close(self) -> None:
        """Close the HTTP client if this instance created it."""
        if self._owns_client:
            await self.client.aclose()

    async def __aenter__(self) -> "OllamaClient":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    # =========================================================================
    # Internal Helpers
    # =========================================================================

    async def _send(self, operation: str, request: HttpRequest, **context: Any) -> str:
        """Execute a buffered request, logging failures before re-raising."""
        try:
            _, content = await execute_http_request(self.client, request)
        except HttpOperationError as e:
            self.logger.error(
                f"{operation}_failed",
                error=e.message,
                status_code=e.status_code,
                **context,
            )
            raise

        self.logger.debug(f"{operation}_response", response_content=content, **context)
        return content

    async def _open_stream(
        self,
        operation: str,
        request: HttpRequest,
        result_type: type,
        **context: Any,
    ) -> StreamingResponse:
        """Open an event stream for ``request``; the request is sent once."""
        request = HttpRequest(
            method=request.method,
            path=request.path,
            content=request.content,
            headers={**request.headers, "Accept": EVENT_STREAM_CONTENT_TYPE},
        )
        try:
            response = await open_http_stream(self.client, request)
        except HttpOperationError as e:
            self.logger.error(
                f"{operation}_failed",
                error=e.message,
                status_code=e.status_code,
                **context,
            )
            raise

        return StreamingResponse(response, result_type, required="status")

    # =========================================================================
    # Create Model
    # =========================================================================

    async def create_model(
        self,
        name: str,
        modelfile: str,
        *,
        path: Optional[str] = None,
        quantize: Optional[str] = None,
    ) -> CreateModel:
        """
        Create a model from a Modelfile.

        Args:
            name: Name of the model to create
            modelfile: Contents of the Modelfile
            path: Optional path to a Modelfile on the server
            quantize: Optional quantization type

        Returns:
            The final create status

        Raises:
            pydantic.ValidationError: If name is empty (no request is sent)
            HttpOperationError: If the call fails
            DeserializationError: If the response has no status
        """
        request = CreateModelRequest(name=name, modelfile=modelfile, path=path, quantize=quantize)
        return await self.create_model_request(request)

    async def create_model_request(self, request: CreateModelRequest) -> CreateModel:
        """Create a model from a prepared request; progress is not streamed."""
        request = request.model_copy(update={"stream": False})
        self.logger.debug("create_model", name=request.name)

        content = await self._send("create_model", request.to_http_request(), name=request.name)
        return from_json(content, CreateModel, required="status")

    async def create_model_streaming(
        self,
        name: str,
        modelfile: str,
        *,
        path: Optional[str] = None,
        quantize: Optional[str] = None,
    ) -> StreamingResponse[CreateModel]:
        """
        Create a model from a Modelfile, streaming progress.

        Returns:
            StreamingResponse yielding CreateModel status frames
        """
        request = CreateModelRequest(name=name, modelfile=modelfile, path=path, quantize=quantize)
        return await self.create_model_streaming_request(request)

    async def create_model_streaming_request(self, request: CreateModelRequest) -> StreamingResponse[CreateModel]:
        """Create a model from a prepared request, streaming progress."""
        request = request.model_copy(update={"stream": True})
        self.logger.debug("create_model_streaming", name=request.name)

        return await self._open_stream(
            "create_model_streaming",
            request.to_http_request(),
            CreateModel,
            name=request.name,
        )

    # =========================================================================
    # Load / Unload Model
    # =========================================================================

    async def load_model(self, model: str, *, keep_alive: Optional[Union[int, str]] = None) -> LoadModel:
        """
        Load the specified model into memory.

        Args:
            model: The model name
            keep_alive: How long the model stays loaded (seconds or duration string)

        Returns:
            The model loaded response

        Raises:
            DeserializationError: If the response names no model
        """
        request = LoadModelRequest(model=model, keep_alive=keep_alive, stream=False)
        self.logger.debug("load_model", model=request.model)

        content = await self._send("load_model", request.to_http_request(), model=request.model)
        return from_json(content, LoadModel, required="model")

    async def unload_model(self, model: str) -> LoadModel:
        """Unload the specified model from memory."""
        return await self.load_model(model, keep_alive=0)

    # =========================================================================
    # Push Model
    # =========================================================================

    async def push_model(self, name: str, *, insecure: Optional[bool] = None) -> PushModel:
        """
        Push a model to a model library.

        Args:
            name: Model in the form <namespace>/<model>:<tag>
            insecure: Allow insecure connections to the library

        Returns:
            The final push status
        """
        request = PushModelRequest(name=name, insecure=insecure, stream=False)
        self.logger.debug("push_model", name=request.name)

        content = await self._send("push_model", request.to_http_request(), name=request.name)
        return from_json(content, PushModel, required="status")

    async def push_model_streaming(
        self,
        name: str,
        *,
        insecure: Optional[bool] = None,
    ) -> StreamingResponse[PushModel]:
        """Push a model to a model library, streaming upload progress."""
        request = PushModelRequest(name=name, insecure=insecure, stream=True)
        self.logger.debug("push_model_streaming", name=request.name)

        return await self._open_stream(
            "push_model_streaming",
            request.to_http_request(),
            PushModel,
            name=request.name,
        )

    # =========================================================================
    # Blobs
    # =========================================================================

    async def has_blob(self, digest: str) -> bool:
        """
        Check whether a blob exists on the server.

        Args:
            digest: Blob digest, e.g. "sha256:..."

        Returns:
            True if the blob exists, False if the server answers 404
        """
        _require_text(digest, "digest")
        request = build_http_request(f"{BLOBS_PATH}/{digest}", "HEAD")
        try:
            await execute_http_request(self.client, request)
        except HttpOperationError as e:
            if e.status_code == 404:
                return False
            self.logger.error("has_blob_failed", error=e.message, status_code=e.status_code, digest=digest)
            raise
        return True

    async def create_blob(self, digest: str, content: bytes) -> None:
        """
        Upload a file blob referenced by a Modelfile (FROM / ADAPTER).

        Args:
            digest: Expected digest of the content, e.g. "sha256:..."
            content: Raw blob bytes
        """
        _require_text(digest, "digest")
        self.logger.debug("create_blob", digest=digest, size=len(content))

        await self._send("create_blob", build_http_request(f"{BLOBS_PATH}/{digest}", "POST", content), digest=digest)

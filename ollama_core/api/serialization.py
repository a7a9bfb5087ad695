"""Request encoding and response decoding for the model server API."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any, TypeVar

from pydantic import BaseModel, ValidationError

from ollama_core.api.constants import JSON_CONTENT_TYPE, OCTET_STREAM_CONTENT_TYPE
from ollama_core.core.errors import DeserializationError

T = TypeVar("T", bound=BaseModel)


@dataclass(frozen=True)
class HttpRequest:
    """Transport-level rendering of an API call."""

    method: str
    path: str
    content: bytes = b""
    headers: dict[str, str] = field(default_factory=dict)

    def json(self) -> Any:
        """Decode the JSON body (None when the request has no body)."""
        if not self.content:
            return None
        return json.loads(self.content)


def build_http_request(path: str, method: str = "POST", body: BaseModel | bytes | None = None) -> HttpRequest:
    """Build an HttpRequest for ``path``.

    Pydantic bodies are encoded as JSON with ``exclude_none=True``: optional
    fields left unset never reach the wire, not even as ``null``. Raw bytes
    are sent as an octet stream.

    Args:
        path: Endpoint path (e.g. "/api/push")
        method: HTTP method
        body: Request model, raw payload, or None

    Returns:
        The request, ready for the transport executor
    """
    if body is None:
        return HttpRequest(method=method, path=path)

    if isinstance(body, bytes):
        return HttpRequest(
            method=method,
            path=path,
            content=body,
            headers={"Content-Type": OCTET_STREAM_CONTENT_TYPE},
        )

    content = body.model_dump_json(exclude_none=True, by_alias=True).encode("utf-8")
    return HttpRequest(
        method=method,
        path=path,
        content=content,
        headers={"Content-Type": JSON_CONTENT_TYPE},
    )


def load_json(content: str) -> Any:
    """Parse response text, raising DeserializationError on invalid JSON."""
    try:
        return json.loads(content)
    except ValueError as e:
        raise DeserializationError(
            content,
            f"The response content: '{content}' is not valid JSON: {e}",
        ) from e


def from_payload(payload: Any, content: str, result_type: type[T], *, required: str | None = None) -> T:
    """Validate an already-parsed payload into ``result_type``.

    Args:
        payload: Decoded JSON value
        content: Raw text the payload was decoded from
        result_type: Pydantic model to validate against
        required: Field that must be present and non-blank

    Returns:
        The validated result

    Raises:
        DeserializationError: If the payload does not match the model or the
            required field is missing or empty
    """
    type_name = result_type.__name__
    try:
        result = result_type.model_validate(payload)
    except ValidationError as e:
        raise DeserializationError(
            content,
            f"The response content: '{content}' cannot be deserialized to an instance of {type_name}.",
        ) from e

    if required is not None:
        value = getattr(result, required, None)
        if value is None or (isinstance(value, str) and not value.strip()):
            raise DeserializationError(
                content,
                f"The response content: '{content}' cannot be deserialized to an instance of "
                f"{type_name}: required field '{required}' is missing or empty.",
            )

    return result


def from_json(content: str, result_type: type[T], *, required: str | None = None) -> T:
    """Deserialize response text into ``result_type``.

    A structurally valid body that misses the required field is still an
    error; this never returns None.
    """
    return from_payload(load_json(content), content, result_type, required=required)

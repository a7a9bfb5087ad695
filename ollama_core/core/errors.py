"""Error types raised by the model server client."""

from __future__ import annotations

import json


class OllamaError(Exception):
    """Base exception for model server client errors."""


class HttpOperationError(OllamaError):
    """HTTP call failed.

    Raised when the connection to the server fails (``status_code`` is None)
    or when the server answers with a non-success status. ``response_content``
    holds whatever body text was received.
    """

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        response_content: str | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.response_content = response_content


class DeserializationError(OllamaError):
    """Response body could not be turned into the expected result.

    Covers both unparsable payloads and payloads that parse but miss a
    required field. ``response_content`` is the raw body text.
    """

    def __init__(self, response_content: str, message: str) -> None:
        super().__init__(message)
        self.message = message
        self.response_content = response_content


def parse_error_detail(content: str | None) -> str | None:
    """Extract the server's ``{"error": ...}`` detail from a response body.

    Args:
        content: Raw response body text

    Returns:
        The error detail string if present, None otherwise
    """
    if not content:
        return None
    try:
        payload = json.loads(content)
    except ValueError:
        return None
    if isinstance(payload, dict) and isinstance(payload.get("error"), str):
        return payload["error"]
    return None

"""Pytest configuration and shared fixtures for ollama-core tests."""

import json
import sys
from pathlib import Path
from unittest.mock import Mock

import httpx
import pytest

# Add project root to path for imports
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))


# ============================================================================
# Logger Fixtures
# ============================================================================


@pytest.fixture
def mock_logger():
    """Mock structlog-style logger injected into the client."""
    logger = Mock()
    logger.debug = Mock()
    logger.error = Mock()
    return logger


# ============================================================================
# HTTP Fixtures
# ============================================================================


@pytest.fixture
def captured_requests():
    """List collecting every request the mock server receives."""
    return []


@pytest.fixture
def make_client(captured_requests, mock_logger):
    """Factory building an OllamaClient backed by an httpx.MockTransport.

    The handler receives the httpx.Request and returns an httpx.Response
    (sync or async). Every request is appended to ``captured_requests``.
    """
    from ollama_core.api.client import OllamaClient

    def _make(handler):
        async def recording_handler(request: httpx.Request):
            captured_requests.append(request)
            response = handler(request)
            if not isinstance(response, httpx.Response):
                response = await response
            return response

        http_client = httpx.AsyncClient(
            base_url="http://test",
            transport=httpx.MockTransport(recording_handler),
            timeout=1.0,
        )
        return OllamaClient("http://test", http_client=http_client, logger=mock_logger)

    return _make


def sse_frame(payload, *, event=None, event_id=None) -> str:
    """Render one SSE frame (terminated by a blank line)."""
    lines = []
    if event_id is not None:
        lines.append(f"id: {event_id}")
    if event is not None:
        lines.append(f"event: {event}")
    data = payload if isinstance(payload, str) else json.dumps(payload)
    lines.extend(f"data: {line}" for line in data.split("\n"))
    return "\n".join(lines) + "\n\n"


def sse_response(*frames: str, status_code: int = 200) -> httpx.Response:
    """Build an event-stream response from rendered frames."""
    return httpx.Response(
        status_code,
        content="".join(frames).encode("utf-8"),
        headers={"content-type": "text/event-stream"},
    )


@pytest.fixture
def sse():
    """Access to the SSE helpers from tests."""
    return type("SSE", (), {"frame": staticmethod(sse_frame), "response": staticmethod(sse_response)})

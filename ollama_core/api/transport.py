"""HTTP execution of built requests.

Both executors send exactly one request. Connection failures and
non-success statuses surface as HttpOperationError; task cancellation is
left to propagate untouched.
"""

from __future__ import annotations

import httpx

from ollama_core.api.serialization import HttpRequest
from ollama_core.core.errors import HttpOperationError, parse_error_detail


def _to_httpx_request(http_client: httpx.AsyncClient, request: HttpRequest) -> httpx.Request:
    return http_client.build_request(
        request.method,
        request.path,
        content=request.content or None,
        headers=request.headers,
    )


def _status_error(request: HttpRequest, status_code: int, content: str) -> HttpOperationError:
    detail = parse_error_detail(content)
    msg = f"{request.method} {request.path} failed with HTTP {status_code}"
    if detail:
        msg = f"{msg}: {detail}"
    return HttpOperationError(msg, status_code=status_code, response_content=content)


def _connection_error(request: HttpRequest, e: httpx.TransportError) -> HttpOperationError:
    return HttpOperationError(f"{request.method} {request.path} failed: {e}")


async def execute_http_request(
    http_client: httpx.AsyncClient,
    request: HttpRequest,
) -> tuple[httpx.Response, str]:
    """Send ``request`` and read the whole response body.

    Args:
        http_client: Shared client owning the connection pool and base URL
        request: Request built by a request model

    Returns:
        Tuple of (response, body text)

    Raises:
        HttpOperationError: On connection failure or non-success status
    """
    try:
        response = await http_client.send(_to_httpx_request(http_client, request))
    except httpx.TransportError as e:
        raise _connection_error(request, e) from e

    content = response.text
    if not response.is_success:
        raise _status_error(request, response.status_code, content)

    return response, content


async def open_http_stream(http_client: httpx.AsyncClient, request: HttpRequest) -> httpx.Response:
    """Send ``request`` and return the response with its body still unread.

    The caller owns the returned response and must close it. On a
    non-success status the body is read and the response closed before
    raising.

    Raises:
        HttpOperationError: On connection failure or non-success status
    """
    try:
        response = await http_client.send(_to_httpx_request(http_client, request), stream=True)
    except httpx.TransportError as e:
        raise _connection_error(request, e) from e

    if not response.is_success:
        try:
            content = (await response.aread()).decode("utf-8", errors="replace")
        except httpx.TransportError:
            content = ""
        finally:
            await response.aclose()
        raise _status_error(request, response.status_code, content)

    return response

"""
Streaming Responses
===================

Server-sent-event parsing and the lazy, forward-only iterator that turns a
live response body into typed results.
"""

from __future__ import annotations

import asyncio
from collections.abc import AsyncIterator
from dataclasses import dataclass
from enum import Enum
from typing import AsyncGenerator, Generic, Optional, TypeVar

import httpx
from pydantic import BaseModel

from ollama_core.api.constants import DONE_EVENT, DONE_SENTINEL, ERROR_EVENT
from ollama_core.api.serialization import from_payload, load_json
from ollama_core.core.errors import HttpOperationError, parse_error_detail

T = TypeVar("T", bound=BaseModel)


@dataclass(frozen=True)
class ServerSentEvent:
    """One frame of an event stream."""

    data: str
    event: Optional[str] = None
    id: Optional[str] = None


class StreamState(str, Enum):
    OPEN = "open"
    CLOSED = "closed"
    FAULTED = "faulted"


def _field_value(line: str, prefix_len: int) -> str:
    value = line[prefix_len:]
    # A single space after the colon is part of the syntax, not the value
    return value[1:] if value.startswith(" ") else value


async def iter_sse_events(lines: AsyncIterator[str]) -> AsyncGenerator[ServerSentEvent, None]:
    """Parse SSE frames from an async iterator of text lines.

    SSE format:
        id: 123
        event: progress
        data: {"status": "pulling manifest"}

    Multiple ``data:`` lines in one frame are joined with newlines, ``:``
    lines are comments, and a blank line ends the frame. A bare JSON line is
    a frame on its own (newline-delimited JSON bodies); pending ``data:``
    lines are dispatched first.

    Args:
        lines: Lines of the response body, without line terminators

    Yields:
        ServerSentEvent for each dispatched frame
    """
    data_lines: list[str] = []
    event_type: Optional[str] = None
    event_id: Optional[str] = None

    async for raw_line in lines:
        line = raw_line.rstrip("\r\n")

        if not line:
            if data_lines:
                yield ServerSentEvent(data="\n".join(data_lines), event=event_type, id=event_id)
            data_lines, event_type, event_id = [], None, None
            continue

        if line.startswith(":"):
            continue

        if line.startswith("data:"):
            data_lines.append(_field_value(line, 5))
        elif line.startswith("event:"):
            event_type = _field_value(line, 6).strip()
        elif line.startswith("id:"):
            event_id = _field_value(line, 3).strip()
        elif line.lstrip().startswith(("{", "[")):
            # A bare JSON line ends any frame still being accumulated
            if data_lines:
                yield ServerSentEvent(data="\n".join(data_lines), event=event_type, id=event_id)
                data_lines, event_type, event_id = [], None, None
            yield ServerSentEvent(data=line.strip(), event=event_type, id=event_id)
            event_type, event_id = None, None

    if data_lines:
        yield ServerSentEvent(data="\n".join(data_lines), event=event_type, id=event_id)


class StreamingResponse(Generic[T]):
    """Lazy sequence of typed results read from an open HTTP response.

    Iterate with ``async for`` or call ``__anext__`` directly. A frame that
    fails to decode raises DeserializationError for that step only; the
    stream stays open and the next call reads the next frame. Transport
    failures and server error frames fault the stream. The response is
    closed on every exit path, including cancellation.

    Not restartable: a new call on the client issues a new request.

    Example:
        async with await client.create_model_streaming("ns/model:tag", "FROM llama2") as stream:
            async for progress in stream:
                print(progress.status)
    """

    def __init__(self, response: httpx.Response, result_type: type[T], *, required: str | None = None):
        self.response = response
        self.result_type = result_type
        self.required = required
        self.state = StreamState.OPEN
        self._lines = response.aiter_lines()
        self._events = iter_sse_events(self._lines)
        # Read in flight, so aclose() from another task can interrupt it
        self._pending: Optional[asyncio.Task] = None

    @property
    def status_code(self) -> int:
        return self.response.status_code

    def __aiter__(self) -> "StreamingResponse[T]":
        return self

    async def _next_event(self) -> Optional[ServerSentEvent]:
        return await anext(self._events, None)

    async def __anext__(self) -> T:
        if self.state is not StreamState.OPEN:
            raise StopAsyncIteration

        self._pending = asyncio.create_task(self._next_event())
        try:
            event = await self._pending
        except httpx.HTTPError as e:
            await self._fault()
            raise HttpOperationError(
                f"Reading the event stream failed: {e}",
                status_code=self.status_code,
            ) from e
        except asyncio.CancelledError:
            task = asyncio.current_task()
            if self.state is StreamState.CLOSED and not (task and task.cancelling()):
                # Closed by another task while this read was waiting
                raise StopAsyncIteration from None
            await self.aclose()
            raise
        finally:
            self._pending = None

        if event is None:
            await self.aclose()
            raise StopAsyncIteration

        return await self._decode(event)

    async def _decode(self, event: ServerSentEvent) -> T:
        if event.data.strip() == DONE_SENTINEL or event.event == DONE_EVENT:
            await self.aclose()
            raise StopAsyncIteration

        if event.event == ERROR_EVENT:
            await self._fault()
            detail = parse_error_detail(event.data) or event.data
            raise HttpOperationError(
                f"Server reported an error in the event stream: {detail}",
                status_code=self.status_code,
                response_content=event.data,
            )

        payload = load_json(event.data)
        if isinstance(payload, dict) and payload.get("error"):
            await self._fault()
            raise HttpOperationError(
                f"Server reported an error in the event stream: {payload['error']}",
                status_code=self.status_code,
                response_content=event.data,
            )

        return from_payload(payload, event.data, self.result_type, required=self.required)

    async def _fault(self) -> None:
        self.state = StreamState.FAULTED
        await self._release()

    async def _release(self) -> None:
        pending, self._pending = self._pending, None
        if pending is not None and not pending.done():
            pending.cancel()
            await asyncio.wait({pending})
        try:
            await self.response.aclose()
        finally:
            await self._events.aclose()
            await self._lines.aclose()

    async def aclose(self) -> None:
        """Stop consuming the stream and release the connection."""
        if self.state is not StreamState.OPEN:
            return
        self.state = StreamState.CLOSED
        await self._release()

    async def collect(self) -> list[T]:
        """Drain the remaining frames into a list."""
        return [item async for item in self]

    async def __aenter__(self) -> "StreamingResponse[T]":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.aclose()

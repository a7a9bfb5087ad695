"""Display formatting and rendering utilities for the CLI."""

from __future__ import annotations

from typing import TYPE_CHECKING

from rich.console import Console
from rich.progress import BarColumn, DownloadColumn, Progress, TaskID, TextColumn

from ollama_core.core.config import MAX_ERROR_LENGTH

if TYPE_CHECKING:
    from ollama_core.api.models import LoadModel, ProgressStatus
    from ollama_core.api.streaming import StreamingResponse

console = Console(highlight=False)


def truncate_error(error: str, max_length: int = MAX_ERROR_LENGTH) -> str:
    """Truncate error message for display.

    Args:
        error: The error message to truncate
        max_length: Maximum length before truncation

    Returns:
        Truncated error string with '...' if exceeded max_length
    """
    if len(error) <= max_length:
        return error
    return error[:max_length] + "..."


def format_status(status: "ProgressStatus") -> str:
    """Format a status frame as a single line.

    Args:
        status: Progress frame from a create or push call

    Returns:
        e.g. "pushing sha256:abc123 (512/1024)"
    """
    text = status.status or ""
    if status.digest:
        text = f"{text} {status.digest[:19]}"
    if status.total:
        text = f"{text} ({status.completed or 0}/{status.total})"
    return text


def render_status(status: "ProgressStatus", out: Console | None = None) -> None:
    """Print a final status, green on success."""
    out = out or console
    style = "green" if status.is_success else "yellow"
    out.print(f"[{style}]{format_status(status)}[/{style}]")


def render_load_result(result: "LoadModel", out: Console | None = None) -> None:
    """Print the outcome of a load or unload call."""
    out = out or console
    if result.done_reason == "unload":
        out.print(f"[green]Unloaded {result.model}[/green]")
    else:
        out.print(f"[green]Loaded {result.model}[/green]")


async def render_progress_stream(stream: "StreamingResponse", out: Console | None = None) -> "ProgressStatus | None":
    """Consume a progress stream, drawing one bar per layer digest.

    Frames without a digest are printed as plain status lines.

    Returns:
        The last status frame received, or None for an empty stream
    """
    out = out or console
    last = None
    tasks: dict[str, TaskID] = {}

    with Progress(
        TextColumn("{task.description}"),
        BarColumn(),
        DownloadColumn(),
        console=out,
        transient=False,
    ) as progress:
        async with stream:
            async for status in stream:
                last = status
                if status.digest and status.total:
                    if status.digest not in tasks:
                        tasks[status.digest] = progress.add_task(
                            f"{status.status} {status.digest[:19]}", total=status.total
                        )
                    progress.update(tasks[status.digest], completed=status.completed or 0)
                else:
                    progress.console.print(format_status(status))

    return last

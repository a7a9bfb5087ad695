"""Display formatting and progress rendering for the CLI."""

from ollama_core.display.rendering import (
    format_status,
    render_load_result,
    render_progress_stream,
    render_status,
    truncate_error,
)

__all__ = [
    "format_status",
    "render_load_result",
    "render_progress_stream",
    "render_status",
    "truncate_error",
]

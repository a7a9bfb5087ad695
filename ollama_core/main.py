"""Main entry point for the ollama-core command line.

Provides model management commands against a model server:
- create: build a model from a Modelfile
- push: push a model to a library
- load / unload: manage a model's residency in memory
"""

import argparse
import asyncio
import sys
from pathlib import Path

import dotenv
import structlog
from rich.markup import escape

from ollama_core.api.client import OllamaClient
from ollama_core.core.config import Settings
from ollama_core.core.errors import OllamaError
from ollama_core.core.logging_config import configure_logging
from ollama_core.display.rendering import (
    console,
    render_load_result,
    render_progress_stream,
    render_status,
    truncate_error,
)

logger = structlog.get_logger(__name__)


def _parse_keep_alive(value: str) -> int | str:
    """Plain numbers are seconds; anything else is a duration like '5m'."""
    return int(value) if value.lstrip("-").isdigit() else value


def parse_args(argv: list[str] | None = None, settings: Settings | None = None) -> argparse.Namespace:
    """Parse command line arguments."""
    settings = settings or Settings.from_environment()

    parser = argparse.ArgumentParser(
        prog="ollama-core",
        description="Model management client for a model server",
    )
    parser.add_argument(
        "--host",
        default=settings.base_url,
        help=f"Server base URL (default: {settings.base_url})",
    )
    parser.add_argument(
        "--timeout",
        type=float,
        default=settings.timeout,
        help=f"Request timeout in seconds (default: {settings.timeout:g})",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Enable debug logging",
    )

    subparsers = parser.add_subparsers(dest="command", required=True, help="Command to run")

    create = subparsers.add_parser("create", help="Create a model from a Modelfile")
    create.add_argument("name", help="Model name, e.g. namespace/model:tag")
    create.add_argument("-f", "--file", type=Path, required=True, help="Path to the Modelfile")
    create.add_argument("-q", "--quantize", help="Quantization type, e.g. q4_K_M")
    create.add_argument("--no-stream", action="store_true", help="Wait for the final status only")

    push = subparsers.add_parser("push", help="Push a model to a library")
    push.add_argument("name", help="Model name, e.g. namespace/model:tag")
    push.add_argument("--insecure", action="store_true", default=None, help="Allow insecure connections")
    push.add_argument("--no-stream", action="store_true", help="Wait for the final status only")

    load = subparsers.add_parser("load", help="Load a model into memory")
    load.add_argument("model", help="Model name")
    load.add_argument("--keep-alive", type=_parse_keep_alive, help="How long to keep the model loaded, e.g. 5m")

    unload = subparsers.add_parser("unload", help="Unload a model from memory")
    unload.add_argument("model", help="Model name")

    args = parser.parse_args(argv)
    args.log_level = "DEBUG" if args.verbose else settings.log_level
    return args


async def run_command(args: argparse.Namespace, client: OllamaClient) -> None:
    """Execute the parsed command against ``client``."""
    if args.command == "create":
        modelfile = args.file.read_text(encoding="utf-8")
        if args.no_stream:
            render_status(await client.create_model(args.name, modelfile, quantize=args.quantize))
        else:
            stream = await client.create_model_streaming(args.name, modelfile, quantize=args.quantize)
            await render_progress_stream(stream)

    elif args.command == "push":
        if args.no_stream:
            render_status(await client.push_model(args.name, insecure=args.insecure))
        else:
            stream = await client.push_model_streaming(args.name, insecure=args.insecure)
            await render_progress_stream(stream)

    elif args.command == "load":
        render_load_result(await client.load_model(args.model, keep_alive=args.keep_alive))

    elif args.command == "unload":
        render_load_result(await client.unload_model(args.model))


async def main(args: argparse.Namespace) -> int:
    async with OllamaClient(args.host, args.timeout) as client:
        try:
            await run_command(args, client)
        except (OllamaError, ValueError, OSError) as e:
            logger.debug("cli_command_failed", command=args.command, error=str(e))
            console.print(f"[red]{escape(truncate_error(str(e)))}[/red]")
            return 1
    return 0


def run_cli() -> None:
    """Entry point for console script."""
    dotenv.load_dotenv()
    args = parse_args()
    configure_logging(args.log_level)

    try:
        sys.exit(asyncio.run(main(args)))
    except KeyboardInterrupt:
        console.print("\n\n[yellow]Interrupted[/yellow]")
        sys.exit(130)


if __name__ == "__main__":
    run_cli()

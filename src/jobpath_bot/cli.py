"""Command line entry-point for the JobPath assistant."""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from typing import Optional

from .config import AppSettings
from .observability import initialize_tracing
from .server import run_server
from .sessions import run_cv_interview

COMMANDS = ("serve", "interview")


def _parse_args(argv: list[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="jobpath-bot",
        description="Career chat assistant with a guided CV builder",
    )
    parser.add_argument(
        "command",
        nargs="?",
        choices=COMMANDS,
        default="serve",
        help="'serve' runs the HTTP API (default); 'interview' builds a CV "
        "in the terminal.",
    )
    parser.add_argument(
        "--host",
        default="127.0.0.1",
        help="Host interface for the HTTP server (default: 127.0.0.1)",
    )
    parser.add_argument(
        "--port",
        type=int,
        default=5001,
        help="TCP port for the HTTP server (default: 5001)",
    )
    parser.add_argument(
        "--allow-origin",
        action="append",
        dest="allow_origin",
        help="CORS origin(s) to allow. Defaults to '*'.",
    )
    parser.add_argument(
        "--tracing",
        action="store_true",
        help="Enable OpenTelemetry tracing (uses JOBPATH_OTLP_ENDPOINT).",
    )
    parser.add_argument(
        "--log-level",
        default="info",
        choices=["debug", "info", "warning", "error"],
        help="Logging level (default: info)",
    )
    return parser.parse_args(argv)


def run_cli(argv: Optional[list[str]] = None) -> None:
    """Entry-point invoked from ``python -m jobpath_bot``."""

    arg_list = list(argv) if argv is not None else sys.argv[1:]
    args = _parse_args(arg_list)
    logging.basicConfig(level=getattr(logging, args.log_level.upper()))
    try:
        settings = AppSettings.load()
    except RuntimeError as exc:
        raise SystemExit(f"Configuration error: {exc}") from exc

    if args.tracing:
        initialize_tracing()

    if args.command == "interview":
        asyncio.run(run_cv_interview(settings))
        return

    run_server(
        settings,
        host=args.host,
        port=args.port,
        allow_origins=args.allow_origin,
        log_level=args.log_level,
    )


if __name__ == "__main__":  # pragma: no cover - manual execution hook
    run_cli()

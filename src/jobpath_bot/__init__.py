"""JobPath career assistant: career chat and a guided CV builder."""

from __future__ import annotations

from typing import Optional

__all__ = ["__version__", "run_cli"]

__version__ = "0.1.0"


def run_cli(argv: Optional[list[str]] = None) -> None:
    """Proxy to :func:`jobpath_bot.cli.run_cli` so the CLI loads lazily."""

    from .cli import run_cli as _run_cli_impl

    _run_cli_impl(argv)

"""Allow running the assistant with ``python -m jobpath_bot``."""

from __future__ import annotations

from .cli import run_cli

if __name__ == "__main__":  # pragma: no cover - runtime hook
    run_cli()

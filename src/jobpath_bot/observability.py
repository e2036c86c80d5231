"""Optional OpenTelemetry tracing for the model calls."""

from __future__ import annotations

import logging
import os
from typing import Optional

logger = logging.getLogger(__name__)

_initialized = False


def initialize_tracing(
    *,
    endpoint: Optional[str] = None,
    enable_sensitive_data: bool = False,
) -> bool:
    """Configure agent framework tracing; returns ``True`` when enabled."""

    global _initialized
    if _initialized:
        return False

    otlp_endpoint = (endpoint or os.getenv("JOBPATH_OTLP_ENDPOINT", "")).strip()
    if not otlp_endpoint:
        logger.info("Tracing skipped because no OTLP endpoint is configured.")
        return False

    from agent_framework.observability import setup_observability

    try:
        setup_observability(
            otlp_endpoint=otlp_endpoint,
            enable_sensitive_data=enable_sensitive_data,
        )
    except Exception as exc:  # pragma: no cover - exporter misconfiguration
        logger.warning("Tracing initialization failed: %s", exc)
        return False

    _initialized = True
    logger.info("Tracing initialized with OTLP endpoint %s", otlp_endpoint)
    return True

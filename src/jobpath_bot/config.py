"""Configuration helpers for the JobPath career assistant."""

from __future__ import annotations

import os
from dataclasses import dataclass
from importlib import import_module
from pathlib import Path
from typing import Optional

DEFAULT_TEMPLATE_PATH = Path(__file__).parent / "templates" / "cv_template.html"

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}


@dataclass(slots=True)
class ModelSettings:
    """Holds model-related configuration for the runtime."""

    provider: str
    model: str
    endpoint: Optional[str]
    api_key: str
    api_version: Optional[str]


@dataclass(slots=True)
class AppSettings:
    """Top-level application settings loaded from environment variables."""

    model: ModelSettings
    output_dir: Path
    template_path: Path
    redis_url: Optional[str]
    session_ttl: int
    chat_context_limit: int
    escape_html: bool
    pdf_font_path: Optional[Path] = None

    @classmethod
    def load(cls) -> "AppSettings":
        """Load settings from the environment or .env file."""
        _ensure_dotenv()
        provider = os.getenv("MAF_MODEL_PROVIDER", "azure-openai")
        model = os.getenv("MAF_MODEL")
        if not model:
            raise RuntimeError("MAF_MODEL environment variable is required.")
        endpoint = os.getenv("MAF_MODEL_ENDPOINT")
        api_key = os.getenv("MAF_MODEL_API_KEY")
        if not api_key:
            raise RuntimeError(
                "MAF_MODEL_API_KEY environment variable is required."
            )
        api_version = os.getenv("MAF_MODEL_API_VERSION")
        output_dir = Path(os.getenv("JOBPATH_OUTPUT_DIR", "outputs"))
        output_dir.mkdir(parents=True, exist_ok=True)
        template_path = Path(
            os.getenv("JOBPATH_TEMPLATE_PATH", str(DEFAULT_TEMPLATE_PATH))
        )
        if not template_path.is_file():
            raise RuntimeError(f"CV template not found: {template_path}")
        redis_url = os.getenv("JOBPATH_REDIS_URL")
        if redis_url is not None and not redis_url.strip():
            redis_url = None
        session_ttl = _int_from_env("JOBPATH_SESSION_TTL", "86400", minimum=60)
        chat_context_limit = _int_from_env(
            "JOBPATH_CHAT_CONTEXT_LIMIT", "10", minimum=0
        )
        escape_html = _bool_from_env("JOBPATH_ESCAPE_HTML", default=True)
        pdf_font_path: Optional[Path] = None
        raw_font = os.getenv("JOBPATH_PDF_FONT", "").strip()
        if raw_font:
            pdf_font_path = Path(raw_font)
            if not pdf_font_path.is_file():
                raise RuntimeError(f"JOBPATH_PDF_FONT not found: {pdf_font_path}")
        return cls(
            model=ModelSettings(
                provider=provider,
                model=model,
                endpoint=endpoint,
                api_key=api_key,
                api_version=api_version,
            ),
            output_dir=output_dir,
            template_path=template_path,
            redis_url=redis_url,
            session_ttl=session_ttl,
            chat_context_limit=chat_context_limit,
            escape_html=escape_html,
            pdf_font_path=pdf_font_path,
        )

    def read_template(self) -> str:
        """Return the CV template markup."""

        return self.template_path.read_text(encoding="utf-8")


def _int_from_env(name: str, default: str, *, minimum: int) -> int:
    raw = os.getenv(name, default)
    try:
        value = int(raw)
    except ValueError as exc:
        raise RuntimeError(f"{name} must be an integer") from exc
    if value < minimum:
        raise RuntimeError(f"{name} must be at least {minimum}")
    return value


def _bool_from_env(name: str, *, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    normalized = raw.strip().lower()
    if normalized in _TRUE_VALUES:
        return True
    if normalized in _FALSE_VALUES:
        return False
    raise RuntimeError(f"{name} must be a boolean flag (true/false)")


def _ensure_dotenv() -> None:
    """Load dotenv variables and provide a helpful error if missing."""

    try:
        dotenv_module = import_module("dotenv")
    except ModuleNotFoundError as exc:  # pragma: no cover - optional dep
        raise RuntimeError(
            "python-dotenv is required. Install with `pip install "
            "python-dotenv`."
        ) from exc

    load_dotenv = getattr(dotenv_module, "load_dotenv")
    load_dotenv()

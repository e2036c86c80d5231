"""Rendering of projected CV markup to PDF."""

from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Any, Iterable, Optional

logger = logging.getLogger(__name__)

FONT_FAMILY = "cvsans"

# Common install locations of TrueType fonts with wide Unicode coverage.
UNICODE_FONT_CANDIDATES = (
    Path("/usr/share/fonts/truetype/dejavu/DejaVuSans.ttf"),
    Path("/usr/share/fonts/dejavu/DejaVuSans.ttf"),
    Path("/usr/share/fonts/TTF/DejaVuSans.ttf"),
    Path("/usr/share/fonts/truetype/noto/NotoSans-Regular.ttf"),
    Path("/usr/share/fonts/noto/NotoSans-Regular.ttf"),
    Path("/Library/Fonts/Arial Unicode.ttf"),
    Path("C:/Windows/Fonts/arialuni.ttf"),
)


def find_unicode_font(
    candidates: Iterable[Path] = UNICODE_FONT_CANDIDATES,
) -> Optional[Path]:
    """Return the first installed Unicode TTF, or ``None`` when there is none."""

    for candidate in candidates:
        if candidate.is_file():
            return candidate
    return None


class PDFRenderError(RuntimeError):
    """Raised when a CV PDF cannot be generated."""


class CVPDFRenderer:
    """Render a fully substituted HTML CV to A4 PDF bytes with fpdf2.

    With ``font_path`` set, that TrueType font is embedded and text is kept
    as written. Without it the core latin-1 fonts are used and any other
    character is transliterated or replaced.
    """

    _BODY_RE = re.compile(r"<body[^>]*>(?P<body>.*)</body>", re.IGNORECASE | re.DOTALL)
    _HEAD_RE = re.compile(r"<head[^>]*>.*?</head>", re.IGNORECASE | re.DOTALL)
    _TAG_ALIASES = (
        (re.compile(r"<(/?)strong(\s*)>", re.IGNORECASE), r"<\1b\2>"),
        (re.compile(r"<(/?)em(\s*)>", re.IGNORECASE), r"<\1i\2>"),
    )

    _UNICODE_TRANSLATION = str.maketrans(
        {
            "\u00a0": " ",  # non-breaking space
            "\u00ad": "-",  # soft hyphen
            "\u2010": "-",  # hyphen
            "\u2011": "-",  # non-breaking hyphen
            "\u2012": "-",  # figure dash
            "\u2013": "-",  # en dash
            "\u2014": "-",  # em dash
            "\u2015": "-",  # horizontal bar
            "\u2018": "'",  # left single quote
            "\u2019": "'",  # right single quote
            "\u201c": '"',  # left double quote
            "\u201d": '"',  # right double quote
            "\u2022": "-",  # bullet
            "\u202f": " ",  # narrow non-breaking space
            "\u2212": "-",  # minus sign
        }
    )

    def __init__(
        self,
        *,
        page_format: str = "A4",
        title: str = "Curriculum Vitae",
        font_path: Optional[Path] = None,
    ) -> None:
        self._page_format = page_format
        self._title = title
        self._font_path = font_path

    @property
    def font_path(self) -> Optional[Path]:
        return self._font_path

    def render(self, html: str) -> bytes:
        try:
            from fpdf import FPDF  # type: ignore[import]
        except ImportError as exc:  # pragma: no cover - optional dependency
            raise PDFRenderError("fpdf2 is required to render CV PDFs.") from exc

        pdf: Any = FPDF(unit="mm", format=self._page_format)
        pdf.set_auto_page_break(auto=True, margin=15)
        pdf.set_margin(15)
        pdf.add_page()
        pdf.set_title(self._title)

        try:
            if self._font_path is not None:
                for style in ("", "B", "I", "BI"):
                    pdf.add_font(FONT_FAMILY, style, str(self._font_path))
                pdf.write_html(self.prepare_markup(html), font_family=FONT_FAMILY)
            else:
                pdf.write_html(self.prepare_markup(html))
            output = pdf.output()
        except Exception as exc:
            raise PDFRenderError(f"Unable to render CV PDF: {exc}") from exc
        return bytes(output)

    def prepare_markup(self, html: str) -> str:
        """Reduce a full HTML page to the body markup fpdf2 understands."""

        markup = self._HEAD_RE.sub("", html)
        body_match = self._BODY_RE.search(markup)
        if body_match:
            markup = body_match.group("body")
        for pattern, replacement in self._TAG_ALIASES:
            markup = pattern.sub(replacement, markup)
        markup = markup.strip()
        if self._font_path is not None:
            return markup
        return self._safe_text(markup)

    @classmethod
    def _safe_text(cls, text: str) -> str:
        text = text.translate(cls._UNICODE_TRANSLATION)
        try:
            text.encode("latin-1")
        except UnicodeEncodeError:
            return text.encode("latin-1", "replace").decode("latin-1")
        return text

"""Projection of a finished CV document into HTML template markup."""

from __future__ import annotations

import logging
import re
from html import escape as html_escape
from typing import Callable, Dict, Iterable

from .cv_schema import CVDocument

logger = logging.getLogger(__name__)

TOKENS = (
    "fullName",
    "email",
    "phone",
    "address",
    "linkedin",
    "portfolio",
    "summary",
    "skills",
    "experience",
    "education",
    "projects",
)

_TOKEN_RE = re.compile(r"\{\{\s*([^{}]*?)\s*\}\}")


class TemplateProjectionError(ValueError):
    """Raised when a template references tokens the projector cannot fill."""


class TemplateProjector:
    """Substitutes ``{{token}}`` markers with CV values and fragments.

    Values are HTML-escaped unless ``escape_html`` is disabled, in which
    case they are inserted verbatim.
    """

    def __init__(self, *, escape_html: bool = True) -> None:
        self._escape_html = escape_html

    def project(self, document: CVDocument, template: str) -> str:
        unknown = sorted(
            {
                match.group(1)
                for match in _TOKEN_RE.finditer(template)
                if match.group(1) not in TOKENS
            }
        )
        if unknown:
            logger.error("Template contains unknown tokens: %s", unknown)
            raise TemplateProjectionError(
                "Template contains unknown tokens: " + ", ".join(unknown)
            )

        values = self.fragments(document)
        # Single pass so inserted values are never scanned for tokens.
        return _TOKEN_RE.sub(lambda match: values[match.group(1)], template)

    def fragments(self, document: CVDocument) -> Dict[str, str]:
        """Render every token to its final markup."""

        text = self._text
        info = document.personal_info
        return {
            "fullName": text(info.full_name),
            "email": text(info.email),
            "phone": text(info.phone),
            "address": text(info.address),
            "linkedin": text(info.linkedin),
            "portfolio": text(info.portfolio),
            "summary": text(document.summary),
            "skills": "".join(f"<li>{text(skill)}</li>" for skill in document.skills),
            "experience": self._join(
                (
                    f"<p><strong>{text(entry.job_title)}</strong> at "
                    f"{text(entry.company)} ({text(entry.start_date)} - "
                    f"{text(entry.end_date)})</p>\n"
                    f"<p>{text(entry.description)}</p>"
                )
                for entry in document.experience
            ),
            "education": self._join(
                (
                    f"<p>{text(entry.degree)} - {text(entry.institution)} "
                    f"({text(entry.start_date)} - {text(entry.end_date)})</p>"
                )
                for entry in document.education
            ),
            "projects": self._join(
                (
                    f"<p><strong>{text(entry.name)}</strong>: "
                    f"{text(entry.description)}</p>\n"
                    "<p><em>Tech Stack:</em> "
                    f"{text(', '.join(entry.tech_stack))}</p>"
                )
                for entry in document.projects
            ),
        }

    @property
    def _text(self) -> Callable[[str], str]:
        if self._escape_html:
            return html_escape
        return _verbatim

    @staticmethod
    def _join(fragments: Iterable[str]) -> str:
        return "\n".join(fragments)


def _verbatim(value: str) -> str:
    return value or ""

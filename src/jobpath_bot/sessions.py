"""Conversation driver routing user turns to chat or the CV interview."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, cast

from .chat import CareerChatAgent
from .config import AppSettings
from .cv_schema import CVDocument
from .enhancement import CVEnhancementAgent
from .interview import InterviewEngine, InterviewMode, InterviewSession, InterviewStateError
from .maf_client import MAFChatClient
from .pdf_exporter import CVPDFRenderer, find_unicode_font
from .projector import TemplateProjector
from .prompts import CV_CANCELLED_MESSAGE, CV_COLLECTED_MESSAGE, CV_READY_MESSAGE

logger = logging.getLogger(__name__)

HISTORY_RETENTION = 50
TERMINAL_CANCEL_TOKENS = {"/cancel", "/quit"}


def _empty_history() -> List[str]:
    return []


@dataclass(slots=True)
class ConversationState:
    """Everything remembered about one user conversation."""

    interview: InterviewSession = field(default_factory=InterviewSession)
    user_history: List[str] = field(default_factory=_empty_history)
    final_document: Optional[CVDocument] = None

    def record_user_message(self, text: str) -> None:
        self.user_history.append(text)
        if len(self.user_history) > HISTORY_RETENTION:
            del self.user_history[:-HISTORY_RETENTION]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "interview": self.interview.to_dict(),
            "user_history": list(self.user_history),
            "final_document": (
                self.final_document.to_dict()
                if self.final_document is not None
                else None
            ),
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ConversationState":
        final_raw = data.get("final_document")
        history_raw = data.get("user_history") or []
        if not isinstance(history_raw, list):
            raise ValueError("user_history must be a list")
        return cls(
            interview=InterviewSession.from_dict(
                cast(Mapping[str, Any], data.get("interview") or {})
            ),
            user_history=[str(item) for item in cast(List[Any], history_raw)],
            final_document=(
                CVDocument.from_dict(cast(Mapping[str, Any], final_raw))
                if final_raw is not None
                else None
            ),
        )


@dataclass(slots=True)
class SessionServices:
    """Process-wide collaborators shared by every conversation."""

    engine: InterviewEngine
    chat_agent: CareerChatAgent
    enhancer: CVEnhancementAgent
    projector: TemplateProjector
    renderer: CVPDFRenderer
    template: str

    @classmethod
    def from_settings(cls, settings: AppSettings) -> "SessionServices":
        client = MAFChatClient(settings.model)
        font_path = settings.pdf_font_path or find_unicode_font()
        if font_path is None:
            logger.warning(
                "No Unicode font found; PDF text is limited to latin-1. "
                "Set JOBPATH_PDF_FONT to a TrueType font."
            )
        return cls(
            engine=InterviewEngine(),
            chat_agent=CareerChatAgent(
                client, max_context=settings.chat_context_limit
            ),
            enhancer=CVEnhancementAgent(client),
            projector=TemplateProjector(escape_html=settings.escape_html),
            renderer=CVPDFRenderer(font_path=font_path),
            template=settings.read_template(),
        )

    def render_html(self, document: CVDocument) -> str:
        return self.projector.project(document, self.template)

    def render_document(self, document: CVDocument) -> bytes:
        """Project ``document`` into the template and render it to PDF."""

        return self.renderer.render(self.render_html(document))


class JobPathSession:
    """Drives a single conversation: chat by default, CV questions on demand."""

    def __init__(
        self,
        services: SessionServices,
        state: Optional[ConversationState] = None,
    ) -> None:
        self._services = services
        self._state = state or ConversationState()

    @property
    def state(self) -> ConversationState:
        return self._state

    @property
    def mode(self) -> InterviewMode:
        return self._state.interview.mode

    @property
    def cv_ready(self) -> bool:
        return self._state.final_document is not None

    def start_cv(self) -> str:
        """Begin (or restart) the CV interview and return the first question."""

        if self._state.interview.collecting:
            logger.info("Restarting CV interview already in progress.")
        self._state.final_document = None
        result = self._services.engine.start(self._state.interview)
        return result.text

    def current_prompt(self) -> Optional[str]:
        return self._services.engine.current_prompt(self._state.interview)

    def cancel_cv(self) -> str:
        self._services.engine.abandon(self._state.interview)
        return CV_CANCELLED_MESSAGE

    async def handle_user_message(self, user_text: str) -> List[str]:
        """Process one user turn and return assistant utterances."""

        updates: List[str] = []
        normalized = user_text.strip()
        if not normalized:
            return updates

        prior_messages = list(self._state.user_history)
        self._state.record_user_message(normalized)

        if not self._state.interview.collecting:
            reply = await self._services.chat_agent.reply(
                normalized, prior_messages
            )
            updates.append(reply)
            return updates

        result = self._services.engine.submit(self._state.interview, user_text)
        if not result.complete:
            updates.append(result.text)
            return updates

        if result.document is None:
            raise InterviewStateError("Completed interview returned no document.")
        updates.append(CV_COLLECTED_MESSAGE)
        enhancement = await self._services.enhancer.try_enhance(result.document)
        if not enhancement.enhanced:
            logger.info("Using the CV as entered: %s", enhancement.error)
        self._state.final_document = enhancement.document
        updates.append(CV_READY_MESSAGE)
        return updates

    def render_pdf(self) -> bytes:
        """Render the finished CV. Failures leave the session untouched."""

        document = self._state.final_document
        if document is None:
            raise InterviewStateError("No completed CV is available to render.")
        return self._services.render_document(document)


async def run_cv_interview(settings: AppSettings) -> Optional[Path]:
    """Conduct the CV interview in the terminal and write the PDF."""

    session = JobPathSession(SessionServices.from_settings(settings))
    print()  # noqa: T201 - CLI UX newline
    print(f"JobPath Bot: {session.start_cv()}")  # noqa: T201
    print("(Type /cancel to stop.)")  # noqa: T201
    while not session.cv_ready:
        answer = input("You: ")  # noqa: PLW1514 - intentional CLI input
        if answer.strip().lower() in TERMINAL_CANCEL_TOKENS:
            print(f"JobPath Bot: {session.cancel_cv()}")  # noqa: T201
            return None
        updates = await session.handle_user_message(answer)
        if not updates:
            updates = [session.current_prompt() or ""]
        for update in updates:
            print(f"JobPath Bot: {update}")  # noqa: T201

    timestamp = datetime.now(timezone.utc).strftime("%Y%m%d_%H%M%S")
    destination = settings.output_dir / f"cv_{timestamp}.pdf"
    destination.write_bytes(session.render_pdf())
    print(f"CV saved to: {destination}")  # noqa: T201
    return destination

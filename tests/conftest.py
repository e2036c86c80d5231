"""Shared fixtures for the JobPath test suite."""

from __future__ import annotations

from pathlib import Path
from typing import Iterable, List, Optional

import pytest

from jobpath_bot.chat import CareerChatAgent
from jobpath_bot.config import DEFAULT_TEMPLATE_PATH, AppSettings, ModelSettings
from jobpath_bot.enhancement import CVEnhancementAgent
from jobpath_bot.interview import InterviewEngine
from jobpath_bot.maf_client import ChatMessage
from jobpath_bot.projector import TemplateProjector
from jobpath_bot.sessions import SessionServices

INTERVIEW_ANSWERS = [
    "Ada Lovelace",
    "ada@example.com",
    "+44 20 7946 0000",
    "12 St James's Square, London",
    "https://linkedin.com/in/ada",
    "skip",
    "Analyst who writes programs for engines.",
    "Go, Rust,  C++ ,",
    "Analyst",
    "Analytical Engines Ltd",
    "06/1842",
    "Present",
    "Wrote the first published algorithm.",
    "BSc Mathematics",
    "University of London",
    "1835",
    "1839",
    "Tracker, Tracks tasks, Go, Postgres",
]


class FakeChatClient:
    """Stands in for the model client, replaying canned responses."""

    def __init__(
        self,
        responses: Optional[Iterable[str]] = None,
        error: Optional[Exception] = None,
    ) -> None:
        self.responses: List[str] = list(responses or [])
        self.error = error
        self.calls: List[List[ChatMessage]] = []

    async def complete(self, messages: Iterable[ChatMessage]) -> ChatMessage:
        batch = list(messages)
        self.calls.append(batch)
        if self.error is not None:
            raise self.error
        content = self.responses.pop(0) if self.responses else ""
        return ChatMessage(role="assistant", content=content)


class StubRenderer:
    """Records the markup it was given instead of producing a real PDF."""

    def __init__(self, error: Optional[Exception] = None) -> None:
        self.error = error
        self.rendered: List[str] = []

    def render(self, html: str) -> bytes:
        if self.error is not None:
            raise self.error
        self.rendered.append(html)
        return b"%PDF-1.4 stub"


def build_services(
    client: FakeChatClient,
    renderer: Optional[StubRenderer] = None,
    *,
    template: Optional[str] = None,
) -> SessionServices:
    return SessionServices(
        engine=InterviewEngine(),
        chat_agent=CareerChatAgent(client),
        enhancer=CVEnhancementAgent(client),
        projector=TemplateProjector(),
        renderer=renderer or StubRenderer(),  # type: ignore[arg-type]
        template=template or DEFAULT_TEMPLATE_PATH.read_text(encoding="utf-8"),
    )


@pytest.fixture
def answers() -> List[str]:
    return list(INTERVIEW_ANSWERS)


@pytest.fixture
def chat_client() -> FakeChatClient:
    return FakeChatClient()


@pytest.fixture
def renderer() -> StubRenderer:
    return StubRenderer()


@pytest.fixture
def services(chat_client: FakeChatClient, renderer: StubRenderer) -> SessionServices:
    return build_services(chat_client, renderer)


@pytest.fixture
def settings(tmp_path: Path) -> AppSettings:
    return AppSettings(
        model=ModelSettings(
            provider="openai",
            model="test-model",
            endpoint=None,
            api_key="test-key",
            api_version=None,
        ),
        output_dir=tmp_path,
        template_path=DEFAULT_TEMPLATE_PATH,
        redis_url=None,
        session_ttl=3600,
        chat_context_limit=10,
        escape_html=True,
    )

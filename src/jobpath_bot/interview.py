"""State machine that collects a CV through a fixed question sequence."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Mapping, Optional, Sequence, cast

from .cv_schema import CVDocument
from .questions import DEFAULT_QUESTIONS, KEEP_CURRENT, FieldPath, InterviewQuestion

logger = logging.getLogger(__name__)


class InterviewStateError(RuntimeError):
    """Raised when the interview is driven out of order."""


class InterviewMode(str, Enum):
    """Whether a conversation is currently answering CV questions."""

    IDLE = "idle"
    COLLECTING = "collecting"


class StepKind(str, Enum):
    NEXT_PROMPT = "next_prompt"
    COMPLETE = "complete"


@dataclass(slots=True)
class InterviewSession:
    """Per-conversation interview state. Never shared between users."""

    mode: InterviewMode = InterviewMode.IDLE
    current_step: int = 0
    document: CVDocument = field(default_factory=CVDocument.empty)

    @property
    def collecting(self) -> bool:
        return self.mode is InterviewMode.COLLECTING

    def to_dict(self) -> Dict[str, Any]:
        return {
            "mode": self.mode.value,
            "current_step": self.current_step,
            "document": self.document.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "InterviewSession":
        return cls(
            mode=InterviewMode(str(data.get("mode", InterviewMode.IDLE.value))),
            current_step=int(data.get("current_step", 0)),
            document=CVDocument.from_dict(
                cast(Mapping[str, Any], data.get("document", {}))
            ),
        )


@dataclass(slots=True)
class StepResult:
    """Outcome of a single interview turn."""

    kind: StepKind
    text: str = ""
    document: Optional[CVDocument] = None

    @property
    def complete(self) -> bool:
        return self.kind is StepKind.COMPLETE


class InterviewEngine:
    """Applies user answers to the document one question at a time.

    The engine holds no per-user state; everything lives on the
    :class:`InterviewSession` passed to each call.
    """

    def __init__(
        self,
        questions: Sequence[InterviewQuestion] = DEFAULT_QUESTIONS,
    ) -> None:
        if not questions:
            raise ValueError("At least one interview question is required.")
        self._questions = tuple(questions)

    @property
    def questions(self) -> tuple[InterviewQuestion, ...]:
        return self._questions

    @property
    def total_steps(self) -> int:
        return len(self._questions)

    def start(self, session: InterviewSession) -> StepResult:
        """Reset the session and return the first prompt."""

        session.mode = InterviewMode.COLLECTING
        session.current_step = 0
        session.document = CVDocument.empty()
        return StepResult(
            kind=StepKind.NEXT_PROMPT,
            text=self._questions[0].prompt,
        )

    def submit(self, session: InterviewSession, raw_input: str) -> StepResult:
        """Record the answer to the current question and advance."""

        if not session.collecting:
            raise InterviewStateError(
                "No CV interview in progress; call start() first."
            )
        if not 0 <= session.current_step < self.total_steps:
            raise InterviewStateError(
                f"Interview step {session.current_step} is out of range."
            )

        question = self._questions[session.current_step]
        value = question.transform(raw_input)
        if value is KEEP_CURRENT:
            logger.debug("Step %s skipped by user.", session.current_step)
        else:
            _assign(session.document, question.path, value)
        session.current_step += 1

        if session.current_step < self.total_steps:
            return StepResult(
                kind=StepKind.NEXT_PROMPT,
                text=self._questions[session.current_step].prompt,
            )

        session.mode = InterviewMode.IDLE
        logger.info("CV interview completed after %s steps.", self.total_steps)
        return StepResult(kind=StepKind.COMPLETE, document=session.document)

    def current_prompt(self, session: InterviewSession) -> Optional[str]:
        if not session.collecting or session.current_step >= self.total_steps:
            return None
        return self._questions[session.current_step].prompt

    def abandon(self, session: InterviewSession) -> None:
        """Drop any partially collected answers."""

        session.mode = InterviewMode.IDLE
        session.current_step = 0
        session.document = CVDocument.empty()


def _assign(document: CVDocument, path: FieldPath, value: object) -> None:
    target: Any = document
    for key in path[:-1]:
        target = target[key] if isinstance(key, int) else getattr(target, key)
    leaf = path[-1]
    if isinstance(leaf, int):
        target[leaf] = value
    else:
        setattr(target, leaf, value)

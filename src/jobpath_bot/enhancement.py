"""Best-effort rewriting of a finished CV by the language model."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional, cast

from .cv_schema import CVDocument, DocumentShapeError
from .maf_client import ChatCompletionClient, ChatMessage
from .prompts import GUIDANCE

logger = logging.getLogger(__name__)

# Sections whose entry count must survive enhancement.
_COUNTED_SECTIONS = ("experience", "education", "projects")


class EnhancementError(RuntimeError):
    """Raised internally when the model output cannot be used."""


@dataclass(slots=True)
class EnhancementResult:
    """Either the enhanced document or the reason it was rejected.

    ``document`` is always usable: on failure it is the caller's original.
    """

    document: CVDocument
    error: Optional[EnhancementError] = None

    @property
    def enhanced(self) -> bool:
        return self.error is None


class CVEnhancementAgent:
    """Asks the model to polish CV wording while keeping its structure."""

    def __init__(self, client: ChatCompletionClient) -> None:
        self._client = client

    async def enhance(self, document: CVDocument) -> CVDocument:
        """Return the enhanced document, or ``document`` itself on any failure."""

        return (await self.try_enhance(document)).document

    async def try_enhance(self, document: CVDocument) -> EnhancementResult:
        payload = json.dumps(document.to_dict(), ensure_ascii=False)
        messages = [
            ChatMessage(role="system", content=GUIDANCE.enhancement),
            ChatMessage(
                role="user",
                content=f"Here is the CV JSON to enhance:\n{payload}",
            ),
        ]
        try:
            response = await self._client.complete(messages)
            enhanced = self._parse_response(response.content, document)
        except EnhancementError as exc:
            logger.warning("CV enhancement rejected: %s", exc)
            return EnhancementResult(document=document, error=exc)
        except Exception as exc:
            logger.warning("CV enhancement call failed: %s", exc)
            return EnhancementResult(
                document=document,
                error=EnhancementError(f"Enhancement call failed: {exc}"),
            )
        logger.info("CV enhancement accepted.")
        return EnhancementResult(document=enhanced)

    def _parse_response(self, raw: str, original: CVDocument) -> CVDocument:
        data = self._extract_json_object(raw)
        if data is None:
            raise EnhancementError("Response was not a JSON object.")
        try:
            enhanced = CVDocument.from_dict(data)
        except DocumentShapeError as exc:
            raise EnhancementError(f"Response changed the CV structure: {exc}") from exc
        for section in _COUNTED_SECTIONS:
            expected = len(getattr(original, section))
            received = len(getattr(enhanced, section))
            if received != expected:
                raise EnhancementError(
                    f"Response has {received} {section} entries, expected {expected}."
                )
        return enhanced

    @staticmethod
    def _extract_json_object(raw: str) -> Optional[Dict[str, Any]]:
        text = raw.strip()
        if not text:
            return None
        candidate = text
        if not candidate.startswith("{"):
            start = text.find("{")
            end = text.rfind("}")
            if start == -1 or end == -1 or end <= start:
                return None
            candidate = text[start:end + 1]
        try:
            payload = json.loads(candidate)
        except json.JSONDecodeError:
            logger.debug("Enhancement response is not valid JSON: %.200s", text)
            return None
        if not isinstance(payload, dict):
            return None
        return cast(Dict[str, Any], payload)

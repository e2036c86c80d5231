"""Career-only question answering through the configured chat model."""

from __future__ import annotations

import logging
from typing import List, Sequence

from .maf_client import ChatCompletionClient, ChatMessage
from .prompts import EMPTY_REPLY_FALLBACK, GUIDANCE, build_context_block

logger = logging.getLogger(__name__)

DEFAULT_CONTEXT_LIMIT = 10


class ChatGatewayError(RuntimeError):
    """Raised when the chat model cannot produce a reply."""


class CareerChatAgent:
    """Stateless single-turn replies scoped to career topics."""

    def __init__(
        self,
        client: ChatCompletionClient,
        *,
        max_context: int = DEFAULT_CONTEXT_LIMIT,
    ) -> None:
        if max_context < 0:
            raise ValueError("max_context must be >= 0")
        self._client = client
        self._max_context = max_context

    async def reply(
        self,
        user_message: str,
        recent_user_utterances: Sequence[str] = (),
        *,
        max_context: int | None = None,
    ) -> str:
        """Answer ``user_message`` using at most ``max_context`` prior turns."""

        limit = self._max_context if max_context is None else max_context
        messages = self.build_messages(
            user_message,
            recent_user_utterances,
            max_context=limit,
        )
        try:
            response = await self._client.complete(messages)
        except Exception as exc:
            logger.exception("Chat completion failed.")
            raise ChatGatewayError("Failed to get a chat reply.") from exc
        text = response.content.strip()
        return text or EMPTY_REPLY_FALLBACK

    @staticmethod
    def build_messages(
        user_message: str,
        recent_user_utterances: Sequence[str],
        *,
        max_context: int = DEFAULT_CONTEXT_LIMIT,
    ) -> List[ChatMessage]:
        context: List[str] = []
        if max_context > 0:
            context = [
                utterance
                for utterance in list(recent_user_utterances)[-max_context:]
                if utterance.strip()
            ]
        instruction = GUIDANCE.chat
        context_block = build_context_block(context)
        if context_block:
            instruction = f"{instruction}\n\n{context_block}"
        return [
            ChatMessage(role="system", content=instruction),
            ChatMessage(role="user", content=user_message.strip()),
        ]

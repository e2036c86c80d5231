"""Thin wrapper around Microsoft Agent Framework chat completion clients.

The chat and enhancement agents only depend on :class:`ChatMessage` and an
object exposing ``complete``; the framework itself is imported when a
client is actually built so the interview core stays importable without it.
"""

from __future__ import annotations

from dataclasses import dataclass
from importlib import import_module
from typing import Any, Iterable, List, Protocol

from .config import ModelSettings


@dataclass(slots=True)
class ChatMessage:
    """Simple representation of a chat message compatible with this app."""

    role: str
    content: str


class ChatCompletionClient(Protocol):
    async def complete(self, messages: Iterable[ChatMessage]) -> ChatMessage:
        ...


class MAFIntegrationError(RuntimeError):
    """Raised when the MAF client cannot be initialized."""


def _framework() -> Any:
    try:
        return import_module("agent_framework")
    except ModuleNotFoundError as exc:  # pragma: no cover - MAF runtime
        raise MAFIntegrationError(
            "Microsoft Agent Framework is not installed. Reinstall the "
            "project dependencies (e.g. `pip install -e .`)."
        ) from exc


class MAFChatClient:
    """Dispatches chat completion calls through the configured MAF client."""

    def __init__(self, settings: ModelSettings) -> None:
        self._settings = settings
        self._client = self._create_client(settings)

    @staticmethod
    def _create_client(settings: ModelSettings) -> Any:
        provider = settings.provider.lower()
        try:
            if provider in {"azure-openai", "azure_openai", "azure"}:
                module = import_module("agent_framework.azure")
                client_cls = getattr(module, "AzureOpenAIChatClient")
                return client_cls(
                    api_key=settings.api_key,
                    deployment_name=settings.model,
                    endpoint=settings.endpoint,
                    api_version=settings.api_version,
                )
            if provider in {"openai", "oai"}:
                module = import_module("agent_framework.openai")
                client_cls = getattr(module, "OpenAIChatClient")
                return client_cls(
                    api_key=settings.api_key,
                    model_id=settings.model,
                    base_url=settings.endpoint,
                )
        except ModuleNotFoundError as exc:  # pragma: no cover - MAF runtime
            missing = exc.name or "a required dependency"
            raise MAFIntegrationError(
                f"Microsoft Agent Framework dependency '{missing}' is missing. "
                "Reinstall the project dependencies (e.g. `pip install -e .`)."
            ) from exc
        raise MAFIntegrationError(
            f"Unsupported MAF provider '{settings.provider}'."
        )

    @staticmethod
    def _merge_consecutive_roles(
        messages: Iterable[ChatMessage],
    ) -> List[ChatMessage]:
        """Combine adjacent messages that share the same role.

        Framework chat templates expect user/assistant turns to alternate.
        """

        merged: List[ChatMessage] = []
        for message in messages:
            if merged and merged[-1].role == message.role:
                previous = merged[-1]
                previous.content = (
                    f"{previous.content}\n\n{message.content}".strip()
                )
                continue
            merged.append(
                ChatMessage(role=message.role, content=message.content)
            )
        return merged

    async def complete(self, messages: Iterable[ChatMessage]) -> ChatMessage:
        """Execute a chat completion call through the underlying MAF client."""

        framework = _framework()
        role_cls = framework.Role
        message_cls = framework.ChatMessage
        payload = []
        for message in self._merge_consecutive_roles(messages):
            try:
                role = role_cls(message.role)
            except ValueError as exc:
                raise ValueError(
                    f"Unsupported role for MAF chat message: {message.role}"
                ) from exc
            payload.append(message_cls(role=role, text=message.content))
        response = await self._client.get_response(messages=payload)
        return ChatMessage(role="assistant", content=response.text or "")

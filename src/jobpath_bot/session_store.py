"""Persistence of per-conversation state between HTTP requests."""

from __future__ import annotations

import json
import logging
from time import monotonic
from typing import Any, Dict, Optional, Tuple, cast
from uuid import uuid4

import redis
from redis import Redis
from redis.exceptions import RedisError

from .sessions import ConversationState

logger = logging.getLogger(__name__)

KEY_PREFIX = "jobpath:session:"


def new_session_id() -> str:
    return f"conv-{uuid4().hex}"


class SessionRepository:
    """Keeps conversation state in Redis when configured, else in memory.

    Redis failures are logged and the in-process copy is used instead, so a
    flaky cache never breaks an interview in progress.
    """

    def __init__(self, redis_url: Optional[str] = None, ttl_seconds: int = 86400) -> None:
        self._redis_url = redis_url
        self._ttl_seconds = ttl_seconds
        self._redis: Optional[Redis] = None
        # session id -> (monotonic expiry, JSON blob)
        self._memory: Dict[str, Tuple[float, str]] = {}

    def _get_redis(self) -> Optional[Redis]:
        if not self._redis_url:
            return None
        if self._redis is None:
            try:
                self._redis = redis.from_url(  # type: ignore[call-overload]
                    self._redis_url,
                    decode_responses=True,
                )
            except RedisError as exc:  # pragma: no cover - network guarded
                logger.warning("Redis connection failed: %s", exc)
                self._redis = None
        return self._redis

    def load(self, session_id: str) -> Optional[ConversationState]:
        blob = self._read(session_id)
        if blob is None:
            return None
        try:
            data = json.loads(blob)
            if not isinstance(data, dict):
                raise ValueError("session payload is not an object")
            return ConversationState.from_dict(cast(Dict[str, Any], data))
        except (TypeError, ValueError) as exc:
            logger.warning("Discarding unreadable session %s: %s", session_id, exc)
            self.delete(session_id)
            return None

    def save(self, session_id: str, state: ConversationState) -> None:
        blob = json.dumps(state.to_dict(), ensure_ascii=False)
        client = self._get_redis()
        if not client:
            self._remember(session_id, blob)
            return
        key = f"{KEY_PREFIX}{session_id}"
        try:
            client.set(key, blob, ex=self._ttl_seconds)
        except RedisError as exc:  # pragma: no cover - best effort
            logger.warning("Redis persistence failed for %s: %s", key, exc)
            self._remember(session_id, blob)
        else:
            self._memory.pop(session_id, None)

    def delete(self, session_id: str) -> None:
        self._memory.pop(session_id, None)
        client = self._get_redis()
        if not client:
            return
        key = f"{KEY_PREFIX}{session_id}"
        try:
            client.delete(key)
        except RedisError as exc:  # pragma: no cover - best effort
            logger.warning("Redis delete failed for %s: %s", key, exc)

    def _read(self, session_id: str) -> Optional[str]:
        client = self._get_redis()
        if not client:
            return self._recall(session_id)
        key = f"{KEY_PREFIX}{session_id}"
        try:
            value = client.get(key)
        except RedisError as exc:  # pragma: no cover - best effort
            logger.warning("Redis read failed for %s: %s", key, exc)
            return self._recall(session_id)
        if value is None:
            return self._recall(session_id)
        if isinstance(value, bytes):
            return value.decode("utf-8")
        return str(value)

    def _remember(self, session_id: str, blob: str) -> None:
        now = monotonic()
        self._purge_expired(now)
        self._memory[session_id] = (now + self._ttl_seconds, blob)

    def _recall(self, session_id: str) -> Optional[str]:
        entry = self._memory.get(session_id)
        if entry is None:
            return None
        expires_at, blob = entry
        if expires_at <= monotonic():
            del self._memory[session_id]
            return None
        return blob

    def _purge_expired(self, now: float) -> None:
        expired = [
            session_id
            for session_id, (expires_at, _) in self._memory.items()
            if expires_at <= now
        ]
        for session_id in expired:
            del self._memory[session_id]

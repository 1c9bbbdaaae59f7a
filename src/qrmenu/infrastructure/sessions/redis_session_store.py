from __future__ import annotations

import secrets

import redis

from qrmenu.application.ports.sessions import SessionStore
from qrmenu.domain.common.ids import UserId
from qrmenu.infrastructure.sessions.redis_client import get_redis_client

SESSION_ID_BYTES = 32


def session_key(session_id: str) -> str:
    return f"session:{session_id}"


class RedisSessionStore(SessionStore):
    """Server-side sessions: ``session:{id}`` holds the user id until the TTL runs out."""

    def __init__(self, client: redis.Redis | None = None, timeout_seconds: float = 1.0) -> None:
        self._client = client
        self._timeout_seconds = timeout_seconds

    def _redis(self) -> redis.Redis:
        if self._client is not None:
            return self._client
        return get_redis_client(timeout_seconds=self._timeout_seconds)

    def create(self, user_id: UserId, ttl_seconds: int) -> str:
        session_id = secrets.token_urlsafe(SESSION_ID_BYTES)
        self._redis().set(name=session_key(session_id), value=str(user_id), ex=ttl_seconds)
        return session_id

    def resolve(self, session_id: str) -> UserId | None:
        value = self._redis().get(session_key(session_id))
        if value is None:
            return None
        if isinstance(value, bytes):
            value = value.decode("utf-8")
        return UserId(value)

    def revoke(self, session_id: str) -> None:
        self._redis().delete(session_key(session_id))

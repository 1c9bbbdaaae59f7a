from __future__ import annotations

from typing import Protocol

from qrmenu.domain.common.ids import UserId


class SessionStore(Protocol):
    def create(self, user_id: UserId, ttl_seconds: int) -> str: ...

    def resolve(self, session_id: str) -> UserId | None: ...

    def revoke(self, session_id: str) -> None: ...

from __future__ import annotations

from dataclasses import dataclass

from qrmenu.domain.common.ids import UserId


@dataclass(frozen=True)
class AuthContext:
    """Authenticated caller of a request, resolved from the session cookie."""

    user_id: UserId
    session_id: str

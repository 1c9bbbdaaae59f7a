from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone

from qrmenu.domain.common.ids import UserId


@dataclass(frozen=True)
class User:
    user_id: UserId
    email: str
    name: str
    password_hash: str
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def __post_init__(self) -> None:
        if "@" not in self.email:
            raise ValueError("email must contain '@'")
        if not self.password_hash:
            raise ValueError("password_hash must be non-empty")

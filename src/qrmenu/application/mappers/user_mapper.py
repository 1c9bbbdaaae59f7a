from __future__ import annotations

from qrmenu.application.dto.responses import UserResponse
from qrmenu.domain.user.entities import User


def to_user_response(user: User) -> UserResponse:
    return UserResponse(id=str(user.user_id), email=user.email, name=user.name)

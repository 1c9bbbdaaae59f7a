from __future__ import annotations

from typing import NewType
from uuid import uuid4

UserId = NewType("UserId", str)
RestaurantId = NewType("RestaurantId", str)
CategoryId = NewType("CategoryId", str)
MenuItemId = NewType("MenuItemId", str)


def new_id(prefix: str) -> str:
    return f"{prefix}_{uuid4().hex}"

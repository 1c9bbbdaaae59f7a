from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime, timezone

from qrmenu.domain.common.ids import CategoryId, MenuItemId, RestaurantId, UserId
from qrmenu.domain.common.money import Price

DEFAULT_PRIMARY_COLOR = "#f97316"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def next_position(current_max: int | None) -> int:
    """Position for a new record appended to a scope; gaps are kept."""
    if current_max is None:
        return 0
    return current_max + 1


@dataclass(frozen=True)
class MenuItem:
    item_id: MenuItemId
    category_id: CategoryId
    name: str
    description: str | None
    price: Price
    image: str | None
    is_available: bool = True
    order: int = 0
    created_at: datetime = field(default_factory=_utcnow)
    updated_at: datetime = field(default_factory=_utcnow)

    def __post_init__(self) -> None:
        if not self.name.strip():
            raise ValueError("name must be non-empty")
        if self.order < 0:
            raise ValueError("order must be >= 0")


@dataclass(frozen=True)
class Category:
    category_id: CategoryId
    restaurant_id: RestaurantId
    name: str
    description: str | None
    order: int = 0
    items: list[MenuItem] = field(default_factory=list)
    created_at: datetime = field(default_factory=_utcnow)
    updated_at: datetime = field(default_factory=_utcnow)

    def __post_init__(self) -> None:
        if not self.name.strip():
            raise ValueError("name must be non-empty")
        if self.order < 0:
            raise ValueError("order must be >= 0")

    def available_items(self) -> list[MenuItem]:
        return [item for item in self.items if item.is_available]


@dataclass(frozen=True)
class Restaurant:
    restaurant_id: RestaurantId
    user_id: UserId
    name: str
    slug: str
    description: str | None = None
    address: str | None = None
    phone: str | None = None
    primary_color: str = DEFAULT_PRIMARY_COLOR
    categories: list[Category] = field(default_factory=list)
    created_at: datetime = field(default_factory=_utcnow)
    updated_at: datetime = field(default_factory=_utcnow)

    def __post_init__(self) -> None:
        if not self.name.strip():
            raise ValueError("name must be non-empty")
        if not self.slug:
            raise ValueError("slug must be non-empty")

    def owned_by(self, user_id: UserId) -> bool:
        return self.user_id == user_id

    def public_view(self) -> Restaurant:
        """Copy of the menu tree holding only available items."""
        categories = [
            replace(category, items=category.available_items()) for category in self.categories
        ]
        return replace(self, categories=categories)

    def has_visible_items(self) -> bool:
        return any(category.available_items() for category in self.categories)

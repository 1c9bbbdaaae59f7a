from __future__ import annotations

from typing import Any, Protocol

from qrmenu.domain.common.ids import CategoryId, MenuItemId, RestaurantId, UserId
from qrmenu.domain.menu.entities import Category, MenuItem, Restaurant
from qrmenu.domain.user.entities import User


class UserRepository(Protocol):
    def get(self, user_id: UserId) -> User | None: ...

    def get_by_email(self, email: str) -> User | None: ...

    def add(self, user: User) -> User: ...


class RestaurantRepository(Protocol):
    def add(self, restaurant: Restaurant) -> Restaurant: ...

    def get_owned(self, restaurant_id: RestaurantId, user_id: UserId) -> Restaurant | None: ...

    def get_owned_tree(
        self,
        restaurant_id: RestaurantId,
        user_id: UserId,
    ) -> Restaurant | None: ...

    def list_for_user(self, user_id: UserId) -> list[Restaurant]: ...

    def get_by_slug(self, slug: str) -> Restaurant | None: ...

    def slug_exists(self, slug: str, exclude_id: RestaurantId | None = None) -> bool: ...

    def update(self, restaurant_id: RestaurantId, changes: dict[str, Any]) -> Restaurant: ...

    def delete(self, restaurant_id: RestaurantId) -> None: ...


class CategoryRepository(Protocol):
    def add(self, category: Category) -> Category: ...

    def get_owned(self, category_id: CategoryId, user_id: UserId) -> Category | None: ...

    def max_order(self, restaurant_id: RestaurantId) -> int | None: ...

    def update(self, category_id: CategoryId, changes: dict[str, Any]) -> Category: ...

    def delete(self, category_id: CategoryId) -> None: ...

    def reorder(self, user_id: UserId, category_ids: list[CategoryId]) -> None: ...


class MenuItemRepository(Protocol):
    def add(self, item: MenuItem) -> MenuItem: ...

    def get_owned(self, item_id: MenuItemId, user_id: UserId) -> MenuItem | None: ...

    def max_order(self, category_id: CategoryId) -> int | None: ...

    def update(self, item_id: MenuItemId, changes: dict[str, Any]) -> MenuItem: ...

    def delete(self, item_id: MenuItemId) -> None: ...

    def reorder(self, user_id: UserId, item_ids: list[MenuItemId]) -> None: ...


class DuplicateEmailError(Exception):
    pass


class DuplicateSlugError(Exception):
    pass


class RecordNotFoundError(Exception):
    """Raised by writes whose target vanished, or by a reorder naming ids the caller does not own."""

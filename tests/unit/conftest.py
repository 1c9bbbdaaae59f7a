from __future__ import annotations

import sys
from dataclasses import replace
from pathlib import Path
from typing import Any

import pytest

sys.path.insert(0, str(Path(__file__).resolve().parents[2] / "src"))

from qrmenu.application.ports.repositories import (
    DuplicateEmailError,
    DuplicateSlugError,
    RecordNotFoundError,
)
from qrmenu.application.use_cases.context import AuthContext
from qrmenu.domain.common.ids import CategoryId, MenuItemId, RestaurantId, UserId
from qrmenu.domain.menu.entities import Category, MenuItem, Restaurant
from qrmenu.domain.user.entities import User


class InMemoryMenuData:
    def __init__(self) -> None:
        self.users: dict[str, User] = {}
        self.restaurants: dict[str, Restaurant] = {}
        self.categories: dict[str, Category] = {}
        self.items: dict[str, MenuItem] = {}

    def owner_of_category(self, category_id: str) -> UserId | None:
        category = self.categories.get(category_id)
        if category is None:
            return None
        return self.restaurants[str(category.restaurant_id)].user_id

    def owner_of_item(self, item_id: str) -> UserId | None:
        item = self.items.get(item_id)
        if item is None:
            return None
        return self.owner_of_category(str(item.category_id))

    def tree(self, restaurant: Restaurant) -> Restaurant:
        categories = sorted(
            (c for c in self.categories.values() if c.restaurant_id == restaurant.restaurant_id),
            key=lambda c: c.order,
        )
        return replace(
            restaurant,
            categories=[
                replace(
                    category,
                    items=sorted(
                        (i for i in self.items.values() if i.category_id == category.category_id),
                        key=lambda i: i.order,
                    ),
                )
                for category in categories
            ],
        )


class FakeUserRepository:
    def __init__(self, data: InMemoryMenuData) -> None:
        self._data = data

    def get(self, user_id: UserId) -> User | None:
        return self._data.users.get(str(user_id))

    def get_by_email(self, email: str) -> User | None:
        return next((u for u in self._data.users.values() if u.email == email), None)

    def add(self, user: User) -> User:
        if self.get_by_email(user.email) is not None:
            raise DuplicateEmailError(user.email)
        self._data.users[str(user.user_id)] = user
        return user


class FakeRestaurantRepository:
    def __init__(self, data: InMemoryMenuData) -> None:
        self._data = data

    def add(self, restaurant: Restaurant) -> Restaurant:
        if self.slug_exists(restaurant.slug):
            raise DuplicateSlugError(restaurant.slug)
        self._data.restaurants[str(restaurant.restaurant_id)] = restaurant
        return restaurant

    def get_owned(self, restaurant_id: RestaurantId, user_id: UserId) -> Restaurant | None:
        restaurant = self._data.restaurants.get(str(restaurant_id))
        if restaurant is None or not restaurant.owned_by(user_id):
            return None
        return restaurant

    def get_owned_tree(self, restaurant_id: RestaurantId, user_id: UserId) -> Restaurant | None:
        restaurant = self.get_owned(restaurant_id, user_id)
        return self._data.tree(restaurant) if restaurant is not None else None

    def list_for_user(self, user_id: UserId) -> list[Restaurant]:
        owned = [r for r in self._data.restaurants.values() if r.owned_by(user_id)]
        return [self._data.tree(r) for r in reversed(owned)]

    def get_by_slug(self, slug: str) -> Restaurant | None:
        restaurant = next((r for r in self._data.restaurants.values() if r.slug == slug), None)
        return self._data.tree(restaurant) if restaurant is not None else None

    def slug_exists(self, slug: str, exclude_id: RestaurantId | None = None) -> bool:
        return any(
            r.slug == slug and r.restaurant_id != exclude_id
            for r in self._data.restaurants.values()
        )

    def update(self, restaurant_id: RestaurantId, changes: dict[str, Any]) -> Restaurant:
        current = self._data.restaurants.get(str(restaurant_id))
        if current is None:
            raise RecordNotFoundError(str(restaurant_id))
        updated = replace(current, **changes)
        self._data.restaurants[str(restaurant_id)] = updated
        return updated

    def delete(self, restaurant_id: RestaurantId) -> None:
        self._data.restaurants.pop(str(restaurant_id), None)
        for category_id in [
            key
            for key, category in self._data.categories.items()
            if category.restaurant_id == restaurant_id
        ]:
            self._data.categories.pop(category_id)
            for item_id in [
                key for key, item in self._data.items.items() if item.category_id == category_id
            ]:
                self._data.items.pop(item_id)


class FakeCategoryRepository:
    def __init__(self, data: InMemoryMenuData) -> None:
        self._data = data

    def add(self, category: Category) -> Category:
        self._data.categories[str(category.category_id)] = category
        return category

    def get_owned(self, category_id: CategoryId, user_id: UserId) -> Category | None:
        if self._data.owner_of_category(str(category_id)) != user_id:
            return None
        return self._data.categories[str(category_id)]

    def max_order(self, restaurant_id: RestaurantId) -> int | None:
        orders = [
            c.order for c in self._data.categories.values() if c.restaurant_id == restaurant_id
        ]
        return max(orders) if orders else None

    def update(self, category_id: CategoryId, changes: dict[str, Any]) -> Category:
        current = self._data.categories.get(str(category_id))
        if current is None:
            raise RecordNotFoundError(str(category_id))
        updated = replace(current, **changes)
        self._data.categories[str(category_id)] = updated
        return updated

    def delete(self, category_id: CategoryId) -> None:
        self._data.categories.pop(str(category_id), None)

    def reorder(self, user_id: UserId, category_ids: list[CategoryId]) -> None:
        missing = [c for c in category_ids if self._data.owner_of_category(str(c)) != user_id]
        if missing:
            raise RecordNotFoundError(f"category not found: {missing[0]}")
        for position, category_id in enumerate(category_ids):
            current = self._data.categories[str(category_id)]
            self._data.categories[str(category_id)] = replace(current, order=position)


class FakeMenuItemRepository:
    def __init__(self, data: InMemoryMenuData) -> None:
        self._data = data

    def add(self, item: MenuItem) -> MenuItem:
        self._data.items[str(item.item_id)] = item
        return item

    def get_owned(self, item_id: MenuItemId, user_id: UserId) -> MenuItem | None:
        if self._data.owner_of_item(str(item_id)) != user_id:
            return None
        return self._data.items[str(item_id)]

    def max_order(self, category_id: CategoryId) -> int | None:
        orders = [i.order for i in self._data.items.values() if i.category_id == category_id]
        return max(orders) if orders else None

    def update(self, item_id: MenuItemId, changes: dict[str, Any]) -> MenuItem:
        current = self._data.items.get(str(item_id))
        if current is None:
            raise RecordNotFoundError(str(item_id))
        if "price" in changes:
            changes = {**changes, "price": type(current.price)(changes["price"])}
        updated = replace(current, **changes)
        self._data.items[str(item_id)] = updated
        return updated

    def delete(self, item_id: MenuItemId) -> None:
        self._data.items.pop(str(item_id), None)

    def reorder(self, user_id: UserId, item_ids: list[MenuItemId]) -> None:
        missing = [i for i in item_ids if self._data.owner_of_item(str(i)) != user_id]
        if missing:
            raise RecordNotFoundError(f"menu item not found: {missing[0]}")
        for position, item_id in enumerate(item_ids):
            current = self._data.items[str(item_id)]
            self._data.items[str(item_id)] = replace(current, order=position)


class FakeSessionStore:
    def __init__(self) -> None:
        self.sessions: dict[str, str] = {}
        self.ttls: dict[str, int] = {}

    def create(self, user_id: UserId, ttl_seconds: int) -> str:
        session_id = f"sid-{len(self.sessions) + 1}"
        self.sessions[session_id] = str(user_id)
        self.ttls[session_id] = ttl_seconds
        return session_id

    def resolve(self, session_id: str) -> UserId | None:
        value = self.sessions.get(session_id)
        return UserId(value) if value is not None else None

    def revoke(self, session_id: str) -> None:
        self.sessions.pop(session_id, None)


class PlainTextHasher:
    def hash(self, password: str) -> str:
        return f"plain${password}"

    def verify(self, password_hash: str, password: str) -> bool:
        return password_hash == f"plain${password}"


@pytest.fixture
def menu_data() -> InMemoryMenuData:
    return InMemoryMenuData()


@pytest.fixture
def users(menu_data: InMemoryMenuData) -> FakeUserRepository:
    return FakeUserRepository(menu_data)


@pytest.fixture
def restaurants(menu_data: InMemoryMenuData) -> FakeRestaurantRepository:
    return FakeRestaurantRepository(menu_data)


@pytest.fixture
def categories(menu_data: InMemoryMenuData) -> FakeCategoryRepository:
    return FakeCategoryRepository(menu_data)


@pytest.fixture
def items(menu_data: InMemoryMenuData) -> FakeMenuItemRepository:
    return FakeMenuItemRepository(menu_data)


@pytest.fixture
def sessions() -> FakeSessionStore:
    return FakeSessionStore()


@pytest.fixture
def hasher() -> PlainTextHasher:
    return PlainTextHasher()


@pytest.fixture
def owner() -> AuthContext:
    return AuthContext(user_id=UserId("usr_owner"), session_id="sid-owner")


@pytest.fixture
def stranger() -> AuthContext:
    return AuthContext(user_id=UserId("usr_stranger"), session_id="sid-stranger")

from __future__ import annotations

from datetime import datetime, timezone

from qrmenu.domain.common.ids import CategoryId, MenuItemId, RestaurantId, UserId
from qrmenu.domain.common.money import Price
from qrmenu.domain.menu.entities import Category, MenuItem, Restaurant
from qrmenu.domain.user.entities import User
from qrmenu.infrastructure.db.models.menu import CategoryModel, MenuItemModel, RestaurantModel
from qrmenu.infrastructure.db.models.user import UserModel


def _aware(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def to_user(model: UserModel) -> User:
    return User(
        user_id=UserId(model.id),
        email=model.email,
        name=model.name,
        password_hash=model.password_hash,
        created_at=_aware(model.created_at),
    )


def to_menu_item(model: MenuItemModel) -> MenuItem:
    return MenuItem(
        item_id=MenuItemId(model.id),
        category_id=CategoryId(model.category_id),
        name=model.name,
        description=model.description,
        price=Price(model.price),
        image=model.image,
        is_available=model.is_available,
        order=model.order,
        created_at=_aware(model.created_at),
        updated_at=_aware(model.updated_at),
    )


def to_category(model: CategoryModel, include_items: bool = False) -> Category:
    items = [to_menu_item(item) for item in model.items] if include_items else []
    return Category(
        category_id=CategoryId(model.id),
        restaurant_id=RestaurantId(model.restaurant_id),
        name=model.name,
        description=model.description,
        order=model.order,
        items=items,
        created_at=_aware(model.created_at),
        updated_at=_aware(model.updated_at),
    )


def to_restaurant(model: RestaurantModel, include_tree: bool = False) -> Restaurant:
    categories = (
        [to_category(category, include_items=True) for category in model.categories]
        if include_tree
        else []
    )
    return Restaurant(
        restaurant_id=RestaurantId(model.id),
        user_id=UserId(model.user_id),
        name=model.name,
        slug=model.slug,
        description=model.description,
        address=model.address,
        phone=model.phone,
        primary_color=model.primary_color,
        categories=categories,
        created_at=_aware(model.created_at),
        updated_at=_aware(model.updated_at),
    )

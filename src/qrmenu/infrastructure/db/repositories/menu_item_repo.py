from __future__ import annotations

from typing import Any

from sqlalchemy import Engine, func, select, update
from sqlalchemy.orm import Session

from qrmenu.application.ports.repositories import MenuItemRepository, RecordNotFoundError
from qrmenu.domain.common.ids import CategoryId, MenuItemId, UserId
from qrmenu.domain.menu.entities import MenuItem
from qrmenu.infrastructure.db.models.menu import CategoryModel, MenuItemModel, RestaurantModel
from qrmenu.infrastructure.db.repositories.converters import to_menu_item
from qrmenu.infrastructure.db.session import get_engine

_UPDATABLE_COLUMNS = frozenset({"name", "description", "price", "image", "is_available"})


def _owned_items():
    return (
        select(MenuItemModel)
        .join(CategoryModel, MenuItemModel.category_id == CategoryModel.id)
        .join(RestaurantModel, CategoryModel.restaurant_id == RestaurantModel.id)
    )


class SqlAlchemyMenuItemRepository(MenuItemRepository):
    def __init__(self, engine: Engine | None = None) -> None:
        self._engine = engine or get_engine()

    def add(self, item: MenuItem) -> MenuItem:
        model = MenuItemModel(
            id=str(item.item_id),
            category_id=str(item.category_id),
            name=item.name,
            description=item.description,
            price=item.price.amount,
            image=item.image,
            is_available=item.is_available,
            order=item.order,
            created_at=item.created_at,
            updated_at=item.updated_at,
        )
        with Session(self._engine) as session:
            session.add(model)
            session.commit()
            return to_menu_item(model)

    def get_owned(self, item_id: MenuItemId, user_id: UserId) -> MenuItem | None:
        statement = _owned_items().where(
            MenuItemModel.id == str(item_id),
            RestaurantModel.user_id == str(user_id),
        )
        with Session(self._engine) as session:
            model = session.execute(statement).scalar_one_or_none()
            return to_menu_item(model) if model is not None else None

    def max_order(self, category_id: CategoryId) -> int | None:
        statement = select(func.max(MenuItemModel.order)).where(
            MenuItemModel.category_id == str(category_id)
        )
        with Session(self._engine) as session:
            return session.execute(statement).scalar_one_or_none()

    def update(self, item_id: MenuItemId, changes: dict[str, Any]) -> MenuItem:
        unknown = set(changes) - _UPDATABLE_COLUMNS
        if unknown:
            raise ValueError(f"unsupported menu item fields: {sorted(unknown)}")

        with Session(self._engine) as session:
            model = session.get(MenuItemModel, str(item_id))
            if model is None:
                raise RecordNotFoundError(f"menu item not found: {item_id}")
            for name, value in changes.items():
                setattr(model, name, value)
            session.flush()
            updated = to_menu_item(model)
            session.commit()
            return updated

    def delete(self, item_id: MenuItemId) -> None:
        with Session(self._engine) as session:
            model = session.get(MenuItemModel, str(item_id))
            if model is None:
                return
            session.delete(model)
            session.commit()

    def reorder(self, user_id: UserId, item_ids: list[MenuItemId]) -> None:
        ids = [str(item_id) for item_id in item_ids]
        owned_statement = (
            select(MenuItemModel.id)
            .join(CategoryModel, MenuItemModel.category_id == CategoryModel.id)
            .join(RestaurantModel, CategoryModel.restaurant_id == RestaurantModel.id)
            .where(MenuItemModel.id.in_(ids), RestaurantModel.user_id == str(user_id))
        )
        with Session(self._engine) as session, session.begin():
            owned = set(session.execute(owned_statement).scalars().all())
            missing = [value for value in ids if value not in owned]
            if missing:
                raise RecordNotFoundError(f"menu item not found: {missing[0]}")
            for position, value in enumerate(ids):
                session.execute(
                    update(MenuItemModel).where(MenuItemModel.id == value).values(order=position)
                )

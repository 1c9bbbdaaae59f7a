from __future__ import annotations

from typing import Any

from sqlalchemy import Engine, func, select, update
from sqlalchemy.orm import Session

from qrmenu.application.ports.repositories import CategoryRepository, RecordNotFoundError
from qrmenu.domain.common.ids import CategoryId, RestaurantId, UserId
from qrmenu.domain.menu.entities import Category
from qrmenu.infrastructure.db.models.menu import CategoryModel, RestaurantModel
from qrmenu.infrastructure.db.repositories.converters import to_category
from qrmenu.infrastructure.db.session import get_engine

_UPDATABLE_COLUMNS = frozenset({"name", "description"})


class SqlAlchemyCategoryRepository(CategoryRepository):
    def __init__(self, engine: Engine | None = None) -> None:
        self._engine = engine or get_engine()

    def add(self, category: Category) -> Category:
        model = CategoryModel(
            id=str(category.category_id),
            restaurant_id=str(category.restaurant_id),
            name=category.name,
            description=category.description,
            order=category.order,
            created_at=category.created_at,
            updated_at=category.updated_at,
        )
        with Session(self._engine) as session:
            session.add(model)
            session.commit()
            return to_category(model)

    def get_owned(self, category_id: CategoryId, user_id: UserId) -> Category | None:
        statement = (
            select(CategoryModel)
            .join(RestaurantModel, CategoryModel.restaurant_id == RestaurantModel.id)
            .where(
                CategoryModel.id == str(category_id),
                RestaurantModel.user_id == str(user_id),
            )
        )
        with Session(self._engine) as session:
            model = session.execute(statement).scalar_one_or_none()
            return to_category(model) if model is not None else None

    def max_order(self, restaurant_id: RestaurantId) -> int | None:
        statement = select(func.max(CategoryModel.order)).where(
            CategoryModel.restaurant_id == str(restaurant_id)
        )
        with Session(self._engine) as session:
            return session.execute(statement).scalar_one_or_none()

    def update(self, category_id: CategoryId, changes: dict[str, Any]) -> Category:
        unknown = set(changes) - _UPDATABLE_COLUMNS
        if unknown:
            raise ValueError(f"unsupported category fields: {sorted(unknown)}")

        with Session(self._engine) as session:
            model = session.get(CategoryModel, str(category_id))
            if model is None:
                raise RecordNotFoundError(f"category not found: {category_id}")
            for name, value in changes.items():
                setattr(model, name, value)
            session.flush()
            updated = to_category(model)
            session.commit()
            return updated

    def delete(self, category_id: CategoryId) -> None:
        with Session(self._engine) as session:
            model = session.get(CategoryModel, str(category_id))
            if model is None:
                return
            session.delete(model)
            session.commit()

    def reorder(self, user_id: UserId, category_ids: list[CategoryId]) -> None:
        ids = [str(category_id) for category_id in category_ids]
        owned_statement = (
            select(CategoryModel.id)
            .join(RestaurantModel, CategoryModel.restaurant_id == RestaurantModel.id)
            .where(CategoryModel.id.in_(ids), RestaurantModel.user_id == str(user_id))
        )
        # one transaction: either every position is written or none is
        with Session(self._engine) as session, session.begin():
            owned = set(session.execute(owned_statement).scalars().all())
            missing = [value for value in ids if value not in owned]
            if missing:
                raise RecordNotFoundError(f"category not found: {missing[0]}")
            for position, value in enumerate(ids):
                session.execute(
                    update(CategoryModel).where(CategoryModel.id == value).values(order=position)
                )

from __future__ import annotations

from typing import Any

from sqlalchemy import Engine, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, selectinload

from qrmenu.application.ports.repositories import (
    DuplicateSlugError,
    RecordNotFoundError,
    RestaurantRepository,
)
from qrmenu.domain.common.ids import RestaurantId, UserId
from qrmenu.domain.menu.entities import Restaurant
from qrmenu.infrastructure.db.models.menu import CategoryModel, RestaurantModel
from qrmenu.infrastructure.db.repositories.converters import to_restaurant
from qrmenu.infrastructure.db.session import get_engine

_UPDATABLE_COLUMNS = frozenset(
    {"name", "slug", "description", "address", "phone", "primary_color"}
)


def _with_tree():
    return selectinload(RestaurantModel.categories).selectinload(CategoryModel.items)


class SqlAlchemyRestaurantRepository(RestaurantRepository):
    def __init__(self, engine: Engine | None = None) -> None:
        self._engine = engine or get_engine()

    def add(self, restaurant: Restaurant) -> Restaurant:
        model = RestaurantModel(
            id=str(restaurant.restaurant_id),
            user_id=str(restaurant.user_id),
            name=restaurant.name,
            slug=restaurant.slug,
            description=restaurant.description,
            address=restaurant.address,
            phone=restaurant.phone,
            primary_color=restaurant.primary_color,
            created_at=restaurant.created_at,
            updated_at=restaurant.updated_at,
        )
        with Session(self._engine) as session:
            session.add(model)
            try:
                session.commit()
            except IntegrityError as exc:
                session.rollback()
                raise DuplicateSlugError(f"slug already in use: {restaurant.slug}") from exc
            return to_restaurant(model)

    def get_owned(self, restaurant_id: RestaurantId, user_id: UserId) -> Restaurant | None:
        statement = select(RestaurantModel).where(
            RestaurantModel.id == str(restaurant_id),
            RestaurantModel.user_id == str(user_id),
        )
        with Session(self._engine) as session:
            model = session.execute(statement).scalar_one_or_none()
            return to_restaurant(model) if model is not None else None

    def get_owned_tree(
        self,
        restaurant_id: RestaurantId,
        user_id: UserId,
    ) -> Restaurant | None:
        statement = (
            select(RestaurantModel)
            .options(_with_tree())
            .where(
                RestaurantModel.id == str(restaurant_id),
                RestaurantModel.user_id == str(user_id),
            )
        )
        with Session(self._engine) as session:
            model = session.execute(statement).scalar_one_or_none()
            return to_restaurant(model, include_tree=True) if model is not None else None

    def list_for_user(self, user_id: UserId) -> list[Restaurant]:
        statement = (
            select(RestaurantModel)
            .options(_with_tree())
            .where(RestaurantModel.user_id == str(user_id))
            .order_by(RestaurantModel.created_at.desc(), RestaurantModel.id.desc())
        )
        with Session(self._engine) as session:
            models = session.execute(statement).scalars().all()
            return [to_restaurant(model, include_tree=True) for model in models]

    def get_by_slug(self, slug: str) -> Restaurant | None:
        statement = (
            select(RestaurantModel).options(_with_tree()).where(RestaurantModel.slug == slug)
        )
        with Session(self._engine) as session:
            model = session.execute(statement).scalar_one_or_none()
            return to_restaurant(model, include_tree=True) if model is not None else None

    def slug_exists(self, slug: str, exclude_id: RestaurantId | None = None) -> bool:
        statement = select(RestaurantModel.id).where(RestaurantModel.slug == slug)
        if exclude_id is not None:
            statement = statement.where(RestaurantModel.id != str(exclude_id))
        with Session(self._engine) as session:
            return session.execute(statement.limit(1)).scalar_one_or_none() is not None

    def update(self, restaurant_id: RestaurantId, changes: dict[str, Any]) -> Restaurant:
        unknown = set(changes) - _UPDATABLE_COLUMNS
        if unknown:
            raise ValueError(f"unsupported restaurant fields: {sorted(unknown)}")

        with Session(self._engine) as session:
            model = session.get(RestaurantModel, str(restaurant_id))
            if model is None:
                raise RecordNotFoundError(f"restaurant not found: {restaurant_id}")
            for name, value in changes.items():
                setattr(model, name, value)
            try:
                session.flush()
            except IntegrityError as exc:
                session.rollback()
                raise DuplicateSlugError(f"slug already in use: {changes.get('slug')}") from exc
            # convert before commit so a row the domain rejects is rolled back
            updated = to_restaurant(model)
            session.commit()
            return updated

    def delete(self, restaurant_id: RestaurantId) -> None:
        with Session(self._engine) as session:
            model = session.get(RestaurantModel, str(restaurant_id))
            if model is None:
                return
            # ORM cascade removes categories and items on every backend
            session.delete(model)
            session.commit()

from __future__ import annotations

from qrmenu.application.dto.requests import (
    CreateCategoryRequest,
    ReorderCategoriesRequest,
    UpdateCategoryRequest,
)
from qrmenu.application.dto.responses import CategoryResponse, MessageResponse, ReorderResponse
from qrmenu.application.mappers.menu_mapper import to_category_response
from qrmenu.application.metrics.menu_activity import record_reorder
from qrmenu.application.ports.repositories import (
    CategoryRepository,
    RecordNotFoundError,
    RestaurantRepository,
)
from qrmenu.application.use_cases.context import AuthContext
from qrmenu.application.use_cases.restaurants import load_owned_restaurant
from qrmenu.domain.common.ids import CategoryId, RestaurantId, new_id
from qrmenu.domain.menu.entities import Category, next_position


class CategoryNotFoundError(Exception):
    pass


def load_owned_category(
    repository: CategoryRepository,
    auth: AuthContext,
    category_id: CategoryId,
) -> Category:
    category = repository.get_owned(category_id, auth.user_id)
    if category is None:
        raise CategoryNotFoundError(f"category not found: {category_id}")
    return category


class CreateCategory:
    def __init__(
        self,
        restaurant_repository: RestaurantRepository,
        category_repository: CategoryRepository,
    ) -> None:
        self._restaurant_repository = restaurant_repository
        self._category_repository = category_repository

    def execute(
        self,
        auth: AuthContext,
        restaurant_id: RestaurantId,
        request_dto: CreateCategoryRequest,
    ) -> CategoryResponse:
        load_owned_restaurant(self._restaurant_repository, auth, restaurant_id)

        category = Category(
            category_id=CategoryId(new_id("cat")),
            restaurant_id=restaurant_id,
            name=request_dto.name,
            description=request_dto.description or None,
            order=next_position(self._category_repository.max_order(restaurant_id)),
        )
        return to_category_response(self._category_repository.add(category))


class UpdateCategory:
    def __init__(self, category_repository: CategoryRepository) -> None:
        self._category_repository = category_repository

    def execute(
        self,
        auth: AuthContext,
        category_id: CategoryId,
        request_dto: UpdateCategoryRequest,
    ) -> CategoryResponse:
        current = load_owned_category(self._category_repository, auth, category_id)
        changes = request_dto.changes()
        if not changes:
            return to_category_response(current)
        if "description" in changes:
            changes["description"] = changes["description"] or None
        try:
            updated = self._category_repository.update(category_id, changes)
        except RecordNotFoundError as exc:
            raise CategoryNotFoundError(f"category not found: {category_id}") from exc
        return to_category_response(updated)


class DeleteCategory:
    def __init__(self, category_repository: CategoryRepository) -> None:
        self._category_repository = category_repository

    def execute(self, auth: AuthContext, category_id: CategoryId) -> MessageResponse:
        load_owned_category(self._category_repository, auth, category_id)
        self._category_repository.delete(category_id)
        return MessageResponse(message="category deleted")


class ReorderCategories:
    def __init__(self, category_repository: CategoryRepository) -> None:
        self._category_repository = category_repository

    def execute(self, auth: AuthContext, request_dto: ReorderCategoriesRequest) -> ReorderResponse:
        category_ids = [CategoryId(value) for value in request_dto.category_ids]
        try:
            self._category_repository.reorder(auth.user_id, category_ids)
        except RecordNotFoundError as exc:
            raise CategoryNotFoundError(str(exc)) from exc
        record_reorder("category")
        return ReorderResponse(success=True)

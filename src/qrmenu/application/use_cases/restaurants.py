from __future__ import annotations

import logging
import time
from typing import Any, Callable

from qrmenu.application.dto.requests import CreateRestaurantRequest, UpdateRestaurantRequest
from qrmenu.application.dto.responses import MessageResponse, RestaurantResponse
from qrmenu.application.mappers.menu_mapper import to_restaurant_response
from qrmenu.application.metrics.menu_activity import record_restaurant_created
from qrmenu.application.ports.repositories import (
    DuplicateSlugError,
    RecordNotFoundError,
    RestaurantRepository,
)
from qrmenu.application.use_cases.context import AuthContext
from qrmenu.domain.common.ids import RestaurantId, new_id
from qrmenu.domain.menu.entities import DEFAULT_PRIMARY_COLOR, Restaurant
from qrmenu.domain.menu.slug import base_slug, slugify, with_timestamp_suffix

logger = logging.getLogger(__name__)

_OPTIONAL_TEXT_FIELDS = ("description", "address", "phone")


class RestaurantNotFoundError(Exception):
    pass


class SlugAlreadyTakenError(Exception):
    pass


class InvalidSlugError(Exception):
    pass


def _blank_to_none(value: str | None) -> str | None:
    if value is None or not value.strip():
        return None
    return value


def _epoch_millis() -> int:
    return int(time.time() * 1000)


def load_owned_restaurant(
    repository: RestaurantRepository,
    auth: AuthContext,
    restaurant_id: RestaurantId,
    *,
    with_tree: bool = False,
) -> Restaurant:
    if with_tree:
        restaurant = repository.get_owned_tree(restaurant_id, auth.user_id)
    else:
        restaurant = repository.get_owned(restaurant_id, auth.user_id)
    if restaurant is None:
        raise RestaurantNotFoundError(f"restaurant not found: {restaurant_id}")
    return restaurant


class CreateRestaurant:
    def __init__(
        self,
        restaurant_repository: RestaurantRepository,
        clock_ms: Callable[[], int] = _epoch_millis,
    ) -> None:
        self._restaurant_repository = restaurant_repository
        self._clock_ms = clock_ms

    def execute(self, auth: AuthContext, request_dto: CreateRestaurantRequest) -> RestaurantResponse:
        slug = base_slug(request_dto.name)
        collided = self._restaurant_repository.slug_exists(slug)
        if collided:
            # best effort: a second collision surfaces as SlugAlreadyTakenError
            slug = with_timestamp_suffix(slug, now_ms=self._clock_ms())
            logger.info("slug_collision", extra={"user_id": str(auth.user_id), "slug": slug})

        restaurant = Restaurant(
            restaurant_id=RestaurantId(new_id("rst")),
            user_id=auth.user_id,
            name=request_dto.name,
            slug=slug,
            description=_blank_to_none(request_dto.description),
            address=_blank_to_none(request_dto.address),
            phone=_blank_to_none(request_dto.phone),
            primary_color=request_dto.primary_color or DEFAULT_PRIMARY_COLOR,
        )
        try:
            created = self._restaurant_repository.add(restaurant)
        except DuplicateSlugError as exc:
            raise SlugAlreadyTakenError(f"slug is already in use: {slug}") from exc

        record_restaurant_created(slug_collided=collided)
        logger.info(
            "restaurant_created",
            extra={
                "user_id": str(auth.user_id),
                "restaurant_id": str(created.restaurant_id),
                "slug": created.slug,
            },
        )
        return to_restaurant_response(created)


class ListRestaurants:
    def __init__(self, restaurant_repository: RestaurantRepository) -> None:
        self._restaurant_repository = restaurant_repository

    def execute(self, auth: AuthContext) -> list[RestaurantResponse]:
        restaurants = self._restaurant_repository.list_for_user(auth.user_id)
        return [to_restaurant_response(restaurant) for restaurant in restaurants]


class GetRestaurant:
    def __init__(self, restaurant_repository: RestaurantRepository) -> None:
        self._restaurant_repository = restaurant_repository

    def execute(self, auth: AuthContext, restaurant_id: RestaurantId) -> RestaurantResponse:
        restaurant = load_owned_restaurant(
            self._restaurant_repository, auth, restaurant_id, with_tree=True
        )
        return to_restaurant_response(restaurant)


class UpdateRestaurant:
    def __init__(self, restaurant_repository: RestaurantRepository) -> None:
        self._restaurant_repository = restaurant_repository

    def execute(
        self,
        auth: AuthContext,
        restaurant_id: RestaurantId,
        request_dto: UpdateRestaurantRequest,
    ) -> RestaurantResponse:
        current = load_owned_restaurant(self._restaurant_repository, auth, restaurant_id)

        changes = self._normalize(restaurant_id, request_dto.changes())
        if not changes:
            return to_restaurant_response(current)

        try:
            updated = self._restaurant_repository.update(restaurant_id, changes)
        except DuplicateSlugError as exc:
            raise SlugAlreadyTakenError(f"slug is already in use: {changes['slug']}") from exc
        except RecordNotFoundError as exc:
            raise RestaurantNotFoundError(f"restaurant not found: {restaurant_id}") from exc
        return to_restaurant_response(updated)

    def _normalize(self, restaurant_id: RestaurantId, changes: dict[str, Any]) -> dict[str, Any]:
        for name in _OPTIONAL_TEXT_FIELDS:
            if name in changes:
                changes[name] = _blank_to_none(changes[name])

        if "slug" in changes:
            slug = slugify(changes["slug"])
            if not slug:
                raise InvalidSlugError("slug must contain at least one letter or digit")
            # no suffixing here; the owner asked for this exact address
            if self._restaurant_repository.slug_exists(slug, exclude_id=restaurant_id):
                raise SlugAlreadyTakenError(f"slug is already in use: {slug}")
            changes["slug"] = slug
        return changes


class DeleteRestaurant:
    def __init__(self, restaurant_repository: RestaurantRepository) -> None:
        self._restaurant_repository = restaurant_repository

    def execute(self, auth: AuthContext, restaurant_id: RestaurantId) -> MessageResponse:
        load_owned_restaurant(self._restaurant_repository, auth, restaurant_id)
        self._restaurant_repository.delete(restaurant_id)
        logger.info(
            "restaurant_deleted",
            extra={"user_id": str(auth.user_id), "restaurant_id": str(restaurant_id)},
        )
        return MessageResponse(message="restaurant deleted")

from __future__ import annotations

from qrmenu.application.dto.responses import PublicMenuResponse
from qrmenu.application.mappers.menu_mapper import to_public_menu_response
from qrmenu.application.metrics.menu_activity import record_public_menu_view
from qrmenu.application.ports.repositories import RestaurantRepository


class MenuNotFoundError(Exception):
    pass


class GetPublicMenu:
    def __init__(self, restaurant_repository: RestaurantRepository) -> None:
        self._restaurant_repository = restaurant_repository

    def execute(self, slug: str) -> PublicMenuResponse:
        restaurant = self._restaurant_repository.get_by_slug(slug)
        if restaurant is None:
            record_public_menu_view("not_found")
            raise MenuNotFoundError(f"menu not found for slug={slug}")

        record_public_menu_view("served")
        return to_public_menu_response(restaurant)

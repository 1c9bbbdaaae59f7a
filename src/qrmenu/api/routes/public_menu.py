from __future__ import annotations

from fastapi import APIRouter, Depends

from qrmenu.api.dependencies import get_restaurant_repository
from qrmenu.application.dto.responses import PublicMenuResponse
from qrmenu.application.ports.repositories import RestaurantRepository
from qrmenu.application.use_cases.public_menu import GetPublicMenu

router = APIRouter(tags=["public"])


@router.get("/menu/{slug}", response_model=PublicMenuResponse)
def get_public_menu(
    slug: str,
    restaurants: RestaurantRepository = Depends(get_restaurant_repository),
) -> PublicMenuResponse:
    return GetPublicMenu(restaurants).execute(slug)

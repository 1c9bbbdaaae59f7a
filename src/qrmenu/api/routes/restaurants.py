from __future__ import annotations

from fastapi import APIRouter, Depends, Query, Response

from qrmenu.api.dependencies import (
    get_category_repository,
    get_qr_renderer,
    get_restaurant_repository,
    public_base_url,
    require_auth,
)
from qrmenu.application.dto.requests import (
    CreateCategoryRequest,
    CreateRestaurantRequest,
    UpdateRestaurantRequest,
)
from qrmenu.application.dto.responses import (
    CategoryResponse,
    MenuLinkResponse,
    MessageResponse,
    RestaurantResponse,
)
from qrmenu.application.ports.qr import QrRenderer
from qrmenu.application.ports.repositories import CategoryRepository, RestaurantRepository
from qrmenu.application.use_cases.categories import CreateCategory
from qrmenu.application.use_cases.context import AuthContext
from qrmenu.application.use_cases.qr_code import GetMenuLink, RenderMenuQrCode
from qrmenu.application.use_cases.restaurants import (
    CreateRestaurant,
    DeleteRestaurant,
    GetRestaurant,
    ListRestaurants,
    UpdateRestaurant,
)
from qrmenu.domain.common.ids import RestaurantId

router = APIRouter(prefix="/api/restaurants", tags=["restaurants"])


@router.post("", response_model=RestaurantResponse)
def create_restaurant(
    request_dto: CreateRestaurantRequest,
    auth: AuthContext = Depends(require_auth),
    restaurants: RestaurantRepository = Depends(get_restaurant_repository),
) -> RestaurantResponse:
    return CreateRestaurant(restaurants).execute(auth, request_dto)


@router.get("", response_model=list[RestaurantResponse])
def list_restaurants(
    auth: AuthContext = Depends(require_auth),
    restaurants: RestaurantRepository = Depends(get_restaurant_repository),
) -> list[RestaurantResponse]:
    return ListRestaurants(restaurants).execute(auth)


@router.get("/{restaurant_id}", response_model=RestaurantResponse)
def get_restaurant(
    restaurant_id: str,
    auth: AuthContext = Depends(require_auth),
    restaurants: RestaurantRepository = Depends(get_restaurant_repository),
) -> RestaurantResponse:
    return GetRestaurant(restaurants).execute(auth, RestaurantId(restaurant_id))


@router.patch("/{restaurant_id}", response_model=RestaurantResponse)
def update_restaurant(
    restaurant_id: str,
    request_dto: UpdateRestaurantRequest,
    auth: AuthContext = Depends(require_auth),
    restaurants: RestaurantRepository = Depends(get_restaurant_repository),
) -> RestaurantResponse:
    return UpdateRestaurant(restaurants).execute(auth, RestaurantId(restaurant_id), request_dto)


@router.delete("/{restaurant_id}", response_model=MessageResponse)
def delete_restaurant(
    restaurant_id: str,
    auth: AuthContext = Depends(require_auth),
    restaurants: RestaurantRepository = Depends(get_restaurant_repository),
) -> MessageResponse:
    return DeleteRestaurant(restaurants).execute(auth, RestaurantId(restaurant_id))


@router.post("/{restaurant_id}/categories", response_model=CategoryResponse)
def create_category(
    restaurant_id: str,
    request_dto: CreateCategoryRequest,
    auth: AuthContext = Depends(require_auth),
    restaurants: RestaurantRepository = Depends(get_restaurant_repository),
    categories: CategoryRepository = Depends(get_category_repository),
) -> CategoryResponse:
    return CreateCategory(
        restaurant_repository=restaurants,
        category_repository=categories,
    ).execute(auth, RestaurantId(restaurant_id), request_dto)


@router.get("/{restaurant_id}/link", response_model=MenuLinkResponse)
def get_menu_link(
    restaurant_id: str,
    auth: AuthContext = Depends(require_auth),
    restaurants: RestaurantRepository = Depends(get_restaurant_repository),
) -> MenuLinkResponse:
    return GetMenuLink(restaurants, public_base_url()).execute(auth, RestaurantId(restaurant_id))


@router.get("/{restaurant_id}/qr")
def get_menu_qr_code(
    restaurant_id: str,
    image_format: str = Query(default="png", alias="format"),
    theme: bool = False,
    download: bool = False,
    auth: AuthContext = Depends(require_auth),
    restaurants: RestaurantRepository = Depends(get_restaurant_repository),
    renderer: QrRenderer = Depends(get_qr_renderer),
) -> Response:
    image = RenderMenuQrCode(
        restaurant_repository=restaurants,
        renderer=renderer,
        public_base_url=public_base_url(),
    ).execute(auth, RestaurantId(restaurant_id), image_format=image_format, use_theme=theme)

    disposition = "attachment" if download else "inline"
    return Response(
        content=image.content,
        media_type=image.media_type,
        headers={
            "Content-Disposition": f'{disposition}; filename="{image.filename}"',
            "Cache-Control": "no-store",
            "X-Menu-Url": image.menu_url,
        },
    )

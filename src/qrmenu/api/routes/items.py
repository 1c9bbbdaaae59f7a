from __future__ import annotations

from fastapi import APIRouter, Depends

from qrmenu.api.dependencies import get_menu_item_repository, require_auth
from qrmenu.application.dto.requests import ReorderMenuItemsRequest, UpdateMenuItemRequest
from qrmenu.application.dto.responses import MenuItemResponse, MessageResponse, ReorderResponse
from qrmenu.application.ports.repositories import MenuItemRepository
from qrmenu.application.use_cases.context import AuthContext
from qrmenu.application.use_cases.menu_items import (
    DeleteMenuItem,
    ReorderMenuItems,
    UpdateMenuItem,
)
from qrmenu.domain.common.ids import MenuItemId

router = APIRouter(prefix="/api/items", tags=["items"])


@router.put("/reorder", response_model=ReorderResponse)
def reorder_menu_items(
    request_dto: ReorderMenuItemsRequest,
    auth: AuthContext = Depends(require_auth),
    items: MenuItemRepository = Depends(get_menu_item_repository),
) -> ReorderResponse:
    return ReorderMenuItems(items).execute(auth, request_dto)


@router.api_route("/{item_id}", methods=["PUT", "PATCH"], response_model=MenuItemResponse)
def update_menu_item(
    item_id: str,
    request_dto: UpdateMenuItemRequest,
    auth: AuthContext = Depends(require_auth),
    items: MenuItemRepository = Depends(get_menu_item_repository),
) -> MenuItemResponse:
    return UpdateMenuItem(items).execute(auth, MenuItemId(item_id), request_dto)


@router.delete("/{item_id}", response_model=MessageResponse)
def delete_menu_item(
    item_id: str,
    auth: AuthContext = Depends(require_auth),
    items: MenuItemRepository = Depends(get_menu_item_repository),
) -> MessageResponse:
    return DeleteMenuItem(items).execute(auth, MenuItemId(item_id))

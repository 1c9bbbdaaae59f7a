from __future__ import annotations

from qrmenu.application.dto.requests import (
    CreateMenuItemRequest,
    ReorderMenuItemsRequest,
    UpdateMenuItemRequest,
)
from qrmenu.application.dto.responses import MenuItemResponse, MessageResponse, ReorderResponse
from qrmenu.application.mappers.menu_mapper import to_menu_item_response
from qrmenu.application.metrics.menu_activity import record_reorder
from qrmenu.application.ports.repositories import (
    CategoryRepository,
    MenuItemRepository,
    RecordNotFoundError,
)
from qrmenu.application.use_cases.categories import load_owned_category
from qrmenu.application.use_cases.context import AuthContext
from qrmenu.domain.common.ids import CategoryId, MenuItemId, new_id
from qrmenu.domain.common.money import Price
from qrmenu.domain.menu.entities import MenuItem, next_position


class MenuItemNotFoundError(Exception):
    pass


def _load_owned_item(
    repository: MenuItemRepository,
    auth: AuthContext,
    item_id: MenuItemId,
) -> MenuItem:
    item = repository.get_owned(item_id, auth.user_id)
    if item is None:
        raise MenuItemNotFoundError(f"menu item not found: {item_id}")
    return item


class CreateMenuItem:
    def __init__(
        self,
        category_repository: CategoryRepository,
        item_repository: MenuItemRepository,
    ) -> None:
        self._category_repository = category_repository
        self._item_repository = item_repository

    def execute(
        self,
        auth: AuthContext,
        category_id: CategoryId,
        request_dto: CreateMenuItemRequest,
    ) -> MenuItemResponse:
        load_owned_category(self._category_repository, auth, category_id)

        item = MenuItem(
            item_id=MenuItemId(new_id("itm")),
            category_id=category_id,
            name=request_dto.name,
            description=request_dto.description or None,
            price=Price(request_dto.price),
            image=request_dto.image or None,
            is_available=request_dto.is_available,
            order=next_position(self._item_repository.max_order(category_id)),
        )
        return to_menu_item_response(self._item_repository.add(item))


class UpdateMenuItem:
    def __init__(self, item_repository: MenuItemRepository) -> None:
        self._item_repository = item_repository

    def execute(
        self,
        auth: AuthContext,
        item_id: MenuItemId,
        request_dto: UpdateMenuItemRequest,
    ) -> MenuItemResponse:
        current = _load_owned_item(self._item_repository, auth, item_id)
        changes = request_dto.changes()
        if not changes:
            return to_menu_item_response(current)
        for name in ("description", "image"):
            if name in changes:
                changes[name] = changes[name] or None
        if "price" in changes:
            changes["price"] = Price(changes["price"]).amount
        try:
            updated = self._item_repository.update(item_id, changes)
        except RecordNotFoundError as exc:
            raise MenuItemNotFoundError(f"menu item not found: {item_id}") from exc
        return to_menu_item_response(updated)


class DeleteMenuItem:
    def __init__(self, item_repository: MenuItemRepository) -> None:
        self._item_repository = item_repository

    def execute(self, auth: AuthContext, item_id: MenuItemId) -> MessageResponse:
        _load_owned_item(self._item_repository, auth, item_id)
        self._item_repository.delete(item_id)
        return MessageResponse(message="menu item deleted")


class ReorderMenuItems:
    def __init__(self, item_repository: MenuItemRepository) -> None:
        self._item_repository = item_repository

    def execute(self, auth: AuthContext, request_dto: ReorderMenuItemsRequest) -> ReorderResponse:
        item_ids = [MenuItemId(value) for value in request_dto.item_ids]
        try:
            self._item_repository.reorder(auth.user_id, item_ids)
        except RecordNotFoundError as exc:
            raise MenuItemNotFoundError(str(exc)) from exc
        record_reorder("item")
        return ReorderResponse(success=True)

from __future__ import annotations

from fastapi import APIRouter, Depends

from qrmenu.api.dependencies import (
    get_category_repository,
    get_menu_item_repository,
    require_auth,
)
from qrmenu.application.dto.requests import (
    CreateMenuItemRequest,
    ReorderCategoriesRequest,
    UpdateCategoryRequest,
)
from qrmenu.application.dto.responses import (
    CategoryResponse,
    MenuItemResponse,
    MessageResponse,
    ReorderResponse,
)
from qrmenu.application.ports.repositories import CategoryRepository, MenuItemRepository
from qrmenu.application.use_cases.categories import (
    DeleteCategory,
    ReorderCategories,
    UpdateCategory,
)
from qrmenu.application.use_cases.context import AuthContext
from qrmenu.application.use_cases.menu_items import CreateMenuItem
from qrmenu.domain.common.ids import CategoryId

router = APIRouter(prefix="/api/categories", tags=["categories"])


# declared before "/{category_id}" so "reorder" is never taken for an id
@router.put("/reorder", response_model=ReorderResponse)
def reorder_categories(
    request_dto: ReorderCategoriesRequest,
    auth: AuthContext = Depends(require_auth),
    categories: CategoryRepository = Depends(get_category_repository),
) -> ReorderResponse:
    return ReorderCategories(categories).execute(auth, request_dto)


@router.patch("/{category_id}", response_model=CategoryResponse)
def update_category(
    category_id: str,
    request_dto: UpdateCategoryRequest,
    auth: AuthContext = Depends(require_auth),
    categories: CategoryRepository = Depends(get_category_repository),
) -> CategoryResponse:
    return UpdateCategory(categories).execute(auth, CategoryId(category_id), request_dto)


@router.delete("/{category_id}", response_model=MessageResponse)
def delete_category(
    category_id: str,
    auth: AuthContext = Depends(require_auth),
    categories: CategoryRepository = Depends(get_category_repository),
) -> MessageResponse:
    return DeleteCategory(categories).execute(auth, CategoryId(category_id))


@router.post("/{category_id}/items", response_model=MenuItemResponse)
def create_menu_item(
    category_id: str,
    request_dto: CreateMenuItemRequest,
    auth: AuthContext = Depends(require_auth),
    categories: CategoryRepository = Depends(get_category_repository),
    items: MenuItemRepository = Depends(get_menu_item_repository),
) -> MenuItemResponse:
    return CreateMenuItem(
        category_repository=categories,
        item_repository=items,
    ).execute(auth, CategoryId(category_id), request_dto)

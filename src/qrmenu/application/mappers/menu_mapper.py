from __future__ import annotations

from qrmenu.application.dto.responses import (
    CategoryResponse,
    MenuItemResponse,
    PublicCategoryResponse,
    PublicMenuItemResponse,
    PublicMenuResponse,
    RestaurantResponse,
)
from qrmenu.domain.menu.entities import Category, MenuItem, Restaurant


def to_menu_item_response(item: MenuItem) -> MenuItemResponse:
    return MenuItemResponse(
        id=str(item.item_id),
        categoryId=str(item.category_id),
        name=item.name,
        description=item.description,
        price=item.price.as_float(),
        image=item.image,
        isAvailable=item.is_available,
        order=item.order,
        createdAt=item.created_at,
        updatedAt=item.updated_at,
    )


def to_category_response(category: Category) -> CategoryResponse:
    return CategoryResponse(
        id=str(category.category_id),
        restaurantId=str(category.restaurant_id),
        name=category.name,
        description=category.description,
        order=category.order,
        items=[to_menu_item_response(item) for item in category.items],
        createdAt=category.created_at,
        updatedAt=category.updated_at,
    )


def to_restaurant_response(restaurant: Restaurant) -> RestaurantResponse:
    return RestaurantResponse(
        id=str(restaurant.restaurant_id),
        userId=str(restaurant.user_id),
        name=restaurant.name,
        slug=restaurant.slug,
        description=restaurant.description,
        address=restaurant.address,
        phone=restaurant.phone,
        primaryColor=restaurant.primary_color,
        categories=[to_category_response(category) for category in restaurant.categories],
        createdAt=restaurant.created_at,
        updatedAt=restaurant.updated_at,
    )


def to_public_menu_response(restaurant: Restaurant) -> PublicMenuResponse:
    visible = restaurant.public_view()
    categories = [
        PublicCategoryResponse(
            id=str(category.category_id),
            name=category.name,
            description=category.description,
            items=[
                PublicMenuItemResponse(
                    id=str(item.item_id),
                    name=item.name,
                    description=item.description,
                    price=item.price.as_float(),
                    image=item.image,
                )
                for item in category.items
            ],
        )
        for category in visible.categories
    ]
    return PublicMenuResponse(
        name=visible.name,
        slug=visible.slug,
        description=visible.description,
        address=visible.address,
        phone=visible.phone,
        primaryColor=visible.primary_color,
        hasItems=visible.has_visible_items(),
        categories=categories,
    )

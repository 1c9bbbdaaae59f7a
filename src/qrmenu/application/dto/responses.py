from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field


class UserResponse(BaseModel):
    id: str
    email: str
    name: str


class RegisterResponse(BaseModel):
    message: str
    user: UserResponse


class SessionResponse(BaseModel):
    user: UserResponse


class MessageResponse(BaseModel):
    message: str


class ReorderResponse(BaseModel):
    success: bool = True


class MenuItemResponse(BaseModel):
    id: str
    categoryId: str
    name: str
    description: str | None = None
    price: float
    image: str | None = None
    isAvailable: bool
    order: int
    createdAt: datetime
    updatedAt: datetime


class CategoryResponse(BaseModel):
    id: str
    restaurantId: str
    name: str
    description: str | None = None
    order: int
    items: list[MenuItemResponse] = Field(default_factory=list)
    createdAt: datetime
    updatedAt: datetime


class RestaurantResponse(BaseModel):
    id: str
    userId: str
    name: str
    slug: str
    description: str | None = None
    address: str | None = None
    phone: str | None = None
    primaryColor: str
    categories: list[CategoryResponse] = Field(default_factory=list)
    createdAt: datetime
    updatedAt: datetime


class PublicMenuItemResponse(BaseModel):
    id: str
    name: str
    description: str | None = None
    price: float
    image: str | None = None


class PublicCategoryResponse(BaseModel):
    id: str
    name: str
    description: str | None = None
    items: list[PublicMenuItemResponse] = Field(default_factory=list)


class PublicMenuResponse(BaseModel):
    name: str
    slug: str
    description: str | None = None
    address: str | None = None
    phone: str | None = None
    primaryColor: str
    hasItems: bool
    categories: list[PublicCategoryResponse] = Field(default_factory=list)


class MenuLinkResponse(BaseModel):
    url: str


class UploadResponse(BaseModel):
    url: str

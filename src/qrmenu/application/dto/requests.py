from __future__ import annotations

from decimal import Decimal
from typing import Annotated, Any, ClassVar

from pydantic import (
    BaseModel,
    ConfigDict,
    EmailStr,
    Field,
    StringConstraints,
    field_validator,
    model_validator,
)

HEX_COLOR_PATTERN = r"^#(?:[0-9a-fA-F]{3}|[0-9a-fA-F]{6})$"

# surrounding whitespace is dropped before the length check
NonBlankName = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]
TwoCharName = Annotated[str, StringConstraints(strip_whitespace=True, min_length=2)]


def _to_camel(value: str) -> str:
    parts = value.split("_")
    return parts[0] + "".join(part.capitalize() for part in parts[1:])


class CamelBaseModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=_to_camel,
        populate_by_name=True,
    )


class PartialUpdateModel(CamelBaseModel):
    """Update body where only the fields actually sent are applied.

    A field explicitly sent as ``null`` clears a nullable column; fields listed
    in ``non_nullable`` may be omitted but never nulled.
    """

    non_nullable: ClassVar[frozenset[str]] = frozenset()

    @model_validator(mode="after")
    def reject_null_for_required_columns(self) -> PartialUpdateModel:
        for name in self.model_fields_set & self.non_nullable:
            if getattr(self, name) is None:
                raise ValueError(f"{_to_camel(name)} may not be null")
        return self

    def changes(self) -> dict[str, Any]:
        return self.model_dump(include=self.model_fields_set)


class RegisterRequest(CamelBaseModel):
    name: TwoCharName
    email: EmailStr
    password: str = Field(min_length=6)


class LoginRequest(CamelBaseModel):
    email: EmailStr
    password: str = Field(min_length=1)


class CreateRestaurantRequest(CamelBaseModel):
    name: TwoCharName
    description: str | None = None
    address: str | None = None
    phone: str | None = None
    primary_color: str | None = Field(default=None, pattern=HEX_COLOR_PATTERN)

    @field_validator("primary_color", mode="before")
    @classmethod
    def blank_color_is_default(cls, value: object) -> object:
        if value == "":
            return None
        return value


class UpdateRestaurantRequest(PartialUpdateModel):
    non_nullable: ClassVar[frozenset[str]] = frozenset({"name", "primary_color", "slug"})

    name: TwoCharName | None = None
    description: str | None = None
    address: str | None = None
    phone: str | None = None
    primary_color: str | None = Field(default=None, pattern=HEX_COLOR_PATTERN)
    slug: str | None = None


class CreateCategoryRequest(CamelBaseModel):
    name: NonBlankName
    description: str | None = None


class UpdateCategoryRequest(PartialUpdateModel):
    non_nullable: ClassVar[frozenset[str]] = frozenset({"name"})

    name: NonBlankName | None = None
    description: str | None = None


class CreateMenuItemRequest(CamelBaseModel):
    name: NonBlankName
    description: str | None = None
    price: Decimal = Field(ge=0, max_digits=10, decimal_places=2)
    image: str | None = None
    is_available: bool = True


class UpdateMenuItemRequest(PartialUpdateModel):
    non_nullable: ClassVar[frozenset[str]] = frozenset({"name", "price", "is_available"})

    name: NonBlankName | None = None
    description: str | None = None
    price: Decimal | None = Field(default=None, ge=0, max_digits=10, decimal_places=2)
    image: str | None = None
    is_available: bool | None = None


def _ensure_unique(ids: list[str]) -> list[str]:
    if len(set(ids)) != len(ids):
        raise ValueError("ids must be unique")
    return ids


class ReorderCategoriesRequest(CamelBaseModel):
    category_ids: list[str] = Field(min_length=1)

    @field_validator("category_ids")
    @classmethod
    def check_unique_ids(cls, value: list[str]) -> list[str]:
        return _ensure_unique(value)


class ReorderMenuItemsRequest(CamelBaseModel):
    item_ids: list[str] = Field(min_length=1)

    @field_validator("item_ids")
    @classmethod
    def check_unique_ids(cls, value: list[str]) -> list[str]:
        return _ensure_unique(value)

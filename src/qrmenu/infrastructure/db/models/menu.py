from __future__ import annotations

from decimal import Decimal

from sqlalchemy import Boolean, ForeignKey, Integer, Numeric, String, Text, text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from qrmenu.infrastructure.db.models.base import Base, TimestampMixin


class RestaurantModel(TimestampMixin, Base):
    __tablename__ = "restaurants"

    id: Mapped[str] = mapped_column(String(50), primary_key=True)
    user_id: Mapped[str] = mapped_column(
        String(50),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    slug: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    address: Mapped[str | None] = mapped_column(String(500), nullable=True)
    phone: Mapped[str | None] = mapped_column(String(50), nullable=True)
    primary_color: Mapped[str] = mapped_column(
        String(7),
        nullable=False,
        server_default="#f97316",
    )

    categories: Mapped[list["CategoryModel"]] = relationship(
        back_populates="restaurant",
        cascade="all, delete-orphan",
        order_by=lambda: (CategoryModel.order, CategoryModel.created_at),
    )


class CategoryModel(TimestampMixin, Base):
    __tablename__ = "categories"

    id: Mapped[str] = mapped_column(String(50), primary_key=True)
    restaurant_id: Mapped[str] = mapped_column(
        String(50),
        ForeignKey("restaurants.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    order: Mapped[int] = mapped_column(Integer, nullable=False, default=0, server_default="0")

    restaurant: Mapped[RestaurantModel] = relationship(back_populates="categories")
    items: Mapped[list["MenuItemModel"]] = relationship(
        back_populates="category",
        cascade="all, delete-orphan",
        order_by=lambda: (MenuItemModel.order, MenuItemModel.created_at),
    )


class MenuItemModel(TimestampMixin, Base):
    __tablename__ = "menu_items"

    id: Mapped[str] = mapped_column(String(50), primary_key=True)
    category_id: Mapped[str] = mapped_column(
        String(50),
        ForeignKey("categories.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    price: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    image: Mapped[str | None] = mapped_column(String(1000), nullable=True)
    is_available: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=True,
        server_default=text("true"),
    )
    order: Mapped[int] = mapped_column(Integer, nullable=False, default=0, server_default="0")

    category: Mapped[CategoryModel] = relationship(back_populates="items")

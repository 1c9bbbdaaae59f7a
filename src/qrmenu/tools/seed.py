from __future__ import annotations

import os
from decimal import Decimal

from sqlalchemy import inspect
from sqlalchemy.dialects.postgresql import insert
from sqlalchemy.orm import Session

from qrmenu.infrastructure.db.models.menu import CategoryModel, MenuItemModel, RestaurantModel
from qrmenu.infrastructure.db.models.user import UserModel
from qrmenu.infrastructure.db.session import get_engine
from qrmenu.infrastructure.security.passwords import Argon2PasswordHasher

DEMO_EMAIL = "demo@qrmenu.local"
DEMO_PASSWORD_ENV = "SEED_DEMO_PASSWORD"

CATEGORIES = [
    {"id": "cat_demo_mains", "name": "Mains", "description": "Straight from the grill", "order": 0},
    {"id": "cat_demo_drinks", "name": "Drinks", "description": None, "order": 1},
]

ITEMS = [
    {
        "id": "itm_demo_kofte",
        "category_id": "cat_demo_mains",
        "name": "Köfte",
        "description": "Grilled meatballs, bulgur, salad",
        "price": Decimal("12.50"),
        "is_available": True,
        "order": 0,
    },
    {
        "id": "itm_demo_lahmacun",
        "category_id": "cat_demo_mains",
        "name": "Lahmacun",
        "description": "Thin flatbread, spiced minced lamb",
        "price": Decimal("8.00"),
        "is_available": True,
        "order": 1,
    },
    {
        "id": "itm_demo_ayran",
        "category_id": "cat_demo_drinks",
        "name": "Ayran",
        "description": None,
        "price": Decimal("2.50"),
        "is_available": True,
        "order": 0,
    },
    {
        "id": "itm_demo_salep",
        "category_id": "cat_demo_drinks",
        "name": "Salep",
        "description": "Winter only",
        "price": Decimal("4.00"),
        "is_available": False,
        "order": 1,
    },
]


def _upsert(session: Session, model: type, values: dict[str, object]) -> None:
    updates = {key: value for key, value in values.items() if key != "id"}
    session.execute(
        insert(model)
        .values(**values)
        .on_conflict_do_update(index_elements=[model.id], set_=updates)
    )


def main() -> None:
    engine = get_engine(timeout_seconds=2.0)
    inspector = inspect(engine)
    required_tables = {"users", "restaurants", "categories", "menu_items"}
    if not required_tables.issubset(set(inspector.get_table_names(schema="public"))):
        print("no schema yet")
        return

    password = os.getenv(DEMO_PASSWORD_ENV, "demo-password")
    password_hash = Argon2PasswordHasher().hash(password)

    with Session(engine) as session:
        _upsert(
            session,
            UserModel,
            {
                "id": "usr_demo",
                "email": DEMO_EMAIL,
                "name": "Demo Owner",
                "password_hash": password_hash,
            },
        )
        _upsert(
            session,
            RestaurantModel,
            {
                "id": "rst_demo",
                "user_id": "usr_demo",
                "name": "Cafe Milano",
                "slug": "cafe-milano",
                "description": "Neighbourhood grill and tea house",
                "address": "Istiklal Cd. 12, Istanbul",
                "phone": "+90 212 000 00 00",
                "primary_color": "#f97316",
            },
        )
        for category in CATEGORIES:
            _upsert(session, CategoryModel, {**category, "restaurant_id": "rst_demo"})
        for item in ITEMS:
            _upsert(session, MenuItemModel, item)

        session.commit()
        print(f"seed complete: log in as {DEMO_EMAIL}, menu at /menu/cafe-milano")


if __name__ == "__main__":
    main()

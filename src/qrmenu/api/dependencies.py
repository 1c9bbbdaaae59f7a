"""FastAPI dependency providers.

Every route gets its repositories, session store and external adapters from
here, so tests can swap any of them through ``app.dependency_overrides``.
"""

from __future__ import annotations

import os

from fastapi import Depends, Request
from sqlalchemy.engine import Engine

from qrmenu.application.ports.qr import QrRenderer
from qrmenu.application.ports.repositories import (
    CategoryRepository,
    MenuItemRepository,
    RestaurantRepository,
    UserRepository,
)
from qrmenu.application.ports.security import PasswordHasher
from qrmenu.application.ports.sessions import SessionStore
from qrmenu.application.ports.storage import ImageStorage
from qrmenu.application.use_cases.auth import DEFAULT_SESSION_TTL_SECONDS, ResolveSession
from qrmenu.application.use_cases.context import AuthContext
from qrmenu.infrastructure.db.repositories.category_repo import SqlAlchemyCategoryRepository
from qrmenu.infrastructure.db.repositories.menu_item_repo import SqlAlchemyMenuItemRepository
from qrmenu.infrastructure.db.repositories.restaurant_repo import SqlAlchemyRestaurantRepository
from qrmenu.infrastructure.db.repositories.user_repo import SqlAlchemyUserRepository
from qrmenu.infrastructure.db.session import get_engine
from qrmenu.infrastructure.qr.segno_renderer import SegnoQrRenderer
from qrmenu.infrastructure.security.passwords import Argon2PasswordHasher
from qrmenu.infrastructure.sessions.redis_session_store import RedisSessionStore
from qrmenu.infrastructure.storage.supabase_storage import get_image_storage_from_env

DEFAULT_SESSION_COOKIE_NAME = "qrmenu_session"
DEFAULT_PUBLIC_BASE_URL = "http://localhost:8000"

_password_hasher = Argon2PasswordHasher()


def session_cookie_name() -> str:
    return os.getenv("SESSION_COOKIE_NAME", DEFAULT_SESSION_COOKIE_NAME)


def session_ttl_seconds() -> int:
    return int(os.getenv("SESSION_TTL_SECONDS", str(DEFAULT_SESSION_TTL_SECONDS)))


def secure_cookies() -> bool:
    return os.getenv("APP_ENV", "dev").lower() not in {"dev", "test"}


def public_base_url() -> str:
    return os.getenv("PUBLIC_BASE_URL", DEFAULT_PUBLIC_BASE_URL)


def get_db_engine() -> Engine:
    return get_engine()


def get_user_repository(engine: Engine = Depends(get_db_engine)) -> UserRepository:
    return SqlAlchemyUserRepository(engine)


def get_restaurant_repository(engine: Engine = Depends(get_db_engine)) -> RestaurantRepository:
    return SqlAlchemyRestaurantRepository(engine)


def get_category_repository(engine: Engine = Depends(get_db_engine)) -> CategoryRepository:
    return SqlAlchemyCategoryRepository(engine)


def get_menu_item_repository(engine: Engine = Depends(get_db_engine)) -> MenuItemRepository:
    return SqlAlchemyMenuItemRepository(engine)


def get_session_store() -> SessionStore:
    return RedisSessionStore()


def get_password_hasher() -> PasswordHasher:
    return _password_hasher


def get_image_storage() -> ImageStorage | None:
    return get_image_storage_from_env()


def get_qr_renderer() -> QrRenderer:
    return SegnoQrRenderer()


def require_auth(
    request: Request,
    sessions: SessionStore = Depends(get_session_store),
) -> AuthContext:
    session_id = request.cookies.get(session_cookie_name())
    return ResolveSession(sessions).execute(session_id)

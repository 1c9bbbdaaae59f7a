from __future__ import annotations

from prometheus_client import Counter

USERS_REGISTERED_TOTAL = Counter(
    "qrmenu_users_registered_total",
    "Total number of registered owner accounts.",
)

LOGINS_TOTAL = Counter(
    "qrmenu_logins_total",
    "Total number of login attempts by outcome.",
    ["outcome"],
)

RESTAURANTS_CREATED_TOTAL = Counter(
    "qrmenu_restaurants_created_total",
    "Total number of restaurants created.",
)

SLUG_COLLISIONS_TOTAL = Counter(
    "qrmenu_slug_collisions_total",
    "Total number of generated slugs that needed a uniqueness suffix.",
)

PUBLIC_MENU_VIEWS_TOTAL = Counter(
    "qrmenu_public_menu_views_total",
    "Total number of public menu reads by outcome.",
    ["outcome"],
)

IMAGE_UPLOADS_TOTAL = Counter(
    "qrmenu_image_uploads_total",
    "Total number of image upload attempts by outcome.",
    ["outcome"],
)

REORDERS_TOTAL = Counter(
    "qrmenu_reorders_total",
    "Total number of bulk reorder requests applied.",
    ["scope"],
)


def record_user_registered() -> None:
    USERS_REGISTERED_TOTAL.inc()


def record_login(outcome: str) -> None:
    LOGINS_TOTAL.labels(outcome=outcome).inc()


def record_restaurant_created(slug_collided: bool) -> None:
    RESTAURANTS_CREATED_TOTAL.inc()
    if slug_collided:
        SLUG_COLLISIONS_TOTAL.inc()


def record_public_menu_view(outcome: str) -> None:
    PUBLIC_MENU_VIEWS_TOTAL.labels(outcome=outcome).inc()


def record_image_upload(outcome: str) -> None:
    IMAGE_UPLOADS_TOTAL.labels(outcome=outcome).inc()


def record_reorder(scope: str) -> None:
    REORDERS_TOTAL.labels(scope=scope).inc()

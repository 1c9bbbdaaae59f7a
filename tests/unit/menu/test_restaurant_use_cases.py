from __future__ import annotations

import sys
from pathlib import Path

import pytest
from pydantic import ValidationError

sys.path.insert(0, str(Path(__file__).resolve().parents[3] / "src"))

from qrmenu.application.dto.requests import CreateRestaurantRequest, UpdateRestaurantRequest
from qrmenu.application.use_cases.restaurants import (
    CreateRestaurant,
    DeleteRestaurant,
    GetRestaurant,
    InvalidSlugError,
    ListRestaurants,
    RestaurantNotFoundError,
    SlugAlreadyTakenError,
    UpdateRestaurant,
)
from qrmenu.domain.common.ids import RestaurantId


def _create(restaurants, owner, name: str = "Cafe Milano", **fields):
    use_case = CreateRestaurant(restaurants, clock_ms=lambda: 36 * 36)
    return use_case.execute(owner, CreateRestaurantRequest(name=name, **fields))


def test_create_restaurant_derives_slug_and_defaults(restaurants, owner) -> None:
    response = _create(restaurants, owner, description="", phone="  ")

    assert response.slug == "cafe-milano"
    assert response.userId == owner.user_id
    assert response.primaryColor == "#f97316"
    assert response.description is None
    assert response.phone is None
    assert response.categories == []


def test_create_restaurant_suffixes_colliding_slug(restaurants, owner, stranger) -> None:
    first = _create(restaurants, owner)
    second = _create(restaurants, stranger)

    assert first.slug == "cafe-milano"
    assert second.slug == "cafe-milano-100"


def test_create_restaurant_with_symbol_only_name_uses_fallback(restaurants, owner) -> None:
    response = _create(restaurants, owner, name="!!!")
    assert response.slug == "restaurant"


def test_create_restaurant_keeps_custom_color(restaurants, owner) -> None:
    response = _create(restaurants, owner, primaryColor="#112233")
    assert response.primaryColor == "#112233"


def test_create_request_rejects_bad_color() -> None:
    with pytest.raises(ValidationError):
        CreateRestaurantRequest(name="Cafe Milano", primaryColor="orange")
    with pytest.raises(ValidationError):
        CreateRestaurantRequest(name="C")


def test_list_and_get_are_scoped_to_owner(restaurants, owner, stranger) -> None:
    created = _create(restaurants, owner)
    _create(restaurants, stranger, name="Other Place")

    listed = ListRestaurants(restaurants).execute(owner)
    assert [r.id for r in listed] == [created.id]

    fetched = GetRestaurant(restaurants).execute(owner, RestaurantId(created.id))
    assert fetched.name == "Cafe Milano"

    with pytest.raises(RestaurantNotFoundError):
        GetRestaurant(restaurants).execute(stranger, RestaurantId(created.id))
    with pytest.raises(RestaurantNotFoundError):
        GetRestaurant(restaurants).execute(owner, RestaurantId("rst_missing"))


def test_update_applies_only_sent_fields(restaurants, owner) -> None:
    created = _create(restaurants, owner, address="Main St 1", phone="555")

    updated = UpdateRestaurant(restaurants).execute(
        owner,
        RestaurantId(created.id),
        UpdateRestaurantRequest.model_validate({"name": "Cafe Milano Bis", "phone": None}),
    )

    assert updated.name == "Cafe Milano Bis"
    assert updated.phone is None
    assert updated.address == "Main St 1"
    assert updated.slug == "cafe-milano"


def test_update_with_empty_body_returns_current_state(restaurants, owner) -> None:
    created = _create(restaurants, owner)
    updated = UpdateRestaurant(restaurants).execute(
        owner, RestaurantId(created.id), UpdateRestaurantRequest()
    )
    assert updated.name == created.name


def test_update_slug_is_normalized(restaurants, owner) -> None:
    created = _create(restaurants, owner)

    updated = UpdateRestaurant(restaurants).execute(
        owner,
        RestaurantId(created.id),
        UpdateRestaurantRequest(slug="Şehir Lokantası"),
    )

    assert updated.slug == "sehir-lokantasi"


def test_update_slug_rejects_empty_and_taken_values(restaurants, owner, stranger) -> None:
    mine = _create(restaurants, owner)
    _create(restaurants, stranger, name="Taken Name")
    use_case = UpdateRestaurant(restaurants)

    with pytest.raises(InvalidSlugError):
        use_case.execute(owner, RestaurantId(mine.id), UpdateRestaurantRequest(slug="!!!"))
    with pytest.raises(SlugAlreadyTakenError):
        use_case.execute(owner, RestaurantId(mine.id), UpdateRestaurantRequest(slug="taken-name"))

    # re-sending the current slug is not a conflict
    same = use_case.execute(owner, RestaurantId(mine.id), UpdateRestaurantRequest(slug="cafe-milano"))
    assert same.slug == "cafe-milano"


def test_update_rejects_null_for_required_fields() -> None:
    with pytest.raises(ValidationError):
        UpdateRestaurantRequest.model_validate({"name": None})
    with pytest.raises(ValidationError):
        UpdateRestaurantRequest.model_validate({"primaryColor": None})


def test_update_and_delete_foreign_restaurant_is_not_found(restaurants, owner, stranger) -> None:
    created = _create(restaurants, owner)

    with pytest.raises(RestaurantNotFoundError):
        UpdateRestaurant(restaurants).execute(
            stranger, RestaurantId(created.id), UpdateRestaurantRequest(name="Hijacked")
        )
    with pytest.raises(RestaurantNotFoundError):
        DeleteRestaurant(restaurants).execute(stranger, RestaurantId(created.id))

    assert GetRestaurant(restaurants).execute(owner, RestaurantId(created.id)).name == "Cafe Milano"


def test_delete_restaurant(restaurants, owner) -> None:
    created = _create(restaurants, owner)

    response = DeleteRestaurant(restaurants).execute(owner, RestaurantId(created.id))

    assert response.message == "restaurant deleted"
    assert ListRestaurants(restaurants).execute(owner) == []

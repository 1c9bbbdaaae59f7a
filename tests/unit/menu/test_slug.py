from __future__ import annotations

import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).resolve().parents[3] / "src"))

from qrmenu.domain.menu.slug import (
    FALLBACK_SLUG,
    base_slug,
    slugify,
    to_base36,
    with_timestamp_suffix,
)


@pytest.mark.parametrize(
    ("name", "expected"),
    [
        ("Cafe Milano", "cafe-milano"),
        ("Çiğ Köfte Şükrü", "cig-kofte-sukru"),
        ("  --Hello,   World!--  ", "hello-world"),
        ("Istanbul İskender", "istanbul-iskender"),
        ("Bar & Grill 24/7", "bar-grill-24-7"),
    ],
)
def test_slugify(name: str, expected: str) -> None:
    assert slugify(name) == expected


def test_slugify_result_only_uses_slug_alphabet() -> None:
    slug = slugify("Dönerci Ömer's ~ Place (Ünye)")
    assert slug == "donerci-omer-s-place-unye"
    assert set(slug) <= set("abcdefghijklmnopqrstuvwxyz0123456789-")
    assert not slug.startswith("-") and not slug.endswith("-")
    assert "--" not in slug


def test_base_slug_falls_back_when_nothing_survives() -> None:
    assert base_slug("!!!") == FALLBACK_SLUG
    assert base_slug("Cafe Milano") == "cafe-milano"


def test_to_base36() -> None:
    assert to_base36(0) == "0"
    assert to_base36(35) == "z"
    assert to_base36(36) == "10"
    with pytest.raises(ValueError):
        to_base36(-1)


def test_timestamp_suffix_uses_base36_millis() -> None:
    assert with_timestamp_suffix("cafe-milano", now_ms=36 * 36) == "cafe-milano-100"

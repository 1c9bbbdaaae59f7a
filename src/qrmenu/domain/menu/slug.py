"""URL slugs for public menu addresses.

Slugs are derived from the restaurant's display name. Turkish letters are
folded to their ASCII base letter, everything else outside ``[a-z0-9]``
becomes a single hyphen.
"""

from __future__ import annotations

import re
import time

FALLBACK_SLUG = "restaurant"

_TRANSLITERATION = str.maketrans(
    {
        "ğ": "g",
        "ü": "u",
        "ş": "s",
        "ı": "i",
        "ö": "o",
        "ç": "c",
        # "İ".lower() yields "i" followed by a combining dot above
        "\u0307": None,
    }
)
_NON_ALNUM_RUN = re.compile(r"[^a-z0-9]+")
_BASE36_DIGITS = "0123456789abcdefghijklmnopqrstuvwxyz"


def slugify(text: str) -> str:
    lowered = text.lower().translate(_TRANSLITERATION)
    return _NON_ALNUM_RUN.sub("-", lowered).strip("-")


def to_base36(value: int) -> str:
    if value < 0:
        raise ValueError("value must be >= 0")
    if value == 0:
        return "0"
    digits: list[str] = []
    while value:
        value, remainder = divmod(value, 36)
        digits.append(_BASE36_DIGITS[remainder])
    return "".join(reversed(digits))


def base_slug(name: str) -> str:
    return slugify(name) or FALLBACK_SLUG


def with_timestamp_suffix(slug: str, now_ms: int | None = None) -> str:
    millis = int(time.time() * 1000) if now_ms is None else now_ms
    return f"{slug}-{to_base36(millis)}"

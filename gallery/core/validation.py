"""Normalization of create-listing payloads.

Nothing here rejects input: every malformed field is replaced by a fallback
and the replacement is reported as a :class:`Coercion` so callers can audit
what was stored versus what was submitted.
"""
import logging
import math
import time
from typing import Any
from urllib.parse import quote

from gallery.core.areas import AREAS, provinces, reconcile_district
from gallery.models import MAX_IMAGES, Coercion, Coords, ValidatedPayload

LOG = logging.getLogger("gallery.validation")

DEFAULT_PRICE = 1_000_000
DEFAULT_SQM = 80
DEFAULT_ROOMS = 2
PLACEHOLDER_IMAGE_COUNT = 8


def placeholder_images(seed: str, count: int = PLACEHOLDER_IMAGE_COUNT) -> list[str]:
    return [
        f"https://picsum.photos/seed/{quote(f'{seed}-{i + 1}', safe='')}/1200/800"
        for i in range(count)
    ]


def is_image_reference(value: Any) -> bool:
    if not isinstance(value, str):
        return False
    return value.startswith(("data:", "http://", "https://", "/"))


def _as_number(value: Any) -> float | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, str):
        value = value.strip().replace(" ", "")
        if not value:
            return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(number):
        return None
    return int(number) if number.is_integer() else number


def _location(payload: dict, out: list[Coercion]) -> tuple[str, str]:
    first = provinces()[0]
    province = payload.get("province")
    if not isinstance(province, str) or province not in AREAS:
        out.append(Coercion("province", province, first, "unknown province"))
        province = first
    district = payload.get("district")
    fixed = reconcile_district(province, district)
    if fixed != district:
        out.append(Coercion("district", district, fixed, f"not a district of {province}"))
    return province, fixed


def _price(payload: dict, out: list[Coercion]) -> float:
    given = payload.get("price")
    price = _as_number(given)
    # zero counts as "no price", same as an empty form field
    if not price or price < 0:
        out.append(Coercion("price", given, DEFAULT_PRICE, "missing or not a positive number"))
        return DEFAULT_PRICE
    return price


def _sqm(payload: dict, out: list[Coercion]) -> float:
    if "sqm" not in payload:
        return DEFAULT_SQM
    given = payload["sqm"]
    sqm = _as_number(given)
    if sqm is None or sqm < 0:
        out.append(Coercion("sqm", given, 0, "not a non-negative number"))
        return 0
    return sqm


def _rooms(payload: dict, out: list[Coercion]) -> int:
    if "rooms" not in payload:
        return DEFAULT_ROOMS
    given = payload["rooms"]
    rooms = _as_number(given)
    if rooms is None or rooms < 0:
        out.append(Coercion("rooms", given, 0, "not a non-negative integer"))
        return 0
    if not float(rooms).is_integer():
        out.append(Coercion("rooms", given, int(rooms), "truncated to an integer"))
    return int(rooms)


def _images(payload: dict, seed: str, out: list[Coercion]) -> list[str]:
    given = payload.get("images") or []
    if isinstance(given, str):
        given = [given]
    elif not isinstance(given, (list, tuple)):
        out.append(Coercion("images", given, [], "not a list of image references"))
        given = []
    images = [i for i in given if is_image_reference(i)]
    if len(images) != len(given):
        out.append(Coercion("images", len(given), len(images), "dropped invalid image references"))
    if len(images) > MAX_IMAGES:
        out.append(Coercion("images", len(images), MAX_IMAGES, f"kept the first {MAX_IMAGES}"))
        images = images[:MAX_IMAGES]
    if not images:
        images = placeholder_images(seed)
        out.append(Coercion("images", 0, len(images), "no images, using placeholders"))
    return images


def _coords(payload: dict, out: list[Coercion]) -> Coords | None:
    given = payload.get("coords")
    if given is None:
        return None
    if isinstance(given, Coords):
        given = given.to_dict()
    coords = Coords.from_dict(given)
    if coords is None:
        out.append(Coercion("coords", given, None, "latitude and longitude must both be finite"))
    return coords


def validate_listing_payload(payload: dict, now: float | None = None) -> ValidatedPayload:
    """Return normalized listing fields (without id/removed) and the coercions applied."""
    coercions: list[Coercion] = []
    province, district = _location(payload, coercions)

    title = str(payload.get("title") or "").strip()
    if not title:
        title = f"{province} {district} Yeni İlan"
        coercions.append(Coercion("title", payload.get("title"), title, "blank title"))

    stamp = int((now if now is not None else time.time()) * 1000)
    fields = {
        "title": title,
        "price": _price(payload, coercions),
        "province": province,
        "district": district,
        "sqm": _sqm(payload, coercions),
        "rooms": _rooms(payload, coercions),
        "description": str(payload.get("description") or "").strip(),
        "images": tuple(_images(payload, f"{province}-{district}-{stamp}", coercions)),
        "coords": _coords(payload, coercions),
    }

    for c in coercions:
        LOG.info("Coerced %s: %r -> %r (%s)", c.field, c.given, c.applied, c.reason)
    return ValidatedPayload(fields=fields, coercions=coercions)

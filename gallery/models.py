import math
from dataclasses import dataclass, field
from typing import Any

from gallery.core.areas import is_valid_location

ROLE_USER = "user"
ROLE_ADMIN = "admin"
ROLE_ANONYMOUS = "anonymous"
ROLES = (ROLE_USER, ROLE_ADMIN)

MAX_IMAGES = 25


@dataclass(frozen=True)
class Coords:
    lat: float
    lng: float

    def to_dict(self) -> dict:
        return {"lat": self.lat, "lng": self.lng}

    @classmethod
    def from_dict(cls, raw: Any) -> "Coords | None":
        # both halves or nothing
        if not isinstance(raw, dict):
            return None
        lat, lng = raw.get("lat"), raw.get("lng")
        if not (_is_finite(lat) and _is_finite(lng)):
            return None
        return cls(lat=float(lat), lng=float(lng))


@dataclass(frozen=True)
class Listing:
    id: str
    title: str
    price: float
    province: str
    district: str
    sqm: float
    rooms: int
    description: str = ""
    images: tuple[str, ...] = ()
    coords: Coords | None = None
    removed: bool = False

    @property
    def cover(self) -> str | None:
        return self.images[0] if self.images else None

    def search_text(self) -> str:
        parts = [self.title, self.province, self.district]
        if self.description:
            parts.append(self.description)
        return " ".join(parts)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "title": self.title,
            "price": self.price,
            "province": self.province,
            "district": self.district,
            "sqm": self.sqm,
            "rooms": self.rooms,
            "description": self.description,
            "images": list(self.images),
            "coords": self.coords.to_dict() if self.coords else None,
            "removed": self.removed,
        }

    @classmethod
    def from_dict(cls, raw: dict) -> "Listing":
        """Rebuild a stored listing. Raises on a malformed record."""
        if not isinstance(raw, dict):
            raise TypeError(f"listing record must be an object, got {type(raw).__name__}")
        images = raw.get("images") or []
        if not isinstance(images, list):
            raise TypeError("listing images must be a list")
        province, district = str(raw["province"]), str(raw["district"])
        if not is_valid_location(province, district):
            raise ValueError(f"{district!r} is not a district of {province!r}")
        rooms = _number(raw.get("rooms", 0), "rooms")
        if not float(rooms).is_integer():
            raise ValueError(f"listing rooms must be a whole number, got {rooms!r}")
        return cls(
            id=str(raw["id"]),
            title=str(raw["title"]),
            price=_number(raw["price"], "price"),
            province=province,
            district=district,
            sqm=_number(raw.get("sqm", 0), "sqm"),
            rooms=int(rooms),
            description=str(raw.get("description") or ""),
            images=tuple(str(i) for i in images[:MAX_IMAGES]),
            coords=Coords.from_dict(raw.get("coords")),
            removed=bool(raw.get("removed", False)),
        )


@dataclass(frozen=True)
class User:
    username: str
    password: str
    role: str = ROLE_USER

    def to_dict(self) -> dict:
        return {"username": self.username, "password": self.password, "role": self.role}

    @classmethod
    def from_dict(cls, raw: dict) -> "User":
        if not isinstance(raw, dict):
            raise TypeError(f"user record must be an object, got {type(raw).__name__}")
        role = raw.get("role", ROLE_USER)
        if role not in ROLES:
            raise ValueError(f"unknown role {role!r}")
        username = raw["username"]
        if not isinstance(username, str) or not username:
            raise ValueError(f"username must be a non-empty string, got {username!r}")
        return cls(username=username, password=str(raw["password"]), role=role)


@dataclass(frozen=True)
class Session:
    username: str

    def to_dict(self) -> dict:
        return {"username": self.username}

    @classmethod
    def from_dict(cls, raw: Any) -> "Session | None":
        if not isinstance(raw, dict) or not raw.get("username"):
            return None
        return cls(username=str(raw["username"]))


@dataclass(frozen=True)
class Coercion:
    """One field of a create payload that was replaced by a fallback."""
    field: str
    given: Any
    applied: Any
    reason: str


@dataclass(frozen=True)
class ValidatedPayload:
    fields: dict
    coercions: list[Coercion] = field(default_factory=list)


def _number(value: Any, name: str) -> float:
    if not _is_finite(value) or value < 0:
        raise ValueError(f"listing {name} must be a finite non-negative number, got {value!r}")
    return value


def _is_finite(value: Any) -> bool:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return math.isfinite(value)

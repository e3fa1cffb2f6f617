from typing import Sequence

# province -> districts, in display order
AREAS: dict[str, tuple[str, ...]] = {
    "Balıkesir": ("Altınoluk", "Edremit", "Akçay", "Güre"),
    "Çanakkale": ("Ayvacık", "Merkez"),
}


def provinces() -> Sequence[str]:
    return tuple(AREAS)


def districts(province: str) -> Sequence[str]:
    return AREAS.get(province, ())


def is_valid_location(province: str, district: str) -> bool:
    return district in districts(province)


def reconcile_district(province: str, district: str | None) -> str:
    """Keep ``district`` if it belongs to ``province``, else its first district."""
    names = districts(province)
    if not names:
        raise KeyError(f"unknown province: {province}")
    if district in names:
        return district
    return names[0]

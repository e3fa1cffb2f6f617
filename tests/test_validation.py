import math

from gallery.core.areas import districts, is_valid_location, reconcile_district
from gallery.core.validation import DEFAULT_PRICE, DEFAULT_ROOMS, DEFAULT_SQM, validate_listing_payload
from gallery.models import MAX_IMAGES, Coords


def _fields(coercions):
    return {c.field for c in coercions}


def test_valid_payload_is_kept_as_is():
    result = validate_listing_payload({
        "title": "Güre Villa",
        "price": "12500000",
        "province": "Balıkesir",
        "district": "Güre",
        "sqm": "180",
        "rooms": 5,
        "description": " Havuzlu ",
        "images": ["https://example.com/a.jpg"],
        "coords": {"lat": 39.6, "lng": 26.9},
    })
    f = result.fields
    assert result.coercions == []
    assert f["title"] == "Güre Villa"
    assert f["price"] == 12_500_000
    assert f["sqm"] == 180
    assert f["rooms"] == 5
    assert f["description"] == "Havuzlu"
    assert f["images"] == ("https://example.com/a.jpg",)
    assert f["coords"] == Coords(39.6, 26.9)


def test_blank_title_defaults_to_location():
    result = validate_listing_payload({"title": "  ", "province": "Çanakkale", "district": "Merkez",
                                       "price": 1, "images": ["https://x/1.jpg"]})
    assert result.fields["title"] == "Çanakkale Merkez Yeni İlan"
    assert _fields(result.coercions) == {"title"}


def test_bad_numbers_are_coerced():
    result = validate_listing_payload({"province": "Balıkesir", "district": "Akçay",
                                       "price": "abc", "sqm": "-3", "rooms": "lots",
                                       "images": ["https://x/1.jpg"]})
    assert result.fields["price"] == DEFAULT_PRICE
    assert result.fields["sqm"] == 0
    assert result.fields["rooms"] == 0
    assert {"price", "sqm", "rooms"} <= _fields(result.coercions)


def test_missing_size_fields_use_form_defaults():
    result = validate_listing_payload({"province": "Balıkesir", "district": "Akçay", "price": 5})
    assert result.fields["sqm"] == DEFAULT_SQM
    assert result.fields["rooms"] == DEFAULT_ROOMS


def test_fractional_rooms_are_truncated():
    result = validate_listing_payload({"province": "Balıkesir", "district": "Akçay", "price": 5,
                                       "rooms": 2.5, "images": ["https://x/1.jpg"]})
    assert result.fields["rooms"] == 2
    assert _fields(result.coercions) == {"rooms"}


def test_district_from_other_province_is_reset():
    result = validate_listing_payload({"province": "Çanakkale", "district": "Akçay", "price": 5})
    assert result.fields["district"] == "Ayvacık"
    assert is_valid_location(result.fields["province"], result.fields["district"])


def test_unknown_province_falls_back_to_first():
    result = validate_listing_payload({"province": "Ankara", "district": "Çankaya", "price": 5})
    assert result.fields["province"] == "Balıkesir"
    assert result.fields["district"] in districts("Balıkesir")
    assert {"province", "district"} <= _fields(result.coercions)


def test_images_are_capped_and_filtered():
    images = [f"https://x/{i}.jpg" for i in range(30)] + [42, "not-a-url"]
    result = validate_listing_payload({"province": "Balıkesir", "district": "Akçay", "price": 5,
                                       "images": images})
    assert len(result.fields["images"]) == MAX_IMAGES
    assert result.fields["images"][0] == "https://x/0.jpg"


def test_no_images_get_placeholders():
    result = validate_listing_payload({"province": "Balıkesir", "district": "Edremit", "price": 5}, now=1.0)
    images = result.fields["images"]
    assert len(images) == 8
    assert all(i.startswith("https://picsum.photos/seed/") for i in images)


def test_data_urls_are_accepted():
    ref = "data:image/png;base64,iVBORw0KGgo="
    result = validate_listing_payload({"province": "Balıkesir", "district": "Edremit", "price": 5,
                                       "images": [ref]})
    assert result.fields["images"] == (ref,)


def test_half_coordinates_are_dropped():
    for coords in ({"lat": 39.1}, {"lat": 39.1, "lng": math.nan}, {"lat": "x", "lng": 1}):
        result = validate_listing_payload({"province": "Balıkesir", "district": "Akçay", "price": 5,
                                           "images": ["https://x/1.jpg"], "coords": coords})
        assert result.fields["coords"] is None
        assert "coords" in _fields(result.coercions)


def test_reconcile_district_keeps_valid_choice():
    assert reconcile_district("Balıkesir", "Güre") == "Güre"
    assert reconcile_district("Balıkesir", None) == "Altınoluk"


def test_non_string_province_is_coerced():
    result = validate_listing_payload({"province": ["Balıkesir"], "district": "Akçay", "price": 5,
                                       "images": ["https://x/1.jpg"]})
    assert result.fields["province"] == "Balıkesir"
    assert result.fields["district"] == "Akçay"
    assert "province" in _fields(result.coercions)


def test_non_list_images_are_coerced():
    result = validate_listing_payload({"province": "Balıkesir", "district": "Akçay", "price": 5,
                                       "images": 5})
    assert len(result.fields["images"]) == 8
    assert any(c.field == "images" and c.given == 5 for c in result.coercions)


def test_coords_instance_must_be_finite():
    result = validate_listing_payload({"province": "Balıkesir", "district": "Akçay", "price": 5,
                                       "images": ["https://x/1.jpg"], "coords": Coords(math.nan, 1.0)})
    assert result.fields["coords"] is None
    assert "coords" in _fields(result.coercions)
    ok = validate_listing_payload({"province": "Balıkesir", "district": "Akçay", "price": 5,
                                   "images": ["https://x/1.jpg"], "coords": Coords(39.5, 26.9)})
    assert ok.fields["coords"] == Coords(39.5, 26.9)
    assert ok.coercions == []

from gallery.bot.telegram_bot import match_name, parse_create_args, parse_image_index


def test_parse_create_args_maps_fields_in_order():
    payload = parse_create_args("Ev | 5000000 | Balıkesir | Güre | 120 | 3 | Bahçeli")
    assert payload == {
        "title": "Ev", "price": "5000000", "province": "Balıkesir", "district": "Güre",
        "sqm": "120", "rooms": "3", "description": "Bahçeli",
    }


def test_parse_create_args_leaves_missing_parts_out():
    assert parse_create_args("Ev | 100") == {"title": "Ev", "price": "100"}
    assert parse_create_args("") == {}


def test_parse_create_args_keeps_pipes_in_description():
    payload = parse_create_args("Ev | 1 | Balıkesir | Güre | 1 | 1 | a | b")
    assert payload["description"] == "a | b"


def test_match_name_ignores_case():
    assert match_name("çanakkale", ["Balıkesir", "Çanakkale"]) == "Çanakkale"
    assert match_name("ankara", ["Balıkesir"]) is None


def test_parse_image_index_rejects_forged_data():
    assert parse_image_index("3") == 3
    assert parse_image_index("") == 0
    assert parse_image_index("abc") is None

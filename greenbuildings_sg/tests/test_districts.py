import pytest

from greenbuildings_sg.districts import KNOWN_DISTRICTS, canonicalize, pick_district


def test_known_list_size():
    assert len(KNOWN_DISTRICTS) == 46
    assert len(set(KNOWN_DISTRICTS)) == 46


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("Marina South", "Marina Bay"),
        ("Marina", "Marina Bay"),
        ("  CBD ", "Downtown Core"),
        ("Jurong", "Jurong East"),
        ("Marina South Pier", "Marina Bay"),  # first two words
        ("Bedok", "Bedok"),
    ],
)
def test_canonicalize(raw, expected):
    assert canonicalize(raw) == expected


def test_alias_in_address_components():
    assert pick_district({"suburb": "Marina South"}) == "Marina Bay"


def test_generic_only_is_unknown():
    assert pick_district({"city_district": "Singapore"}) == "Unknown"


def test_nothing_at_all_is_unknown():
    assert pick_district(None, "", "") == "Unknown"


def test_priority_order_of_address_fields():
    addr = {"suburb": "Bedok", "city_district": "Tampines", "county": "Changi"}
    assert pick_district(addr) == "Tampines"


def test_unlisted_component_skipped_for_later_known_one():
    addr = {"city_district": "Kembangan", "town": "Bedok"}
    assert pick_district(addr) == "Bedok"


def test_match_is_case_insensitive_and_keeps_input_spelling():
    assert pick_district({"suburb": "toa payoh"}) == "toa payoh"


def test_falls_back_to_display_name_tokens():
    addr = {"city_district": "Central Singapore", "road": "Robinson Road"}
    display = "Robinson Road, Tanjong Pagar, Central, Singapore, 068877"
    assert pick_district(addr, display) == "Tanjong Pagar"


def test_falls_back_to_hint_name_tokens():
    assert pick_district({}, "Singapore", "Ocean Financial Centre (Raffles)") == "Raffles Place"
    assert pick_district({}, "", "Tower A & Bugis") == "Bugis"


def test_unlisted_district_uses_first_raw_component():
    addr = {"neighbourhood": "Kembangan", "region": "Central Region"}
    assert pick_district(addr, "Somewhere, Singapore") == "Kembangan"


def test_strict_mode_rejects_unlisted_district():
    addr = {"neighbourhood": "Kembangan"}
    assert pick_district(addr, strict=True) == "Unknown"
    assert pick_district({"suburb": "Bedok"}, strict=True) == "Bedok"

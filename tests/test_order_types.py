import pytest

from moovs_data_prep.cleaning.order_types import is_valid_order_type, normalize_order_type
from moovs_data_prep.schemas import ORDER_TYPES


@pytest.mark.parametrize("raw,expected", [
    ("Airport Pickup", "airport-pick-up"),
    ("airport_drop_off", "airport-drop-off"),
    ("AIRPORT", "airport"),
    ("Wedding", "wedding"),
    ("Wine Tour - Napa", "wine-tour"),
    ("21st Birthday", "birthday-21"),
    ("Hourly", "point-to-point"),
    ("Sweet 16", "sweet-16"),
    ("something else", "point-to-point"),
    ("", "point-to-point"),
    (None, "point-to-point"),
])
def test_normalize_order_type(raw, expected):
    assert normalize_order_type(raw) == expected


def test_every_canonical_type_maps_to_itself():
    for order_type in ORDER_TYPES:
        assert normalize_order_type(order_type) == order_type
        assert is_valid_order_type(order_type)


def test_free_text_is_not_valid():
    assert not is_valid_order_type("Airport Pickup")

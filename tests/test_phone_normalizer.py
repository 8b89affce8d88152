import pytest

from moovs_data_prep.validation.phone_normalizer import (
    PhoneNumberNormalizer,
    generate_placeholder_phone,
    is_placeholder_phone,
    normalize_phone,
    phone_normalizer,
)


@pytest.mark.parametrize("raw", [
    "2065551234",
    "(206) 555-1234",
    "206.555.1234",
    "+1 206 555 1234",
    "1-206-555-1234",
])
def test_us_numbers_are_formatted_internationally(raw):
    result = phone_normalizer.validate(raw)
    assert result.is_valid
    assert result.formatted == "+1 206-555-1234"


def test_missing_phone_is_reported():
    result = phone_normalizer.validate("   ")
    assert not result.is_valid
    assert result.error == "Phone number is required"


def test_ten_digit_invalid_number_gets_a_suggestion():
    result = phone_normalizer.validate("000-000-0000")
    assert not result.is_valid
    assert result.error == "Invalid phone number format"
    assert result.suggestion == "+10000000000"


def test_short_number_has_no_suggestion():
    result = phone_normalizer.validate("12345")
    assert not result.is_valid
    assert result.suggestion is None


def test_format_phone_keeps_unparseable_input():
    assert phone_normalizer.format_phone("call office") == "call office"
    assert phone_normalizer.format_phone("2065551234") == "+1 206-555-1234"


def test_detect_region_defaults_to_configured_region():
    normalizer = PhoneNumberNormalizer(default_region="US")
    assert normalizer.detect_region("2065551234") == "US"
    assert normalizer.detect_region("garbage") == "US"


def test_normalize_phone_keeps_digits_only():
    assert normalize_phone("+1 (206) 555-1234") == "12065551234"
    assert normalize_phone(None) == ""


@pytest.mark.parametrize("phone,expected", [
    ("+1 202-555-0100", True),
    ("+1 206-555-0145", True),
    ("+1 206-555-1234", False),
    ("", False),
])
def test_placeholder_phone_detection(phone, expected):
    assert is_placeholder_phone(phone) is expected


def test_placeholder_phone_detection_uses_base_prefix():
    base = "+1 303-777-1200"
    assert is_placeholder_phone("+1 303-777-1299", base)
    assert not is_placeholder_phone("+1 303-777-1300", base)


def test_generated_placeholder_phone_is_deterministic():
    phone = generate_placeholder_phone("John", "Smith")
    assert phone == generate_placeholder_phone("John", "Smith")
    assert phone == generate_placeholder_phone("JOHN", "Smith!")
    assert phone != generate_placeholder_phone("Jane", "Doe")
    assert len(phone) == 12
    assert phone.startswith("+1")
    assert phone[5:8] == "555"
    assert phone[1:].isdigit()


def test_generated_placeholder_phone_for_empty_name():
    assert generate_placeholder_phone("", "") == "+10005550000"

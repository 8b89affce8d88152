import re

from moovs_data_prep.validation.email_normalizer import (
    generate_placeholder_email,
    is_placeholder_email,
    name_hash,
    normalize_email,
    validate_email,
)


def test_placeholder_email_is_deterministic():
    first = generate_placeholder_email("John", "Smith", "+1 206-555-1234")
    second = generate_placeholder_email("John", "Smith", "+1 206-555-1234")
    assert first == second == "john.smith.551234@import.moovs.com"


def test_placeholder_email_varies_with_phone():
    a = generate_placeholder_email("John", "Smith", "+1 206-555-1234")
    b = generate_placeholder_email("John", "Smith", "+1 206-555-9876")
    assert a != b


def test_placeholder_email_without_phone_uses_name_hash():
    a = generate_placeholder_email("Mary-Ann", "O'Neil")
    b = generate_placeholder_email("Mary-Ann", "O'Neil")
    assert a == b
    assert re.match(r"^maryann\.oneil\.\d{6}@import\.moovs\.com$", a)


def test_placeholder_email_custom_domain_and_empty_names():
    email = generate_placeholder_email("", "", "2065551234", domain="example.org")
    assert email == "unknown.contact.551234@example.org"


def test_name_hash_wraps_to_signed_32_bit():
    assert name_hash("") == 0
    assert name_hash("a") == 97
    value = name_hash("johnsmith" * 20)
    assert -2 ** 31 <= value < 2 ** 31


def test_validate_email():
    assert validate_email("jane@example.com").is_valid
    assert validate_email("").error == "Email is required"
    assert validate_email("jane at example").error == "Invalid email format"


def test_placeholder_email_domains():
    assert is_placeholder_email("John.Smith.000001@Import.Moovs.com")
    assert is_placeholder_email("x@placeholder.moovs.com")
    assert not is_placeholder_email("john@example.com")
    assert not is_placeholder_email("")


def test_normalize_email():
    assert normalize_email("  Jane@Example.COM ") == "jane@example.com"

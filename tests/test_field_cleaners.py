import pytest

from moovs_data_prep.cleaning.field_cleaners import (
    CONTACT_CLEANING_STEPS,
    apply_phone_fallback,
    clean_full_name,
    detect_business_entries,
    detect_event_names,
    extract_primary_email,
    is_non_person_name,
    is_reservation_non_person,
    looks_like_person_name,
    looks_like_phone,
    purge_scratch_fields,
    rebuild_address,
    recover_shifted_columns,
    reduce_multiple_emails,
    run_cleaning_steps,
    split_emails,
    split_multi_person_names,
    split_name_pair,
    strip_last_name_junk,
    strip_name_annotations,
)


def test_phone_in_email_column_is_recovered(working, context):
    record = working(firstName="Jane", lastName="Doe", email="206-555-1234",
                     homeAddress="jane@example.com")
    cleaned = recover_shifted_columns(record, context)
    assert cleaned.fields["email"] == "jane@example.com"
    assert cleaned.fields["mobilePhone"] == "206-555-1234"
    assert cleaned.warnings
    assert record.fields["email"] == "206-555-1234"


def test_phone_in_email_column_without_replacement_clears_email(working, context):
    record = working(firstName="Jane", lastName="Doe", email="206-555-1234", mobilePhone="425-555-7788")
    cleaned = recover_shifted_columns(record, context)
    assert cleaned.fields["email"] == ""
    assert cleaned.fields["mobilePhone"] == "425-555-7788"


def test_zip_in_phone_column_is_replaced(working, context):
    record = working(firstName="Jane", lastName="Doe", mobilePhone="98101", _homePhone="425-555-7788")
    cleaned = recover_shifted_columns(record, context)
    assert cleaned.fields["mobilePhone"] == "425-555-7788"


def test_clean_record_is_returned_unchanged(working, context):
    record = working(firstName="Jane", lastName="Doe", email="jane@example.com", mobilePhone="4255557788")
    assert recover_shifted_columns(record, context) is record


def test_name_annotations_are_stripped(working, context):
    record = working(firstName="John | VIP client", lastName="Smith (Acme Corp)")
    cleaned = strip_name_annotations(record, context)
    assert (cleaned.fields["firstName"], cleaned.fields["lastName"]) == ("John", "Smith")


@pytest.mark.parametrize("first,last,expected", [
    ("John and Jane", "Smith", ("John", "Smith")),
    ("John Smith", "", ("John", "Smith")),
    ("Mary Ann", "& Bob Jones", ("Mary", "Ann")),
    ("John", "Smith", ("John", "Smith")),
])
def test_split_name_pair(first, last, expected):
    assert split_name_pair(first, last) == expected


def test_multi_person_names_keep_first_person(working, context):
    record = working(firstName="John & Jane Smith", lastName="")
    cleaned = split_multi_person_names(record, context)
    assert cleaned.fields["firstName"] == "John"
    assert cleaned.fields["lastName"] == "& Jane Smith"

    cleaned = strip_last_name_junk(cleaned, context)
    assert cleaned.fields["lastName"] == "Jane Smith"


def test_last_name_parentheses_are_trimmed(working, context):
    record = working(firstName="John", lastName="(Smith)")
    assert strip_last_name_junk(record, context).fields["lastName"] == "Smith"


def test_event_suffix_reduced_to_surname(working, context):
    record = working(firstName="Anna", lastName="Peterson Wedding")
    cleaned = detect_event_names(record, context)
    assert cleaned.fields["lastName"] == "Peterson"
    assert not cleaned.is_business_entry


def test_event_without_surname_is_flagged(working, context):
    record = working(firstName="Grand", lastName="Hotel Ballroom Reception")
    assert detect_event_names(record, context).is_business_entry


@pytest.mark.parametrize("first,last", [
    ("Accounts Payable", "Dept"),
    ("Billing", "Acme"),
    ("VIP", "Guest"),
    ("Test", "User"),
])
def test_business_entries_are_flagged(working, context, first, last):
    record = working(firstName=first, lastName=last)
    assert detect_business_entries(record, context).is_business_entry


def test_people_are_not_business_entries(working, context):
    record = working(firstName="Jane", lastName="Doe")
    assert not detect_business_entries(record, context).is_business_entry
    assert not is_non_person_name("Jane", "Doe")


def test_phone_fallback_prefers_home_then_office(working, context):
    record = working(firstName="Jane", lastName="Doe", _homePhone="", _officePhone="2065554321")
    cleaned = apply_phone_fallback(record, context)
    assert cleaned.fields["mobilePhone"] == "+1 206-555-4321"
    assert not cleaned.uses_placeholder_phone
    assert cleaned.warnings == ["Using officePhone +1 206-555-4321 as mobile phone"]


def test_phone_fallback_issues_placeholder(working, context):
    first = apply_phone_fallback(working(firstName="Jane", lastName="Doe"), context)
    second = apply_phone_fallback(working(firstName="Joe", lastName="Doe"), context)
    assert first.fields["mobilePhone"] == "+1 202-555-0100"
    assert second.fields["mobilePhone"] == "+1 202-555-0101"
    assert first.uses_placeholder_phone


def test_multiple_emails_keep_first(working, context):
    record = working(email="a@example.com; b@example.com")
    assert reduce_multiple_emails(record, context).fields["email"] == "a@example.com"


def test_multiple_emails_with_mixed_separators(working, context):
    record = working(email=" a@example.com ;b@example.com, c@example.com")
    cleaned = reduce_multiple_emails(record, context)
    assert cleaned.fields["email"] == "a@example.com"
    assert cleaned.warnings == ["Multiple emails found, using first: a@example.com"]


@pytest.mark.parametrize("value,expected", [
    ("a@example.com; b@example.com", ["a@example.com", "b@example.com"]),
    ("a@example.com,b@example.com;", ["a@example.com", "b@example.com"]),
    ("a@example.com", ["a@example.com"]),
    ("", []),
])
def test_split_emails(value, expected):
    assert split_emails(value) == expected


def test_extract_primary_email():
    assert extract_primary_email("; a@example.com, b@example.com") == "a@example.com"
    assert extract_primary_email("") == ""


def test_address_is_rebuilt_from_components(working, context):
    record = working(_street="123 Pine St", _city="Seattle", _state="wa", _zip="98101")
    assert rebuild_address(record, context).fields["homeAddress"] == "123 Pine St, Seattle, WA, 98101"


def test_city_in_state_column_is_shifted_back(working, context):
    record = working(_street="123 Pine St", _city="", _state="Seattle", _zip="WA")
    cleaned = rebuild_address(record, context)
    assert cleaned.fields["homeAddress"] == "123 Pine St, Seattle, WA"
    assert 'City "Seattle" found in State column' in cleaned.warnings


def test_garbage_street_is_dropped(working, context):
    record = working(_street="TBD", _city="Bellevue", _state="WA")
    assert rebuild_address(record, context).fields["homeAddress"] == "Bellevue, WA"


def test_existing_address_is_kept(working, context):
    record = working(homeAddress="1 Main St", _street="2 Other St")
    assert rebuild_address(record, context).fields["homeAddress"] == "1 Main St"


def test_scratch_fields_are_purged(working, context):
    record = working(firstName="Jane", _homePhone="1", _street="x")
    assert not [key for key in purge_scratch_fields(record, context).fields if key.startswith("_")]


def test_full_fold_repairs_a_messy_row(working, context):
    record = working(
        firstName="John and Jane | Gold member",
        lastName="Smith",
        email="john@example.com;jane@example.com",
        _homePhone="(206) 555-1234",
        _street="123 Pine St",
        _city="Seattle",
        _state="WA",
    )
    cleaned = run_cleaning_steps(record, context, CONTACT_CLEANING_STEPS)
    assert cleaned.fields == {
        "firstName": "John",
        "lastName": "Smith",
        "email": "john@example.com",
        "mobilePhone": "+1 206-555-1234",
        "homeAddress": "123 Pine St, Seattle, WA",
    }
    assert not cleaned.is_business_entry


@pytest.mark.parametrize("value,expected", [
    ("Smith, John", ("John", "Smith")),
    ("John Smith | Acme Inc", ("John", "Smith")),
    ("Jane Doe (Microsoft)", ("Jane", "Doe")),
    ("Stretch Limo", ("", "")),
    ("12 pax", ("", "")),
    ("Fuel Surcharge", ("", "")),
    ("Front Desk", ("", "")),
    ("Guest 1", ("", "")),
    ("Dick Van Dyke", ("Dick", "Van Dyke")),
    ("James Van Der Beek", ("James", "Van Der Beek")),
    ("Van Der Beek, James", ("James", "Van Der Beek")),
    ("Sprinter Van", ("", "")),
    ("15 pax van", ("", "")),
    ("Van", ("", "")),
    ("Parking Fee", ("", "")),
    ("Bob Toll", ("Bob", "Toll")),
    ("Amy Coach", ("Amy", "Coach")),
    ("", ("", "")),
])
def test_clean_full_name(value, expected):
    assert clean_full_name(value) == expected


@pytest.mark.parametrize("value,expected", [
    ("206-555-1234", True),
    ("+1 (206) 555-1234 x12", True),
    ("98101", False),
    ("jane@example.com", False),
])
def test_looks_like_phone(value, expected):
    assert looks_like_phone(value) is expected


@pytest.mark.parametrize("first,last,expected", [
    ("Jane", "Doe", True),
    ("Bob", "Van Dyke", True),
    ("Jane", "", False),
    ("", "Doe", False),
    ("Billing", "Dept", False),
    ("(Jane)", "Doe", False),
    ("Jane", "& Bob", False),
    ("Jane", "-Doe", False),
    ("ACME", "Corp", False),
    ("BOB", "Smith", True),
])
def test_looks_like_person_name(first, last, expected):
    assert looks_like_person_name(first, last) is expected


@pytest.mark.parametrize("value,expected", [
    ("Black SUV", True),
    ("Mercedes Sprinter Van", True),
    ("12-passenger van", True),
    ("Airport Parking Fee", True),
    ("Gratuity 20%", True),
    ("Dispatch Office", True),
    ("Dick Van Dyke", False),
    ("Abraham Lincoln", False),
    ("Lincoln", False),
    ("Ann Fee", False),
])
def test_is_reservation_non_person(value, expected):
    assert is_reservation_non_person(value) is expected

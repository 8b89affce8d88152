import pytest

from moovs_data_prep.schemas import Contact, Reservation
from moovs_data_prep.validation import duplicate_detection_system


def test_same_phone_forms_one_group():
    groups = duplicate_detection_system.detect([
        Contact(first_name="Bob", last_name="Jones", mobile_phone="2065559999"),
        Contact(first_name="Rob", last_name="Smith", mobile_phone="(206) 555-9999"),
    ])
    assert len(groups) == 1
    assert groups[0].match_reason == "phone"
    assert groups[0].row_indices == [0, 1]


def test_email_and_name_groups():
    groups = duplicate_detection_system.detect([
        Contact(first_name="Ann", last_name="Lee", email="ann@example.com"),
        Contact(first_name="Annie", last_name="Lee", email="ANN@example.com"),
        Contact(first_name="Sam", last_name="Park"),
        Contact(first_name="sam", last_name="PARK"),
    ])
    assert [(g.match_reason, g.row_indices) for g in groups] == [("email", [0, 1]), ("name", [2, 3])]


def test_groups_are_disjoint():
    records = [
        Contact(first_name="A", last_name="One", email="shared@example.com", mobile_phone="2065550001"),
        Contact(first_name="B", last_name="Two", email="b@example.com", mobile_phone="2065550001"),
        Contact(first_name="C", last_name="Three", email="shared@example.com", mobile_phone="2065550003"),
        Contact(first_name="C", last_name="Three", email="c@example.com", mobile_phone="2065550004"),
    ]
    groups = duplicate_detection_system.detect(records)
    seen = [index for group in groups for index in group.row_indices]
    assert len(seen) == len(set(seen))
    assert [g.match_reason for g in groups] == ["phone", "name"]
    assert groups[1].row_indices == [2, 3]


def test_reservations_compare_booking_contact():
    groups = duplicate_detection_system.detect([
        Reservation(booking_contact_first_name="John", booking_contact_last_name="Smith",
                    booking_contact_email="john@example.com"),
        Reservation(booking_contact_first_name="Jon", booking_contact_last_name="Smith",
                    booking_contact_email="john@example.com"),
    ])
    assert [g.match_reason for g in groups] == ["email"]


def test_resolve_group_keeps_chosen_member():
    records = [
        Contact(first_name="Bob", last_name="Jones", mobile_phone="2065559999"),
        Contact(first_name="Jane", last_name="Doe"),
        Contact(first_name="Rob", last_name="Jones", mobile_phone="2065559999"),
    ]
    groups = duplicate_detection_system.detect(records)
    kept = duplicate_detection_system.resolve_group(records, groups, 0, keep_index=1)
    assert [r.first_name for r in kept] == ["Jane", "Rob"]


def test_resolve_all_defaults_to_first_member():
    records = [
        Contact(first_name="Bob", last_name="Jones", mobile_phone="2065559999"),
        Contact(first_name="Rob", last_name="Jones", mobile_phone="2065559999"),
        Contact(first_name="Ann", last_name="Lee", email="ann@example.com"),
        Contact(first_name="Annie", last_name="Lee", email="ann@example.com"),
    ]
    groups = duplicate_detection_system.detect(records)
    kept = duplicate_detection_system.resolve_all(records, groups, {1: 1})
    assert [r.first_name for r in kept] == ["Bob", "Annie"]
    assert duplicate_detection_system.detect(kept) == []


def test_invalid_keep_index_is_rejected():
    records = [
        Contact(first_name="Bob", last_name="Jones", mobile_phone="2065559999"),
        Contact(first_name="Rob", last_name="Jones", mobile_phone="2065559999"),
    ]
    groups = duplicate_detection_system.detect(records)
    with pytest.raises(IndexError):
        duplicate_detection_system.rows_to_remove(groups, {0: 5})

"""
Shared fixtures for the data prep test suite
"""
from typing import Dict, List

import pytest

from moovs_data_prep.cleaning import CleaningContext, PlaceholderAllocator, WorkingRecord
from moovs_data_prep.validation import RecordValidator

BASE_PHONE = "+1 202-555-0100"


def make_csv(headers: List[str], rows: List[List[str]]) -> bytes:
    """Encode a small CSV file, quoting every cell"""
    def line(values):
        return ",".join('"' + value.replace('"', '""') + '"' for value in values)

    return ("\n".join([line(headers)] + [line(row) for row in rows]) + "\n").encode("utf-8")


def contact_row(**values: str) -> Dict[str, str]:
    row = {"firstName": "", "lastName": "", "email": "", "mobilePhone": ""}
    row.update(values)
    return row


@pytest.fixture
def allocator():
    return PlaceholderAllocator(base_phone=BASE_PHONE)


@pytest.fixture
def context(allocator):
    return CleaningContext(allocator=allocator)


@pytest.fixture
def working():
    """Factory for WorkingRecords built from keyword fields"""
    def _make(**values: str) -> WorkingRecord:
        return WorkingRecord.from_mapped(contact_row(**values))
    return _make


@pytest.fixture
def validator():
    return RecordValidator("op_123", base_phone=BASE_PHONE)


LIMO_CONTACT_HEADERS = [
    "First Name", "Last Name", "Cell Phone", "Home Phone", "Email Addresses",
    "Primary Address", "City", "State", "Zip",
]

LIMO_CONTACT_ROWS = [
    ["John", "Smith", "2065551234", "", "", "123 Pine St", "Seattle", "WA", "98101"],
    ["Jane", "Doe", "", "4255557788", "jane@example.com", "", "", "", ""],
    ["Accounts Payable", "Dept", "", "", "ap@acme.com", "", "", "", ""],
    ["Bob", "Jones", "2065559999", "", "bob@example.com", "", "", "", ""],
    ["Rob", "Jones", "2065559999", "", "rob@example.com", "", "", "", ""],
]

LIMO_RESERVATION_HEADERS = [
    "Conf #", "Pick Up Date", "Pick Up Time", "Service Type", "Pax #",
    "Pick Up Address", "Drop Off Address", "Billing Contact", "Passenger Name",
    "Vehicle Type", "Base Rate",
]

LIMO_RESERVATION_ROWS = [
    ["1001", "03/05/2024", "4:30 PM", "Airport Pickup", "2", "", "SEA Airport",
     "Smith, John", "", "Sedan", "$125.00"],
    ["1002", "03/06/2024", "9:00 AM", "Wedding", "4", "Hotel Monaco", "St. Mark's Cathedral",
     "Lee, Max", "", "Stretch Limo", "$500"],
    ["1003", "03/07/2024", "10:00 AM", "Transfer", "1", "A", "B", "", "", "Sedan", ""],
]

LOOKUP_CONTACTS_CSV = make_csv(
    ["firstName", "lastName", "email", "mobilePhone"],
    [
        ["John", "Smith", "john@example.com", "+1 206-555-1234"],
        ["Amy", "Lee", "", "+1 202-555-0104"],
    ],
)


@pytest.fixture
def contacts_csv() -> bytes:
    return make_csv(LIMO_CONTACT_HEADERS, LIMO_CONTACT_ROWS)


@pytest.fixture
def reservations_csv() -> bytes:
    return make_csv(LIMO_RESERVATION_HEADERS, LIMO_RESERVATION_ROWS)


@pytest.fixture
def lookup_csv() -> bytes:
    return LOOKUP_CONTACTS_CSV

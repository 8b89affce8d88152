"""
Canonical import schemas

Typed Contact and Reservation records whose field order is the export column
order, plus the shared value objects passed between processing stages.
"""
from dataclasses import dataclass, field, fields, replace
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional


class Workflow(Enum):
    """Import workflows"""
    CONTACTS = "contacts"
    RESERVATIONS = "reservations"


class SourceFormat(Enum):
    """Known source export formats"""
    LIMOANYWHERE = "limoanywhere"
    CUSTOM = "custom"


class IssueType(Enum):
    """Field-level issue types. INFO issues never block an import."""
    MISSING = "missing"
    INVALID = "invalid"
    DUPLICATE = "duplicate"
    INFO = "info"


ORDER_TYPES = (
    'airport', 'airport-drop-off', 'airport-pick-up', 'bachelor-bachelorette', 'bar',
    'bar-bat-mitzvah', 'baseball', 'basketball', 'birthday', 'birthday-21', 'brew-tour',
    'bridal-party', 'bride-groom', 'business-trip', 'concert', 'corporate', 'family-reunion',
    'field-trip', 'football', 'funeral', 'golf', 'graduation', 'hockey', 'holiday', 'kids-birthday',
    'leisure', 'medical', 'night-out', 'personal-trip', 'point-to-point', 'prom-homecoming',
    'quinceanera', 'retail', 'school', 'school-fundraiser', 'seaport', 'special-occasion',
    'sporting-event', 'sweet-16', 'train-station', 'wedding', 'wine-tour',
)

DEFAULT_ORDER_TYPE = 'point-to-point'


def _column(name: str):
    return field(default="", metadata={"column": name})


class CanonicalRecord:
    """Column-name access shared by the canonical record types"""

    @classmethod
    def columns(cls) -> List[str]:
        """Export column names in canonical order"""
        return [f.metadata["column"] for f in fields(cls)]

    @classmethod
    def _attributes(cls) -> Dict[str, str]:
        return {f.metadata["column"]: f.name for f in fields(cls)}

    @classmethod
    def from_fields(cls, values: Mapping[str, Any]):
        """Build a record from column-keyed values; unknown and scratch keys are ignored"""
        attributes = cls._attributes()
        kwargs = {}
        for column, value in values.items():
            attr = attributes.get(column)
            if attr is not None:
                kwargs[attr] = "" if value is None else str(value)
        return cls(**kwargs)

    def get(self, column: str) -> str:
        attr = self._attributes().get(column)
        if attr is None:
            raise KeyError(column)
        return getattr(self, attr)

    def set(self, column: str, value: str) -> None:
        attr = self._attributes().get(column)
        if attr is None:
            raise KeyError(column)
        setattr(self, attr, value)

    def to_row(self) -> Dict[str, str]:
        """Column-keyed values in canonical order"""
        return {f.metadata["column"]: getattr(self, f.name) for f in fields(self)}

    def copy(self):
        return replace(self)


@dataclass
class Contact(CanonicalRecord):
    """Contact import row"""
    operator_id: str = _column("operatorId")
    first_name: str = _column("firstName")
    last_name: str = _column("lastName")
    mobile_phone: str = _column("mobilePhone")
    email: str = _column("email")
    home_address: str = _column("homeAddress")
    work_address: str = _column("workAddress")
    preferences: str = _column("preferences")


@dataclass
class Reservation(CanonicalRecord):
    """Reservation import row"""
    operator_id: str = _column("operatorId")
    confirmation_number: str = _column("confirmationNumber")
    pick_up_date: str = _column("pickUpDate")
    pick_up_time: str = _column("pickUpTime")
    drop_off_date: str = _column("dropOffDate")
    drop_off_time: str = _column("dropOffTime")
    order_type: str = _column("orderType")
    total_group_size: str = _column("totalGroupSize")
    pick_up_address: str = _column("pickUpAddress")
    pick_up_notes: str = _column("pickUpNotes")
    drop_off_address: str = _column("dropOffAddress")
    drop_off_notes: str = _column("dropOffNotes")
    booking_contact_first_name: str = _column("bookingContactFirstName")
    booking_contact_last_name: str = _column("bookingContactLastName")
    booking_contact_email: str = _column("bookingContactEmail")
    booking_contact_phone_number: str = _column("bookingContactPhoneNumber")
    trip_contact_first_name: str = _column("tripContactFirstName")
    trip_contact_last_name: str = _column("tripContactLastName")
    trip_contact_email: str = _column("tripContactEmail")
    trip_contact_phone_number: str = _column("tripContactPhoneNumber")
    vehicle: str = _column("vehicle")
    trip_notes: str = _column("tripNotes")
    base_rate_amt: str = _column("baseRateAmt")
    stop1_address: str = _column("stop1Address")
    stop1_notes: str = _column("stop1Notes")
    stop2_address: str = _column("stop2Address")
    stop2_notes: str = _column("stop2Notes")
    stop3_address: str = _column("stop3Address")
    stop3_notes: str = _column("stop3Notes")
    stop4_address: str = _column("stop4Address")
    stop4_notes: str = _column("stop4Notes")
    stop5_address: str = _column("stop5Address")
    stop5_notes: str = _column("stop5Notes")
    stop6_address: str = _column("stop6Address")
    stop6_notes: str = _column("stop6Notes")
    stop7_address: str = _column("stop7Address")
    stop7_notes: str = _column("stop7Notes")
    stop8_address: str = _column("stop8Address")
    stop8_notes: str = _column("stop8Notes")
    stop9_address: str = _column("stop9Address")
    stop9_notes: str = _column("stop9Notes")
    stop10_address: str = _column("stop10Address")
    stop10_notes: str = _column("stop10Notes")


CONTACT_HEADERS = Contact.columns()
RESERVATION_HEADERS = Reservation.columns()


def record_type_for(workflow: Workflow):
    """Record class for a workflow"""
    return Contact if workflow == Workflow.CONTACTS else Reservation


def headers_for(workflow: Workflow) -> List[str]:
    return CONTACT_HEADERS if workflow == Workflow.CONTACTS else RESERVATION_HEADERS


@dataclass
class ColumnMapping:
    """Maps one source column (optionally combined with others) onto a target field"""
    source_column: str
    target_field: str
    transform: str = "none"
    combine_with: List[str] = field(default_factory=list)


@dataclass
class DataIssue:
    """A field-level problem found by the validator"""
    row_index: int
    field: str
    type: IssueType
    message: str
    current_value: Optional[str] = None
    suggested_value: Optional[str] = None

    @property
    def is_blocking(self) -> bool:
        return self.type != IssueType.INFO

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for reporting"""
        return {
            'row_index': self.row_index,
            'field': self.field,
            'type': self.type.value,
            'message': self.message,
            'current_value': self.current_value,
            'suggested_value': self.suggested_value,
        }


@dataclass
class ParsedContact:
    """Comparison view of one record used by duplicate detection"""
    row_index: int
    first_name: str
    last_name: str
    email: str
    phone: str
    original_data: CanonicalRecord


@dataclass
class DuplicateGroup:
    """Records colliding on one comparison key"""
    contacts: List[ParsedContact]
    match_reason: str

    @property
    def row_indices(self) -> List[int]:
        return [contact.row_index for contact in self.contacts]

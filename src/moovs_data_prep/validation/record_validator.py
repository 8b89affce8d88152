"""
Record validation

Re-derives field-level issues for a record set from scratch, independent of
how the records were produced. Validation never raises for bad data; every
problem becomes a DataIssue, with a suggested value where one can be derived.
"""
import re
from dataclasses import dataclass
from datetime import datetime
from typing import Iterable, List, Optional, Sequence

import structlog

from ..config import settings
from ..cleaning.order_types import is_valid_order_type, normalize_order_type
from ..schemas import (
    DEFAULT_ORDER_TYPE,
    CanonicalRecord,
    Contact,
    DataIssue,
    IssueType,
    Reservation,
    Workflow,
)
from .email_normalizer import generate_placeholder_email, is_placeholder_email, validate_email
from .phone_normalizer import PhoneNumberNormalizer, is_placeholder_phone, phone_normalizer

logger = structlog.get_logger(__name__)

DATE_PATTERN = re.compile(r'^\d{1,2}/\d{1,2}/\d{4}$')
TIME_PATTERN = re.compile(r'^\d{1,2}:\d{2}\s?(AM|PM)$', re.I)

DATE_FORMATS = [
    '%Y-%m-%d',
    '%Y/%m/%d',
    '%m-%d-%Y',
    '%m.%d.%Y',
    '%m/%d/%y',
    '%m/%d/%Y %H:%M',
    '%m/%d/%Y %I:%M %p',
    '%Y-%m-%dT%H:%M:%S',
    '%Y-%m-%d %H:%M:%S',
    '%b %d, %Y',
    '%B %d, %Y',
    '%d %b %Y',
]

TIME_FORMATS = [
    '%H:%M',
    '%H:%M:%S',
    '%I:%M%p',
    '%I:%M:%S %p',
    '%I%p',
    '%I %p',
    '%I.%M %p',
]

CONTACT_LABELS = {'bookingContact': 'Booking', 'tripContact': 'Trip'}


@dataclass
class ValidationOutcome:
    """Validated records (operator stamped, phones formatted) plus issues"""
    records: List[CanonicalRecord]
    issues: List[DataIssue]

    @property
    def ready_count(self) -> int:
        return ready_count(self.records, self.issues)


def suggest_date(value: str) -> Optional[str]:
    """MM/DD/YYYY form of a date written in another common layout"""
    text = (value or '').strip()
    for fmt in DATE_FORMATS:
        try:
            parsed = datetime.strptime(text, fmt)
        except ValueError:
            continue
        return f'{parsed.month:02d}/{parsed.day:02d}/{parsed.year}'
    return None


def suggest_time(value: str) -> Optional[str]:
    """H:MM AM/PM form of a time written in another common layout"""
    text = (value or '').strip().upper()
    for fmt in TIME_FORMATS:
        try:
            parsed = datetime.strptime(text, fmt)
        except ValueError:
            continue
        hour = parsed.hour % 12 or 12
        return f'{hour}:{parsed.minute:02d} {"AM" if parsed.hour < 12 else "PM"}'
    return None


class RecordValidator:
    """Per-field validation for contact and reservation records"""

    def __init__(
        self,
        operator_id: str,
        base_phone: Optional[str] = None,
        normalizer: Optional[PhoneNumberNormalizer] = None,
    ):
        self.operator_id = operator_id
        self.base_phone = base_phone or settings.default_base_phone
        self.normalizer = normalizer or phone_normalizer

    def validate(self, records: Sequence[CanonicalRecord], workflow: Workflow) -> ValidationOutcome:
        if workflow == Workflow.CONTACTS:
            return self.validate_contacts(records)
        return self.validate_reservations(records)

    def validate_contacts(self, records: Sequence[Contact]) -> ValidationOutcome:
        issues: List[DataIssue] = []
        validated = []

        for index, record in enumerate(records):
            result = record.copy()
            result.operator_id = self.operator_id

            self._require(record.first_name, index, 'firstName', 'First name is required', issues)
            self._require(record.last_name, index, 'lastName', 'Last name is required', issues)

            formatted = self._check_phone(
                record.mobile_phone, index, 'mobilePhone',
                missing='Phone number is required',
                placeholder='Using placeholder phone number (no phone was available)',
                issues=issues,
            )
            if formatted:
                result.mobile_phone = formatted

            self._check_email(
                record.email, record.first_name, record.last_name, record.mobile_phone,
                index, 'email',
                missing='Email is required',
                placeholder='Using placeholder email (no email was available)',
                issues=issues,
            )
            validated.append(result)

        self._log_summary(Workflow.CONTACTS, validated, issues)
        return ValidationOutcome(records=validated, issues=issues)

    def validate_reservations(self, records: Sequence[Reservation]) -> ValidationOutcome:
        issues: List[DataIssue] = []
        validated = []

        for index, record in enumerate(records):
            result = record.copy()
            result.operator_id = self.operator_id

            self._check_date(record.pick_up_date, index, 'pickUpDate', required=True, issues=issues)
            self._check_time(record.pick_up_time, index, 'pickUpTime', required=True, issues=issues)
            self._check_date(record.drop_off_date, index, 'dropOffDate', required=False, issues=issues)
            self._check_time(record.drop_off_time, index, 'dropOffTime', required=False, issues=issues)

            order_type = record.order_type.strip()
            if not order_type:
                result.order_type = DEFAULT_ORDER_TYPE
            elif not is_valid_order_type(order_type):
                issues.append(DataIssue(
                    row_index=index,
                    field='orderType',
                    type=IssueType.INVALID,
                    message='Invalid order type',
                    current_value=record.order_type,
                    suggested_value=normalize_order_type(order_type),
                ))
            else:
                result.order_type = order_type.lower()

            group_size = record.total_group_size.strip()
            if not group_size:
                issues.append(DataIssue(
                    row_index=index,
                    field='totalGroupSize',
                    type=IssueType.MISSING,
                    message='Number of passengers is required',
                    suggested_value='1',
                ))
            elif not group_size.isdigit() or int(group_size) < 1:
                issues.append(DataIssue(
                    row_index=index,
                    field='totalGroupSize',
                    type=IssueType.INVALID,
                    message='Invalid passenger count',
                    current_value=record.total_group_size,
                    suggested_value=self._suggest_group_size(group_size),
                ))

            self._require(record.pick_up_address, index, 'pickUpAddress', 'Pick up address is required', issues)
            self._require(record.drop_off_address, index, 'dropOffAddress', 'Drop off address is required', issues)

            for prefix in ('bookingContact', 'tripContact'):
                formatted = self._check_contact(record, index, prefix, issues)
                if formatted:
                    result.set(f'{prefix}PhoneNumber', formatted)

            self._require(record.vehicle, index, 'vehicle', 'Vehicle is required', issues)
            validated.append(result)

        self._log_summary(Workflow.RESERVATIONS, validated, issues)
        return ValidationOutcome(records=validated, issues=issues)

    def _check_contact(self, record: Reservation, index: int, prefix: str, issues: List[DataIssue]) -> Optional[str]:
        label = CONTACT_LABELS[prefix]
        first = record.get(f'{prefix}FirstName')
        last = record.get(f'{prefix}LastName')
        email = record.get(f'{prefix}Email')
        phone = record.get(f'{prefix}PhoneNumber')

        self._require(first, index, f'{prefix}FirstName', f'{label} contact first name is required', issues)
        self._require(last, index, f'{prefix}LastName', f'{label} contact last name is required', issues)
        self._check_email(
            email, first, last, phone, index, f'{prefix}Email',
            missing=f'{label} contact email is required',
            placeholder=f'{label} contact using placeholder email',
            issues=issues,
        )
        return self._check_phone(
            phone, index, f'{prefix}PhoneNumber',
            missing=f'{label} contact phone is required',
            placeholder=f'{label} contact using placeholder phone',
            issues=issues,
        )

    def _require(self, value: str, index: int, field_name: str, message: str, issues: List[DataIssue]) -> bool:
        if (value or '').strip():
            return True
        issues.append(DataIssue(row_index=index, field=field_name, type=IssueType.MISSING, message=message))
        return False

    def _check_phone(
        self,
        phone: str,
        index: int,
        field_name: str,
        missing: str,
        placeholder: str,
        issues: List[DataIssue],
    ) -> Optional[str]:
        """Record phone issues; returns the formatted number when valid"""
        if not self._require(phone, index, field_name, missing, issues):
            return None
        if is_placeholder_phone(phone, self.base_phone):
            issues.append(DataIssue(
                row_index=index,
                field=field_name,
                type=IssueType.INFO,
                message=placeholder,
                current_value=phone,
            ))
            return None

        result = self.normalizer.validate(phone)
        if not result.is_valid:
            issues.append(DataIssue(
                row_index=index,
                field=field_name,
                type=IssueType.INVALID,
                message=result.error or 'Invalid phone number',
                current_value=phone,
                suggested_value=result.suggestion,
            ))
            return None
        return result.formatted

    def _check_email(
        self,
        email: str,
        first: str,
        last: str,
        phone: str,
        index: int,
        field_name: str,
        missing: str,
        placeholder: str,
        issues: List[DataIssue],
    ) -> None:
        if not (email or '').strip():
            suggested = (
                generate_placeholder_email(first, last, phone or None)
                if first and last else None
            )
            issues.append(DataIssue(
                row_index=index,
                field=field_name,
                type=IssueType.MISSING,
                message=missing,
                suggested_value=suggested,
            ))
        elif is_placeholder_email(email):
            issues.append(DataIssue(
                row_index=index,
                field=field_name,
                type=IssueType.INFO,
                message=placeholder,
                current_value=email,
            ))
        else:
            result = validate_email(email)
            if not result.is_valid:
                issues.append(DataIssue(
                    row_index=index,
                    field=field_name,
                    type=IssueType.INVALID,
                    message=result.error or 'Invalid email format',
                    current_value=email,
                    suggested_value=self._suggest_email(email),
                ))

    def _check_date(self, value: str, index: int, field_name: str, required: bool, issues: List[DataIssue]) -> None:
        text = (value or '').strip()
        if not text:
            if required:
                issues.append(DataIssue(
                    row_index=index,
                    field=field_name,
                    type=IssueType.MISSING,
                    message='Pick up date is required (MM/DD/YYYY)',
                ))
            return
        if not DATE_PATTERN.match(text):
            issues.append(DataIssue(
                row_index=index,
                field=field_name,
                type=IssueType.INVALID,
                message='Invalid date format. Use MM/DD/YYYY',
                current_value=value,
                suggested_value=suggest_date(text),
            ))

    def _check_time(self, value: str, index: int, field_name: str, required: bool, issues: List[DataIssue]) -> None:
        text = (value or '').strip()
        if not text:
            if required:
                issues.append(DataIssue(
                    row_index=index,
                    field=field_name,
                    type=IssueType.MISSING,
                    message='Pick up time is required (HH:MM AM/PM)',
                ))
            return
        if not TIME_PATTERN.match(text):
            issues.append(DataIssue(
                row_index=index,
                field=field_name,
                type=IssueType.INVALID,
                message='Invalid time format. Use HH:MM AM/PM (e.g., 4:34 AM)',
                current_value=value,
                suggested_value=suggest_time(text),
            ))

    def _suggest_group_size(self, value: str) -> Optional[str]:
        match = re.match(r'^\s*(\d+)', value)
        if match and int(match.group(1)) >= 1:
            return str(int(match.group(1)))
        return None

    def _suggest_email(self, email: str) -> Optional[str]:
        candidate = re.sub(r'\s+', '', email).strip(';,').lower()
        if candidate != email and validate_email(candidate).is_valid:
            return candidate
        return None

    def _log_summary(self, workflow: Workflow, records: Sequence[CanonicalRecord], issues: List[DataIssue]) -> None:
        counts = {}
        for issue in issues:
            counts[issue.type.value] = counts.get(issue.type.value, 0) + 1
        logger.info(
            "Validation completed",
            workflow=workflow.value,
            records=len(records),
            ready=ready_count(records, issues),
            issues=counts,
        )


def ready_count(records: Sequence[CanonicalRecord], issues: Iterable[DataIssue]) -> int:
    """Records with no blocking (non-info) issue"""
    blocked = {issue.row_index for issue in issues if issue.is_blocking}
    return len(records) - len(blocked)


def auto_fix(records: Sequence[CanonicalRecord], issues: Iterable[DataIssue]) -> List[CanonicalRecord]:
    """Apply every suggested value on missing/invalid issues; callers re-validate"""
    fixed = [record.copy() for record in records]
    applied = 0
    for issue in issues:
        if issue.suggested_value and issue.type in (IssueType.MISSING, IssueType.INVALID):
            fixed[issue.row_index].set(issue.field, issue.suggested_value)
            applied += 1
    logger.info("Applied suggested fixes", fixes=applied)
    return fixed


def generate_placeholder_emails(records: Sequence[CanonicalRecord]) -> List[CanonicalRecord]:
    """Fill every missing email that has a full name with its placeholder email"""
    updated = []
    for record in records:
        record = record.copy()
        if isinstance(record, Contact):
            sides = [('email', 'firstName', 'lastName', 'mobilePhone')]
        else:
            sides = [
                (f'{prefix}Email', f'{prefix}FirstName', f'{prefix}LastName', f'{prefix}PhoneNumber')
                for prefix in ('bookingContact', 'tripContact')
            ]
        for email_key, first_key, last_key, phone_key in sides:
            first, last = record.get(first_key), record.get(last_key)
            if not record.get(email_key) and first and last:
                record.set(email_key, generate_placeholder_email(first, last, record.get(phone_key) or None))
        updated.append(record)
    return updated

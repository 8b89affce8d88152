"""
Reservation transform pipeline

Per record: order type and group size defaults, contact name cleanup,
booking/trip back-fill, lookup against imported contacts, placeholder
emails, phone formatting with placeholder fallback, and static placeholder
addresses. Records without any named contact are dropped.
"""
import re
from typing import Dict, List, Optional, Sequence

import structlog

from ..cleaning.order_types import normalize_order_type
from ..cleaning.field_cleaners import (
    clean_full_name,
    split_name_pair,
    strip_annotations,
    strip_leading_junk,
)
from ..cleaning.placeholders import PlaceholderAllocator
from ..lookup.contact_lookup import ContactLookup
from ..schemas import Reservation
from ..validation.email_normalizer import generate_placeholder_email
from ..validation.phone_normalizer import PhoneNumberNormalizer, phone_normalizer
from .results import DroppedRow, PipelineResult

logger = structlog.get_logger(__name__)

CONTACT_SIDES = {
    'bookingContact': '_bookingFullName',
    'tripContact': '_passengerFullName',
}
CONTACT_PARTS = ('FirstName', 'LastName', 'Email', 'PhoneNumber')


def clean_rate(value: str) -> str:
    """Strip currency formatting ($1,250.00 becomes 1250.00); other text is kept"""
    text = (value or '').strip()
    candidate = re.sub(r'[$,\s]', '', text)
    if re.fullmatch(r'-?\d+(\.\d+)?', candidate):
        return candidate
    return text


class ReservationPipeline:
    """Turns mapped reservation rows into clean Reservation records"""

    def __init__(
        self,
        allocator: PlaceholderAllocator,
        lookup: Optional[ContactLookup] = None,
        normalizer: Optional[PhoneNumberNormalizer] = None,
    ):
        self.allocator = allocator
        self.lookup = lookup
        self.normalizer = normalizer or phone_normalizer

    def run(self, rows: Sequence[Dict[str, str]]) -> PipelineResult:
        result = PipelineResult(input_count=len(rows))

        if self.lookup is not None:
            start = self.lookup.next_sequential_start()
            if start is not None:
                self.allocator.continue_from(start)

        for index, row in enumerate(rows):
            fields = {key: (value or '').strip() for key, value in row.items()}
            warnings: List[str] = []

            self._normalize_trip_details(fields, warnings)
            self._clean_contact_names(fields, warnings)
            self._backfill_contacts(fields)

            if not self._has_named_contact(fields):
                result.dropped.append(DroppedRow(index, 'No booking or trip contact name', dict(row)))
                continue

            if self.lookup is not None:
                self._apply_lookup(fields, warnings)
            self._fill_placeholder_emails(fields, warnings)
            self._format_phones(fields, warnings)
            self._apply_placeholder_addresses(fields, warnings)

            result.records.append(Reservation.from_fields(fields))
            result.source_rows.append(index)
            if warnings:
                result.warnings[index] = warnings

        if self.lookup is not None:
            result.stats['lookup'] = self.lookup.stats()

        logger.info(
            "Reservation pipeline completed",
            input_rows=result.input_count,
            output_rows=result.output_count,
            dropped=result.dropped_count,
            placeholder_phones=self.allocator.issued_count,
        )
        return result

    def _normalize_trip_details(self, fields: Dict[str, str], warnings: List[str]) -> None:
        original = fields.get('orderType', '')
        fields['orderType'] = normalize_order_type(original)
        if original and original.lower() != fields['orderType']:
            warnings.append(f'Order type "{original}" mapped to {fields["orderType"]}')

        if fields.get('totalGroupSize', '') in ('', '0'):
            fields['totalGroupSize'] = '1'

        if fields.get('baseRateAmt'):
            fields['baseRateAmt'] = clean_rate(fields['baseRateAmt'])

    def _clean_contact_names(self, fields: Dict[str, str], warnings: List[str]) -> None:
        for prefix, scratch in CONTACT_SIDES.items():
            first_key, last_key = f'{prefix}FirstName', f'{prefix}LastName'
            first = strip_annotations(fields.get(first_key, ''))
            last = strip_annotations(fields.get(last_key, ''))
            first, last = split_name_pair(first, last)
            last = strip_leading_junk(last)

            full_name = fields.get(scratch, '')
            if full_name and not (first or last):
                first, last = clean_full_name(full_name)
                if first or last:
                    warnings.append(f'Split "{full_name}" into "{first}" / "{last}"')
                else:
                    warnings.append(f'Ignored non-person name "{full_name}"')

            fields[first_key] = first
            fields[last_key] = last

    def _backfill_contacts(self, fields: Dict[str, str]) -> None:
        """Copy each empty contact part from the other side"""
        for part in CONTACT_PARTS:
            booking_key, trip_key = f'bookingContact{part}', f'tripContact{part}'
            booking, trip = fields.get(booking_key, ''), fields.get(trip_key, '')
            if not trip and booking:
                fields[trip_key] = booking
            elif not booking and trip:
                fields[booking_key] = trip

    def _has_named_contact(self, fields: Dict[str, str]) -> bool:
        return any(
            fields.get(f'{prefix}{part}')
            for prefix in CONTACT_SIDES
            for part in ('FirstName', 'LastName')
        )

    def _apply_lookup(self, fields: Dict[str, str], warnings: List[str]) -> None:
        """Fill empty email/phone from a matching imported contact"""
        for prefix in CONTACT_SIDES:
            email_key, phone_key = f'{prefix}Email', f'{prefix}PhoneNumber'
            match = self.lookup.find_contact(
                fields.get(f'{prefix}FirstName'),
                fields.get(f'{prefix}LastName'),
                fields.get(email_key),
            )
            if not match.found:
                continue
            filled = []
            if not fields.get(email_key) and match.email:
                fields[email_key] = match.email
                filled.append('email')
            if not fields.get(phone_key) and match.mobile_phone:
                fields[phone_key] = match.mobile_phone
                filled.append('phone')
            if filled:
                warnings.append(
                    f'{prefix} {" and ".join(filled)} taken from imported contacts '
                    f'({match.match_type} match, {match.confidence} confidence)'
                )

    def _fill_placeholder_emails(self, fields: Dict[str, str], warnings: List[str]) -> None:
        for prefix in CONTACT_SIDES:
            email_key = f'{prefix}Email'
            first, last = fields.get(f'{prefix}FirstName', ''), fields.get(f'{prefix}LastName', '')
            if fields.get(email_key) or not (first and last):
                continue
            fields[email_key] = generate_placeholder_email(first, last, fields.get(f'{prefix}PhoneNumber') or None)
            warnings.append(f'{prefix} email missing, using placeholder {fields[email_key]}')

    def _format_phones(self, fields: Dict[str, str], warnings: List[str]) -> None:
        booking_phone = self._formatted_or_placeholder(fields, 'bookingContact', warnings)
        fields['bookingContactPhoneNumber'] = booking_phone

        trip_raw = fields.get('tripContactPhoneNumber', '')
        trip_result = self.normalizer.validate(trip_raw) if trip_raw else None
        if trip_result is not None and trip_result.is_valid:
            fields['tripContactPhoneNumber'] = trip_result.formatted
        elif self._same_person(fields):
            fields['tripContactPhoneNumber'] = booking_phone
        else:
            fields['tripContactPhoneNumber'] = self._formatted_or_placeholder(fields, 'tripContact', warnings)

    def _formatted_or_placeholder(self, fields: Dict[str, str], prefix: str, warnings: List[str]) -> str:
        raw = fields.get(f'{prefix}PhoneNumber', '')
        if raw:
            result = self.normalizer.validate(raw)
            if result.is_valid:
                return result.formatted
        placeholder = self.allocator.next_phone_number()
        if raw:
            warnings.append(f'{prefix} phone "{raw}" could not be formatted, using placeholder {placeholder}')
        else:
            warnings.append(f'{prefix} phone missing, using placeholder {placeholder}')
        return placeholder

    def _same_person(self, fields: Dict[str, str]) -> bool:
        return (
            fields.get('bookingContactFirstName', '').lower() == fields.get('tripContactFirstName', '').lower()
            and fields.get('bookingContactLastName', '').lower() == fields.get('tripContactLastName', '').lower()
        )

    def _apply_placeholder_addresses(self, fields: Dict[str, str], warnings: List[str]) -> None:
        for key, placeholder in (
            ('pickUpAddress', self.allocator.pickup_address()),
            ('dropOffAddress', self.allocator.dropoff_address()),
        ):
            if not fields.get(key) and placeholder:
                fields[key] = placeholder
                warnings.append(f'{key} missing, using placeholder address')

"""
Field Mapping System

Maps arbitrary source column headers onto canonical import fields:
- Template-based mapping with per-format, per-workflow alias tables
- Normalized-name fallback for columns the template does not cover
- Known-format detection from header signatures
- Manual mapping edits and mapping application over raw rows
"""
import re
from typing import Dict, List, Optional, Sequence, Tuple

import structlog

from ..config import settings
from ..schemas import ColumnMapping, SourceFormat, Workflow, headers_for

logger = structlog.get_logger(__name__)


def _aliases(*pairs: Tuple[str, str]) -> List[ColumnMapping]:
    return [ColumnMapping(source_column=source, target_field=target) for source, target in pairs]


LIMOANYWHERE_CONTACT_MAPPINGS = _aliases(
    ('First Name', 'firstName'),
    ('Last Name', 'lastName'),
    ('Cell Phone', 'mobilePhone'),
    ('Email', 'email'),
    ('Mobile Phone', 'mobilePhone'),
    ('Cellular Phone', 'mobilePhone'),
    ('Cellular', 'mobilePhone'),
    ('Phone', 'mobilePhone'),
    # Fallback phones: cellular > home > office
    ('Home Phone', '_homePhone'),
    ('Home', '_homePhone'),
    ('Office Phone', '_officePhone'),
    ('Office', '_officePhone'),
    ('Work Phone', '_officePhone'),
    ('Business Phone', '_officePhone'),
    ('E-mail', 'email'),
    ('EmailAddress', 'email'),
    ('Email Address', 'email'),
    ('Email Addresses', 'email'),
    ('Emails', 'email'),
    ('Home Address', 'homeAddress'),
    ('Work Address', 'workAddress'),
    ('Address', 'homeAddress'),
    # Address components
    ('Primary Address', '_street'),
    ('Street', '_street'),
    ('City', '_city'),
    ('State', '_state'),
    ('Zip', '_zip'),
    ('Country', '_country'),
    ('Company Name', '_companyName'),
)

LIMOANYWHERE_RESERVATION_MAPPINGS = _aliases(
    ('Confirmation #', 'confirmationNumber'),
    ('Confirmation Number', 'confirmationNumber'),
    ('Conf #', 'confirmationNumber'),
    ('Conf#', 'confirmationNumber'),
    ('Pick Up Date', 'pickUpDate'),
    ('Pickup Date', 'pickUpDate'),
    ('PU Date', 'pickUpDate'),
    ('Pick Up Time', 'pickUpTime'),
    ('Pickup Time', 'pickUpTime'),
    ('PU Time', 'pickUpTime'),
    ('Drop Off Date', 'dropOffDate'),
    ('Dropoff Date', 'dropOffDate'),
    ('DO Date', 'dropOffDate'),
    ('Drop Off Time', 'dropOffTime'),
    ('Dropoff Time', 'dropOffTime'),
    ('DO Time', 'dropOffTime'),
    ('Service Type', 'orderType'),
    ('Trip Type', 'orderType'),
    ('Order Type', 'orderType'),
    ('Passengers', 'totalGroupSize'),
    ('Pax', 'totalGroupSize'),
    ('Pax #', 'totalGroupSize'),
    ('Group Size', 'totalGroupSize'),
    ('Pick Up Address', 'pickUpAddress'),
    ('Pickup Address', 'pickUpAddress'),
    ('PU Address', 'pickUpAddress'),
    ('From', 'pickUpAddress'),
    ('Pick Up Notes', 'pickUpNotes'),
    ('PU Notes', 'pickUpNotes'),
    ('Drop Off Address', 'dropOffAddress'),
    ('Dropoff Address', 'dropOffAddress'),
    ('DO Address', 'dropOffAddress'),
    ('To', 'dropOffAddress'),
    ('Drop Off Notes', 'dropOffNotes'),
    ('DO Notes', 'dropOffNotes'),
    # Booking contact
    ('Booking First Name', 'bookingContactFirstName'),
    ('Booker First Name', 'bookingContactFirstName'),
    ('Customer First Name', 'bookingContactFirstName'),
    ('Booking Last Name', 'bookingContactLastName'),
    ('Booker Last Name', 'bookingContactLastName'),
    ('Customer Last Name', 'bookingContactLastName'),
    ('Booking Email', 'bookingContactEmail'),
    ('Booker Email', 'bookingContactEmail'),
    ('Customer Email', 'bookingContactEmail'),
    ('Booking Phone', 'bookingContactPhoneNumber'),
    ('Booker Phone', 'bookingContactPhoneNumber'),
    ('Customer Phone', 'bookingContactPhoneNumber'),
    ('Billing Contact', '_bookingFullName'),
    ('Booking Contact', '_bookingFullName'),
    # Trip contact
    ('Passenger First Name', 'tripContactFirstName'),
    ('Rider First Name', 'tripContactFirstName'),
    ('Passenger Last Name', 'tripContactLastName'),
    ('Rider Last Name', 'tripContactLastName'),
    ('Passenger Email', 'tripContactEmail'),
    ('Rider Email', 'tripContactEmail'),
    ('Passenger Phone', 'tripContactPhoneNumber'),
    ('Rider Phone', 'tripContactPhoneNumber'),
    ('Passenger Name', '_passengerFullName'),
    # Vehicle
    ('Vehicle', 'vehicle'),
    ('Vehicle Type', 'vehicle'),
    ('Car Type', 'vehicle'),
    # Notes and rate
    ('Trip Notes', 'tripNotes'),
    ('Notes', 'tripNotes'),
    ('Base Rate', 'baseRateAmt'),
    ('Rate', 'baseRateAmt'),
    ('Price', 'baseRateAmt'),
    # Stops
    *[(f'Stop {n}', f'stop{n}Address') for n in range(1, 11)],
    *[(f'Stop {n} Address', f'stop{n}Address') for n in range(1, 11)],
    *[(f'Stop {n} Notes', f'stop{n}Notes') for n in range(1, 11)],
)

# Distinctive LimoAnywhere column names
LIMOANYWHERE_SIGNATURE_KEYWORDS = [
    'Pick Up Date', 'Pickup Date', 'PU Date', 'PU Time',
    'Pick Up Address', 'Pickup Address', 'PU Address',
    'Confirmation #', 'Conf #', 'Conf#',
    'Cell Phone', 'Mobile Phone', 'Cellular Phone',
    'Email Addresses', 'Account Type', 'Account Number',
    'Primary Address', 'Pax #', 'Service Type', 'Vehicle Type',
    'Passenger Name', 'Billing Contact', 'Trip Total',
]


class TemplateManager:
    """Alias tables per source format and workflow"""

    def __init__(self):
        self.templates: Dict[Tuple[SourceFormat, Workflow], List[ColumnMapping]] = {
            (SourceFormat.LIMOANYWHERE, Workflow.CONTACTS): LIMOANYWHERE_CONTACT_MAPPINGS,
            (SourceFormat.LIMOANYWHERE, Workflow.RESERVATIONS): LIMOANYWHERE_RESERVATION_MAPPINGS,
        }

    def known_mappings(self, source_format: SourceFormat, workflow: Workflow) -> List[ColumnMapping]:
        """Alias table for a format, empty for formats without a template"""
        return list(self.templates.get((source_format, workflow), []))


class FieldMappingSystem:
    """Auto-mapping, manual edits and application of column mappings"""

    def __init__(self):
        self.template_manager = TemplateManager()

    def auto_map(
        self,
        headers: Sequence[str],
        target_fields: Sequence[str],
        known_mappings: Sequence[ColumnMapping],
    ) -> List[ColumnMapping]:
        """Map headers using the alias table first, then normalized field names"""
        header_set = set(headers)
        used_headers = set()
        mappings: List[ColumnMapping] = []

        for mapping in known_mappings:
            if mapping.source_column in header_set and mapping.source_column not in used_headers:
                mappings.append(mapping)
                used_headers.add(mapping.source_column)

        mapped_targets = {m.target_field for m in mappings}
        for target in target_fields:
            if target in mapped_targets:
                continue
            key = self._normalize_name(target)
            match = next((h for h in headers if self._normalize_name(h) == key), None)
            if match is not None and match not in used_headers:
                mappings.append(ColumnMapping(source_column=match, target_field=target))
                used_headers.add(match)
                mapped_targets.add(target)

        logger.info(
            "Auto-mapped columns",
            headers=len(headers),
            mapped=len(mappings),
            unmapped_headers=[h for h in headers if h not in used_headers],
        )
        return mappings

    def map_for_workflow(
        self,
        headers: Sequence[str],
        workflow: Workflow,
        source_format: Optional[SourceFormat] = None,
    ) -> List[ColumnMapping]:
        """Auto-map when the format is known or detected; custom files start unmapped"""
        if source_format == SourceFormat.CUSTOM:
            return []
        if source_format is None and not self.is_known_source_format(headers):
            logger.info("Source format not recognized, manual mapping required", headers=len(headers))
            return []
        known = self.template_manager.known_mappings(SourceFormat.LIMOANYWHERE, workflow)
        return self.auto_map(headers, headers_for(workflow), known)

    def is_known_source_format(self, headers: Sequence[str]) -> bool:
        """At least N headers contain a signature keyword"""
        keywords = [kw.lower() for kw in LIMOANYWHERE_SIGNATURE_KEYWORDS]
        match_count = sum(
            1 for header in headers
            if any(kw in header.lower() for kw in keywords)
        )
        return match_count >= settings.format_detection_min_matches

    def update_mapping(
        self,
        mappings: Sequence[ColumnMapping],
        target_field: str,
        source_column: Optional[str],
    ) -> List[ColumnMapping]:
        """Replace the mapping for a target field; an empty source removes it"""
        updated = [m for m in mappings if m.target_field != target_field]
        if source_column:
            updated.append(ColumnMapping(source_column=source_column, target_field=target_field))
        return updated

    def resolve_mappings(
        self,
        headers: Sequence[str],
        mappings: Sequence[ColumnMapping],
    ) -> List[ColumnMapping]:
        """One mapping per target: the first whose source column is present"""
        header_set = set(headers)
        resolved: List[ColumnMapping] = []
        seen_targets = set()
        for mapping in mappings:
            if mapping.target_field in seen_targets:
                continue
            sources = [mapping.source_column]
            if mapping.transform == 'combine':
                sources.extend(mapping.combine_with)
            if not any(source in header_set for source in sources):
                continue
            resolved.append(mapping)
            seen_targets.add(mapping.target_field)
        return resolved

    def apply_mappings(
        self,
        headers: Sequence[str],
        rows: Sequence[Sequence[str]],
        mappings: Sequence[ColumnMapping],
    ) -> List[Dict[str, str]]:
        """Project raw rows onto target fields"""
        index = {}
        for position, header in enumerate(headers):
            index.setdefault(header, position)

        resolved = self.resolve_mappings(headers, mappings)
        records = []
        for row in rows:
            record: Dict[str, str] = {}
            for mapping in resolved:
                if mapping.transform == 'combine' and mapping.combine_with:
                    values = [
                        self._cell(row, index.get(column))
                        for column in [mapping.source_column, *mapping.combine_with]
                    ]
                    record[mapping.target_field] = ', '.join(v for v in values if v)
                else:
                    record[mapping.target_field] = self._cell(row, index.get(mapping.source_column))
            records.append(record)
        return records

    def _cell(self, row: Sequence[str], position: Optional[int]) -> str:
        if position is None or position >= len(row):
            return ''
        value = row[position]
        return '' if value is None else str(value).strip()

    def _normalize_name(self, name: str) -> str:
        return re.sub(r'[^a-z0-9]', '', name.lower())


# Global field mapping system instance
field_mapping_system = FieldMappingSystem()

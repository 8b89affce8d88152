"""
Field cleaners

Ordered, pure repair steps over one mapped record. Each step takes a
WorkingRecord and returns a new one; later steps rely on the repairs made by
earlier ones, so CONTACT_CLEANING_STEPS is applied in exactly this order:

1. column-shift recovery
2. pipe/parenthetical stripping on names
3. multi-person name splitting
4. leading-junk stripping on the last name
5. wedding/event detection
6. business-entry detection
7. phone fallback chain
8. multi-email reduction
9. address reconstruction
10. scratch-field purge
"""
import re
from dataclasses import dataclass, field, replace
from typing import Callable, Dict, Iterable, List, Optional, Sequence, Tuple

import structlog

from ..validation.email_normalizer import EMAIL_PATTERN, validate_email
from ..validation.phone_normalizer import PhoneNumberNormalizer, phone_normalizer
from .placeholders import PlaceholderAllocator
from .vocabulary import (
    CHARGE_NOUNS,
    CHARGE_QUALIFIERS,
    COMMON_CITIES,
    EVENT_KEYWORDS,
    GARBAGE_ADDRESS_PATTERNS,
    NON_PERSON_NAMES,
    PLACEHOLDER_NAME_PATTERNS,
    RESERVATION_NON_PERSON_PATTERNS,
    US_STATES,
    VEHICLE_NOUNS,
    VEHICLE_QUALIFIERS,
)

logger = structlog.get_logger(__name__)

EMBEDDED_EMAIL = re.compile(r'[^\s@;,<>"]+@[^\s@;,<>"]+\.[^\s@;,<>"]+')
PHONE_SHAPE = re.compile(r'^\+?[\d\s().\-]+(\s*(x|ext\.?)\s*\d+)?$', re.I)
ZIP_SHAPE = re.compile(r'^\d{5}(-\d{4})?$')
NAME_JOINERS = ('&', '-', '(')
SINGLE_NAME_TOKEN = re.compile(r"^[A-Za-z][A-Za-z'\-]*$")
WORD_TOKEN = re.compile(r"[a-z]+|\d+")
EMAIL_SEPARATORS = re.compile(r"[;,]")


@dataclass
class WorkingRecord:
    """
    Scratch view of one record while it is being cleaned.

    ``fields`` holds canonical and underscore-prefixed scratch values keyed by
    column name. Steps never mutate a record in place.
    """
    fields: Dict[str, str]
    warnings: List[str] = field(default_factory=list)
    is_business_entry: bool = False
    uses_placeholder_phone: bool = False
    original: Dict[str, str] = field(default_factory=dict)

    @classmethod
    def from_mapped(cls, values: Dict[str, str]) -> 'WorkingRecord':
        return cls(fields=dict(values), original=dict(values))

    def value(self, name: str) -> str:
        return (self.fields.get(name) or '').strip()

    def evolve(
        self,
        updates: Optional[Dict[str, str]] = None,
        warning: Optional[str] = None,
        **changes,
    ) -> 'WorkingRecord':
        """Copy with updated fields, an extra warning and attribute changes"""
        fields_copy = dict(self.fields)
        if updates:
            fields_copy.update(updates)
        warnings = list(self.warnings)
        if warning:
            warnings.append(warning)
        return replace(self, fields=fields_copy, warnings=warnings, **changes)


@dataclass
class CleaningContext:
    """Run-scoped collaborators for the cleaning steps"""
    allocator: PlaceholderAllocator
    normalizer: PhoneNumberNormalizer = phone_normalizer


CleaningStep = Callable[[WorkingRecord, CleaningContext], WorkingRecord]


# ---------------------------------------------------------------------------
# String helpers shared with the reservation pipeline
# ---------------------------------------------------------------------------

def looks_like_phone(value: str) -> bool:
    """Phone-shaped: only phone punctuation and 7 to 15 digits"""
    if not value or not PHONE_SHAPE.match(value.strip()):
        return False
    digit_count = len(re.sub(r'\D', '', value))
    return 7 <= digit_count <= 15


def find_embedded_email(value: str) -> Optional[str]:
    match = EMBEDDED_EMAIL.search(value or '')
    return match.group(0) if match else None


def strip_annotations(name: str) -> str:
    """Remove a trailing "| ..." suffix and a trailing parenthetical"""
    name = (name or '').strip()
    if '|' in name:
        name = name.split('|', 1)[0].strip()
    match = re.match(r'^(.+?)\s*\([^()]*\)\s*$', name)
    if match:
        name = match.group(1).strip()
    return name


def split_name_pair(first: str, last: str) -> Tuple[str, str]:
    """Keep the first person of a couple and split a full name held in the first-name slot"""
    first = (first or '').strip()
    last = (last or '').strip()

    match = re.search(r'\s+and\s+', first, re.I)
    if match:
        first = first[:match.start()].strip()

    if ' ' in first and (not last or last.startswith(NAME_JOINERS)):
        parts = first.split()
        first = parts[0]
        last = ' '.join(parts[1:])

    return first, last


def strip_leading_junk(last: str) -> str:
    """Trim leading '(', '&', '-' and whitespace runs and trailing ')'"""
    last = last or ''
    if re.match(r'^[(&\-\s]+', last):
        last = re.sub(r'^[(&\-\s]+', '', last)
        last = re.sub(r'\)+$', '', last)
    return last.strip()


def is_non_person_name(first: str, last: str) -> bool:
    """Organizational role or VIP/test/demo phrasing in either name column"""
    first = (first or '').strip().lower()
    last = (last or '').strip().lower()
    full = f'{first} {last}'.strip()

    if first in NON_PERSON_NAMES or last in NON_PERSON_NAMES or full in NON_PERSON_NAMES:
        return True
    return any(pattern.search(full) for pattern in PLACEHOLDER_NAME_PATTERNS)


def looks_like_person_name(first: str, last: str) -> bool:
    """Both names present, not a role, no leading bracket or joiner, and not an all-caps first name"""
    if not first or not last:
        return False
    if first.lower() in NON_PERSON_NAMES:
        return False
    if re.match(r'^[(\[{]', first) or re.match(r'^[(\[{&\-]', last):
        return False
    if first == first.upper() and len(first) > 3:
        return False
    return True


def describes_only(value: str, nouns: frozenset, qualifiers: frozenset) -> bool:
    """Every word is a noun or qualifier (numbers count as qualifiers) and at least one is a noun"""
    tokens = WORD_TOKEN.findall((value or '').lower())
    if not any(token in nouns for token in tokens):
        return False
    return all(token in nouns or token in qualifiers or token.isdigit() for token in tokens)


def is_reservation_non_person(value: str) -> bool:
    """Vehicle description, charge line or office name held in a reservation name cell"""
    if any(pattern.search(value) for pattern in RESERVATION_NON_PERSON_PATTERNS):
        return True
    return (
        describes_only(value, VEHICLE_NOUNS, VEHICLE_QUALIFIERS)
        or describes_only(value, CHARGE_NOUNS, CHARGE_QUALIFIERS)
    )


def split_emails(value: str) -> List[str]:
    if not value:
        return []
    return [part.strip() for part in EMAIL_SEPARATORS.split(value) if part.strip()]


def extract_primary_email(value: str) -> str:
    emails = split_emails(value)
    return emails[0] if emails else ''


def clean_full_name(value: str) -> Tuple[str, str]:
    """
    Split a single full-name cell into (first, last).

    Handles "Name | Description", a trailing "(Company)", "Last, First" and
    couples. Vehicle descriptions, charge lines and office names become empty.
    """
    value = strip_annotations(value)
    if not value:
        return '', ''

    if is_reservation_non_person(value):
        return '', ''
    if is_non_person_name(value, ''):
        return '', ''

    if ',' in value:
        last, _, first = value.partition(',')
        first, last = first.strip(), last.strip()
        if first and last:
            return split_name_pair(first, last)

    first, last = split_name_pair(value, '')
    return first, strip_leading_junk(last)


def has_any_name(values: Dict[str, str], first_key: str = 'firstName', last_key: str = 'lastName') -> bool:
    return bool((values.get(first_key) or '').strip() or (values.get(last_key) or '').strip())


# ---------------------------------------------------------------------------
# Cleaning steps
# ---------------------------------------------------------------------------

def recover_shifted_columns(record: WorkingRecord, context: CleaningContext) -> WorkingRecord:
    """Undo a one-column shift visible in the email and phone slots"""
    updates: Dict[str, str] = {}
    warnings: List[str] = []

    email = record.value('email')
    if email and not validate_email(email).is_valid and looks_like_phone(email):
        promoted = ''
        for key, value in record.fields.items():
            if key == 'email' or not value:
                continue
            candidate = find_embedded_email(value)
            if candidate and EMAIL_PATTERN.match(candidate):
                promoted = candidate
                break
        updates['email'] = promoted
        if not record.value('mobilePhone'):
            updates['mobilePhone'] = email
        warnings.append(
            f'Phone "{email}" found in email column; '
            + (f'using "{promoted}" as email' if promoted else 'email cleared')
        )

    phone = updates.get('mobilePhone', record.value('mobilePhone'))
    if phone and ZIP_SHAPE.match(phone):
        replacement = ''
        for key, value in record.fields.items():
            if key in ('mobilePhone', '_zip') or not value:
                continue
            if looks_like_phone(value.strip()) and not ZIP_SHAPE.match(value.strip()):
                replacement = value.strip()
                break
        updates['mobilePhone'] = replacement
        warnings.append(
            f'ZIP code "{phone}" found in phone column; '
            + (f'using "{replacement}" as phone' if replacement else 'phone cleared')
        )

    if not updates:
        return record
    result = record.evolve(updates)
    result.warnings.extend(warnings)
    return result


def strip_name_annotations(record: WorkingRecord, context: CleaningContext) -> WorkingRecord:
    first = strip_annotations(record.value('firstName'))
    last = strip_annotations(record.value('lastName'))
    if (first, last) == (record.value('firstName'), record.value('lastName')):
        return record
    return record.evolve(
        {'firstName': first, 'lastName': last},
        warning=f'Removed annotations from name "{record.value("firstName")} {record.value("lastName")}"',
    )


def split_multi_person_names(record: WorkingRecord, context: CleaningContext) -> WorkingRecord:
    first, last = split_name_pair(record.value('firstName'), record.value('lastName'))
    if (first, last) == (record.value('firstName'), record.value('lastName')):
        return record
    return record.evolve(
        {'firstName': first, 'lastName': last},
        warning=f'Split name "{record.value("firstName")}" into "{first}" / "{last}"',
    )


def strip_last_name_junk(record: WorkingRecord, context: CleaningContext) -> WorkingRecord:
    original = record.value('lastName')
    cleaned = strip_leading_junk(original)
    if cleaned == original:
        return record
    return record.evolve(
        {'lastName': cleaned},
        warning=f'Cleaned last name from "{original}" to "{cleaned}"',
    )


def detect_event_names(record: WorkingRecord, context: CleaningContext) -> WorkingRecord:
    last = record.value('lastName')
    match = EVENT_KEYWORDS.search(last)
    if not match:
        return record

    preceding = last[:match.start()].strip(' -&,')
    if SINGLE_NAME_TOKEN.match(preceding):
        return record.evolve(
            {'lastName': preceding},
            warning=f'Reduced event name "{last}" to "{preceding}"',
        )
    return record.evolve(
        warning=f'Event entry detected: "{last}"',
        is_business_entry=True,
    )


def detect_business_entries(record: WorkingRecord, context: CleaningContext) -> WorkingRecord:
    first = record.value('firstName')
    last = record.value('lastName')
    if record.is_business_entry or not is_non_person_name(first, last):
        return record
    full_name = f'{first} {last}'.strip()
    return record.evolve(
        warning=f'"{full_name}" appears to be a business/accounting entry, not a person',
        is_business_entry=True,
    )


def apply_phone_fallback(record: WorkingRecord, context: CleaningContext) -> WorkingRecord:
    """Mobile, then home, then office phone, then a placeholder number"""
    chosen = record.value('mobilePhone')
    source = 'mobilePhone'
    for fallback in ('_homePhone', '_officePhone'):
        if chosen:
            break
        chosen = record.value(fallback)
        source = fallback

    uses_placeholder = False
    if not chosen:
        chosen = context.allocator.next_phone_number()
        source = 'placeholder'
        uses_placeholder = True

    result = context.normalizer.validate(chosen)
    phone = result.formatted if result.is_valid else chosen

    warning = None
    if source == 'placeholder':
        warning = f'No phone available, using placeholder {phone}'
    elif source != 'mobilePhone':
        warning = f'Using {source.lstrip("_")} {phone} as mobile phone'
    return record.evolve(
        {'mobilePhone': phone},
        warning=warning,
        uses_placeholder_phone=uses_placeholder,
    )


def reduce_multiple_emails(record: WorkingRecord, context: CleaningContext) -> WorkingRecord:
    email = record.value('email')
    if ';' not in email:
        return record
    primary = extract_primary_email(email)
    return record.evolve(
        {'email': primary},
        warning=f'Multiple emails found, using first: {primary}',
    )


def rebuild_address(record: WorkingRecord, context: CleaningContext) -> WorkingRecord:
    """Build homeAddress from street/city/state/zip scratch fields"""
    if record.value('homeAddress'):
        return record

    street = record.value('_street')
    city = record.value('_city')
    state = record.value('_state')
    zip_code = record.value('_zip')
    if not (street or city or state or zip_code):
        return record

    warnings = []
    if street and any(pattern.search(street) for pattern in GARBAGE_ADDRESS_PATTERNS):
        warnings.append(f'Address "{street}" appears to be placeholder/garbage')
        street = ''

    if state and state.lower() in COMMON_CITIES:
        warnings.append(f'City "{state}" found in State column')
        if zip_code and zip_code.upper() in US_STATES:
            city = city or state
            state = zip_code
            zip_code = ''
        else:
            city = city or state
            state = ''

    if state and state.upper() in US_STATES:
        state = state.upper()

    address = ', '.join(part for part in (street, city, state, zip_code) if part)
    result = record.evolve({'homeAddress': address})
    result.warnings.extend(warnings)
    return result


def purge_scratch_fields(record: WorkingRecord, context: CleaningContext) -> WorkingRecord:
    kept = {key: value for key, value in record.fields.items() if not key.startswith('_')}
    return replace(record, fields=kept, warnings=list(record.warnings))


CONTACT_CLEANING_STEPS: Tuple[CleaningStep, ...] = (
    recover_shifted_columns,
    strip_name_annotations,
    split_multi_person_names,
    strip_last_name_junk,
    detect_event_names,
    detect_business_entries,
    apply_phone_fallback,
    reduce_multiple_emails,
    rebuild_address,
    purge_scratch_fields,
)


def run_cleaning_steps(
    record: WorkingRecord,
    context: CleaningContext,
    steps: Sequence[CleaningStep] = CONTACT_CLEANING_STEPS,
) -> WorkingRecord:
    """Fold a record through the cleaning steps in order"""
    for step in steps:
        record = step(record, context)
    if record.warnings:
        logger.debug(
            "Cleaned record",
            warnings=len(record.warnings),
            business_entry=record.is_business_entry,
            placeholder_phone=record.uses_placeholder_phone,
        )
    return record


def summarize_potential_issues(records: Iterable[WorkingRecord]) -> Dict[str, int]:
    """Counts of common data-quality problems across cleaned records"""
    summary = {
        'business_entries': 0,
        'multiple_emails': 0,
        'missing_names': 0,
        'unusual_names': 0,
        'missing_emails': 0,
        'missing_phones': 0,
    }
    for record in records:
        if record.is_business_entry:
            summary['business_entries'] += 1
        if ';' in (record.original.get('email') or ''):
            summary['multiple_emails'] += 1
        if not record.value('firstName') or not record.value('lastName'):
            summary['missing_names'] += 1
        elif not record.is_business_entry and not looks_like_person_name(record.value('firstName'), record.value('lastName')):
            summary['unusual_names'] += 1
        if not record.value('email'):
            summary['missing_emails'] += 1
        if not record.value('mobilePhone') or record.uses_placeholder_phone:
            summary['missing_phones'] += 1
    return summary

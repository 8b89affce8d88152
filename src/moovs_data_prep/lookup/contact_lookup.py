"""
Contact lookup for reservation processing

Resolves reservation-side contacts against a previously imported contact
list so reservations carry real emails and phones instead of placeholders.
"""
import re
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Mapping, Optional

import structlog

from ..validation.email_normalizer import is_placeholder_email, normalize_email

logger = structlog.get_logger(__name__)


@dataclass
class ContactRecord:
    """A previously imported contact"""
    first_name: str
    last_name: str
    email: str = ''
    mobile_phone: str = ''


@dataclass
class ContactMatch:
    """Result of one lookup"""
    match_type: str  # email | name | none
    confidence: str  # high | medium | low
    email: Optional[str] = None
    mobile_phone: Optional[str] = None

    @property
    def found(self) -> bool:
        return self.match_type != 'none'


def _name_key(first_name: Optional[str], last_name: Optional[str]) -> str:
    first = re.sub(r'[^a-z]', '', (first_name or '').strip().lower())
    last = re.sub(r'[^a-z]', '', (last_name or '').strip().lower())
    if not first or not last:
        return ''
    return f'{first}|{last}'


def _looks_like_placeholder_phone(phone: str) -> bool:
    return '555' in re.sub(r'\D', '', phone or '')


class ContactLookup:
    """Email and name indexes over an imported contact list"""

    def __init__(self, contacts: Iterable[ContactRecord], base_phone: Optional[str] = None):
        self.contacts: List[ContactRecord] = list(contacts)
        self.email_index: Dict[str, ContactRecord] = {}
        self.name_index: Dict[str, List[ContactRecord]] = {}
        self.highest_placeholder_phone: Optional[int] = None
        self.match_stats = {'email_matches': 0, 'name_matches': 0, 'no_matches': 0}

        self._build_indexes()
        if base_phone:
            self._find_highest_placeholder_phone(base_phone)

        logger.info(
            "Built contact lookup index",
            contacts=len(self.contacts),
            emails=len(self.email_index),
            names=len(self.name_index),
            highest_placeholder_phone=self.highest_placeholder_phone,
        )

    def _build_indexes(self) -> None:
        for contact in self.contacts:
            email = normalize_email(contact.email)
            if email and not is_placeholder_email(email):
                self.email_index[email] = contact

            key = _name_key(contact.first_name, contact.last_name)
            if key:
                self.name_index.setdefault(key, []).append(contact)

    def _find_highest_placeholder_phone(self, base_phone: str) -> None:
        base_digits = re.sub(r'\D', '', base_phone)
        prefix = base_digits[:-2]
        if not prefix:
            return

        highest = None
        for contact in self.contacts:
            digits = re.sub(r'\D', '', contact.mobile_phone or '')
            if digits and len(digits) == len(base_digits) and digits.startswith(prefix):
                value = int(digits)
                if highest is None or value > highest:
                    highest = value
        self.highest_placeholder_phone = highest

    def next_sequential_start(self) -> Optional[int]:
        """Number after the highest placeholder phone already in use, if any"""
        if self.highest_placeholder_phone is None:
            return None
        return self.highest_placeholder_phone + 1

    def find_contact(
        self,
        first_name: Optional[str],
        last_name: Optional[str],
        email: Optional[str] = None,
    ) -> ContactMatch:
        """Look up a contact by email, then by name"""
        normalized = normalize_email(email)
        if normalized and not is_placeholder_email(normalized):
            contact = self.email_index.get(normalized)
            if contact is not None:
                self.match_stats['email_matches'] += 1
                return ContactMatch(
                    match_type='email',
                    confidence='high',
                    email=contact.email,
                    mobile_phone=contact.mobile_phone,
                )

        key = _name_key(first_name, last_name)
        matches = self.name_index.get(key) if key else None
        if matches:
            best = next(
                (c for c in matches if c.mobile_phone and not _looks_like_placeholder_phone(c.mobile_phone)),
                matches[0],
            )
            self.match_stats['name_matches'] += 1
            return ContactMatch(
                match_type='name',
                confidence='medium' if len(matches) == 1 else 'low',
                email=best.email,
                mobile_phone=best.mobile_phone,
            )

        self.match_stats['no_matches'] += 1
        return ContactMatch(match_type='none', confidence='low')

    def stats(self) -> Dict[str, Any]:
        """Matching statistics"""
        return {
            **self.match_stats,
            'total_contacts': len(self.contacts),
            'total_lookups': sum(self.match_stats.values()),
        }

    def reset_stats(self) -> None:
        self.match_stats = {'email_matches': 0, 'name_matches': 0, 'no_matches': 0}


def parse_contacts_for_lookup(rows: Iterable[Mapping[str, str]]) -> List[ContactRecord]:
    """Keep rows with both names and at least an email or a phone"""
    contacts = []
    for row in rows:
        first = (row.get('firstName') or '').strip()
        last = (row.get('lastName') or '').strip()
        email = (row.get('email') or '').strip()
        phone = (row.get('mobilePhone') or '').strip()
        if first and last and (email or phone):
            contacts.append(ContactRecord(first_name=first, last_name=last, email=email, mobile_phone=phone))
    return contacts

"""
Duplicate Detection System

Groups records that collide on phone, email or full name and resolves
groups by keeping one record per group:
- Composite comparison keys built in priority order (phone, email, name)
- Greedy claiming so no record belongs to two surfaced groups
- Single-group and bulk "keep one" resolution in one filtering pass
"""
from typing import Dict, List, Optional, Sequence

import structlog

from ..schemas import CanonicalRecord, Contact, DuplicateGroup, ParsedContact
from .email_normalizer import normalize_email
from .phone_normalizer import normalize_phone

logger = structlog.get_logger(__name__)

KEY_PRIORITY = ('phone', 'email', 'name')


class DuplicateDetectionSystem:
    """Detects and resolves duplicate records"""

    def parse_contact(self, index: int, record: CanonicalRecord) -> ParsedContact:
        """Comparison view of a record; reservations compare on the booking contact"""
        if isinstance(record, Contact):
            first, last = record.first_name, record.last_name
            email, phone = record.email, record.mobile_phone
        else:
            first, last = record.get('bookingContactFirstName'), record.get('bookingContactLastName')
            email, phone = record.get('bookingContactEmail'), record.get('bookingContactPhoneNumber')
        return ParsedContact(
            row_index=index,
            first_name=(first or '').strip(),
            last_name=(last or '').strip(),
            email=normalize_email(email),
            phone=normalize_phone(phone),
            original_data=record,
        )

    def _keys(self, contact: ParsedContact) -> Dict[str, str]:
        keys = {}
        if contact.phone:
            keys['phone'] = f'phone:{contact.phone}'
        if contact.email:
            keys['email'] = f'email:{contact.email}'
        if contact.first_name and contact.last_name:
            keys['name'] = f'name:{contact.first_name.lower()}:{contact.last_name.lower()}'
        return keys

    def detect(self, records: Sequence[CanonicalRecord]) -> List[DuplicateGroup]:
        """Find duplicate groups; each row index appears in at most one group"""
        buckets: Dict[str, Dict[str, List[ParsedContact]]] = {reason: {} for reason in KEY_PRIORITY}

        for index, record in enumerate(records):
            contact = self.parse_contact(index, record)
            for reason, key in self._keys(contact).items():
                buckets[reason].setdefault(key, []).append(contact)

        groups: List[DuplicateGroup] = []
        claimed = set()
        for reason in KEY_PRIORITY:
            for members in buckets[reason].values():
                if len(members) < 2:
                    continue
                unclaimed = [c for c in members if c.row_index not in claimed]
                if len(unclaimed) < 2:
                    continue
                groups.append(DuplicateGroup(contacts=unclaimed, match_reason=reason))
                claimed.update(c.row_index for c in unclaimed)

        logger.info(
            "Duplicate detection completed",
            records=len(records),
            groups=len(groups),
            duplicate_rows=len(claimed),
        )
        return groups

    def rows_to_remove(
        self,
        groups: Sequence[DuplicateGroup],
        decisions: Optional[Dict[int, int]] = None,
    ) -> List[int]:
        """Row indices dropped when each group keeps its chosen member (default first)"""
        decisions = decisions or {}
        removed = set()
        for group_index, group in enumerate(groups):
            keep = decisions.get(group_index, 0)
            if not 0 <= keep < len(group.contacts):
                raise IndexError(f"Group {group_index} has no member {keep}")
            removed.update(
                contact.row_index
                for position, contact in enumerate(group.contacts)
                if position != keep
            )
        return sorted(removed)

    def resolve_group(
        self,
        records: Sequence[CanonicalRecord],
        groups: Sequence[DuplicateGroup],
        group_index: int,
        keep_index: int = 0,
    ) -> List[CanonicalRecord]:
        """Keep one member of a single group and drop the rest"""
        removed = set(self.rows_to_remove([groups[group_index]], {0: keep_index}))
        return self._filter(records, removed)

    def resolve_all(
        self,
        records: Sequence[CanonicalRecord],
        groups: Sequence[DuplicateGroup],
        decisions: Optional[Dict[int, int]] = None,
    ) -> List[CanonicalRecord]:
        """Resolve every group at once; groups without a decision keep their first member"""
        removed = set(self.rows_to_remove(groups, decisions))
        return self._filter(records, removed)

    def _filter(self, records: Sequence[CanonicalRecord], removed: set) -> List[CanonicalRecord]:
        kept = [record for index, record in enumerate(records) if index not in removed]
        logger.info("Resolved duplicates", removed=len(removed), remaining=len(kept))
        return kept


# Global duplicate detection system instance
duplicate_detection_system = DuplicateDetectionSystem()

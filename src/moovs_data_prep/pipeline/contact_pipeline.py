"""
Contact transform pipeline

pre-filter -> cleaning steps -> post-filter -> global deduplication
"""
import re
from typing import Dict, List, Optional, Sequence, Tuple

import structlog

from ..cleaning.field_cleaners import (
    CONTACT_CLEANING_STEPS,
    CleaningContext,
    CleaningStep,
    WorkingRecord,
    has_any_name,
    run_cleaning_steps,
    summarize_potential_issues,
)
from ..cleaning.placeholders import PlaceholderAllocator
from ..schemas import Contact
from ..validation.phone_normalizer import PhoneNumberNormalizer, phone_normalizer
from .results import DroppedRow, MergedRow, PipelineResult

logger = structlog.get_logger(__name__)


class ContactPipeline:
    """Turns mapped contact rows into clean Contact records"""

    def __init__(
        self,
        allocator: PlaceholderAllocator,
        normalizer: Optional[PhoneNumberNormalizer] = None,
        steps: Sequence[CleaningStep] = CONTACT_CLEANING_STEPS,
    ):
        self.context = CleaningContext(allocator=allocator, normalizer=normalizer or phone_normalizer)
        self.steps = tuple(steps)

    def run(self, rows: Sequence[Dict[str, str]]) -> PipelineResult:
        result = PipelineResult(input_count=len(rows))
        cleaned: List[Tuple[int, WorkingRecord]] = []

        for index, row in enumerate(rows):
            if not has_any_name(row):
                result.dropped.append(DroppedRow(index, 'No first or last name', dict(row)))
                continue
            record = run_cleaning_steps(WorkingRecord.from_mapped(row), self.context, self.steps)
            cleaned.append((index, record))

        result.stats['potential_issues'] = summarize_potential_issues(record for _, record in cleaned)

        kept: List[Tuple[int, WorkingRecord]] = []
        for index, record in cleaned:
            if record.is_business_entry:
                result.dropped.append(DroppedRow(index, 'Business or event entry', dict(record.original)))
            elif not record.value('firstName') and not record.value('lastName'):
                result.dropped.append(DroppedRow(index, 'No name after cleaning', dict(record.original)))
            else:
                kept.append((index, record))

        for index, record in self._deduplicate(kept, result):
            result.records.append(Contact.from_fields(record.fields))
            result.source_rows.append(index)
            if record.warnings:
                result.warnings[index] = list(record.warnings)

        logger.info(
            "Contact pipeline completed",
            input_rows=result.input_count,
            output_rows=result.output_count,
            dropped=result.dropped_count,
            merged=result.merged_count,
            placeholder_phones=self.context.allocator.issued_count,
        )
        return result

    def _deduplicate(
        self,
        records: List[Tuple[int, WorkingRecord]],
        result: PipelineResult,
    ) -> List[Tuple[int, WorkingRecord]]:
        """Merge exact repeats of the same person, back-filling empty fields"""
        kept: List[Tuple[int, WorkingRecord]] = []
        positions: Dict[tuple, int] = {}

        for index, record in records:
            key = self._identity_key(record)
            if key not in positions:
                positions[key] = len(kept)
                kept.append((index, record))
                continue

            position = positions[key]
            kept_index, kept_record = kept[position]
            fills = {
                name: value for name, value in record.fields.items()
                if value and not kept_record.value(name)
            }
            if fills:
                kept[position] = (kept_index, kept_record.evolve(fills))
            result.merged.append(MergedRow(index, kept_index, 'Exact duplicate of an earlier contact'))

        return kept

    def _identity_key(self, record: WorkingRecord) -> tuple:
        phone = '' if record.uses_placeholder_phone else re.sub(r'\D', '', record.value('mobilePhone'))
        return (
            record.value('firstName').lower(),
            record.value('lastName').lower(),
            record.value('email').lower(),
            phone,
        )

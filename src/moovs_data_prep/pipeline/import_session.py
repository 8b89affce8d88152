"""
Import session

Coordinates one operator's import the way the upload wizard does:
load files -> map columns -> transform -> validate -> detect duplicates,
then user-driven fixes, duplicate resolution and export. Every mutation
re-validates and re-detects duplicates against the current record set.
"""
import re
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence, Tuple

import structlog

from ..cleaning.placeholders import PlaceholderAllocator
from ..config import settings
from ..lookup.contact_lookup import ContactLookup, ContactRecord, parse_contacts_for_lookup
from ..parsers.csv_parser import CSVParser, ParsedCSV, csv_parser
from ..schemas import (
    CONTACT_HEADERS,
    CanonicalRecord,
    ColumnMapping,
    DataIssue,
    DuplicateGroup,
    SourceFormat,
    Workflow,
    headers_for,
)
from ..validation.duplicate_detection_system import duplicate_detection_system
from ..validation.error_handler import ConfigurationError
from ..validation.field_mapping_system import field_mapping_system
from ..validation.record_validator import (
    RecordValidator,
    auto_fix,
    generate_placeholder_emails,
    ready_count,
)
from .contact_pipeline import ContactPipeline
from .reservation_pipeline import ReservationPipeline
from .results import PipelineResult

logger = structlog.get_logger(__name__)


@dataclass
class ExportResult:
    """CSV text ready to be written or downloaded"""
    filename: str
    content: str
    row_count: int


class ImportSession:
    """State and operations of one import run"""

    def __init__(
        self,
        workflow: Workflow,
        operator_id: str,
        base_phone: Optional[str] = None,
        pickup_address: Optional[str] = None,
        dropoff_address: Optional[str] = None,
        source_format: Optional[SourceFormat] = None,
        parser: Optional[CSVParser] = None,
    ):
        if not operator_id or not operator_id.strip():
            raise ConfigurationError('Operator ID is required')
        base_phone = base_phone or settings.default_base_phone
        if not re.search(r'\d', base_phone):
            raise ConfigurationError(f'Base placeholder phone has no digits: {base_phone!r}')

        self.workflow = workflow
        self.operator_id = operator_id.strip()
        self.base_phone = base_phone
        self.pickup_address = pickup_address
        self.dropoff_address = dropoff_address
        self.source_format = source_format
        self.parser = parser or csv_parser

        self.validator = RecordValidator(self.operator_id, base_phone=self.base_phone)
        self.detector = duplicate_detection_system
        self.mapper = field_mapping_system

        self.file_count = 0
        self.headers: List[str] = []
        self.raw_rows: List[List[str]] = []
        self.mappings: List[ColumnMapping] = []
        self.lookup_contacts: List[ContactRecord] = []
        self.lookup: Optional[ContactLookup] = None
        self.allocator: Optional[PlaceholderAllocator] = None

        self.pipeline_result: Optional[PipelineResult] = None
        self.records: List[CanonicalRecord] = []
        self.issues: List[DataIssue] = []
        self.duplicates: List[DuplicateGroup] = []

    # ------------------------------------------------------------------
    # Input
    # ------------------------------------------------------------------

    def load_files(self, files: Sequence[Tuple[str, bytes]]) -> ParsedCSV:
        """Parse and combine uploaded files; nothing is committed if any file fails"""
        parsed = [self.parser.parse(data, filename=name) for name, data in files]
        combined = self.parser.combine_files(parsed)

        mappings = self.mapper.map_for_workflow(combined.headers, self.workflow, self.source_format)

        self.file_count = len(parsed)
        self.headers = combined.headers
        self.raw_rows = combined.rows
        self.mappings = mappings
        self.pipeline_result = None
        self.records, self.issues, self.duplicates = [], [], []

        logger.info(
            "Loaded import files",
            workflow=self.workflow.value,
            files=self.file_count,
            rows=len(self.raw_rows),
            mapped_fields=len(self.mappings),
        )
        return combined

    def load_lookup_contacts(self, data: bytes, filename: Optional[str] = None) -> int:
        """Use a previously exported contacts file to resolve reservation contacts"""
        if self.workflow != Workflow.RESERVATIONS:
            raise ConfigurationError('Contact lookup only applies to reservation imports')

        parsed = self.parser.parse(data, filename=filename)
        known = self.mapper.template_manager.known_mappings(SourceFormat.LIMOANYWHERE, Workflow.CONTACTS)
        mappings = self.mapper.auto_map(parsed.headers, CONTACT_HEADERS, known)
        rows = self.mapper.apply_mappings(parsed.headers, parsed.rows, mappings)
        self.lookup_contacts = parse_contacts_for_lookup(rows)

        logger.info("Loaded lookup contacts", filename=filename, contacts=len(self.lookup_contacts))
        return len(self.lookup_contacts)

    def update_mapping(self, target_field: str, source_column: Optional[str]) -> None:
        if source_column and source_column not in self.headers:
            raise ConfigurationError(f'Unknown source column: {source_column!r}')
        self.mappings = self.mapper.update_mapping(self.mappings, target_field, source_column)

    # ------------------------------------------------------------------
    # Processing
    # ------------------------------------------------------------------

    def process(self) -> PipelineResult:
        """Run the transform pipeline with a fresh allocator and lookup index"""
        if not self.headers:
            raise ConfigurationError('No file loaded')

        self.allocator = PlaceholderAllocator(
            base_phone=self.base_phone,
            pickup_address=self.pickup_address,
            dropoff_address=self.dropoff_address,
        )
        mapped = self.mapper.apply_mappings(self.headers, self.raw_rows, self.mappings)

        if self.workflow == Workflow.CONTACTS:
            self.lookup = None
            pipeline = ContactPipeline(self.allocator)
        else:
            self.lookup = ContactLookup(self.lookup_contacts, self.base_phone) if self.lookup_contacts else None
            pipeline = ReservationPipeline(self.allocator, lookup=self.lookup)

        self.pipeline_result = pipeline.run(mapped)
        self.records = list(self.pipeline_result.records)
        self._revalidate()
        return self.pipeline_result

    def auto_fix(self) -> int:
        """Apply all suggested values; returns how many blocking issues were cleared"""
        before = self._blocking_count()
        self.records = auto_fix(self.records, self.issues)
        self._revalidate()
        return before - self._blocking_count()

    def generate_placeholder_emails(self) -> None:
        self.records = generate_placeholder_emails(self.records)
        self._revalidate()

    def update_field(self, row_index: int, field_name: str, value: str) -> None:
        """Manual edit of one cell"""
        record = self.records[row_index].copy()
        record.set(field_name, value)
        self.records[row_index] = record
        self._revalidate()

    def resolve_duplicate_group(self, group_index: int, keep_index: int = 0) -> None:
        self.records = self.detector.resolve_group(self.records, self.duplicates, group_index, keep_index)
        self._revalidate()

    def resolve_all_duplicates(self, decisions: Optional[Dict[int, int]] = None) -> None:
        self.records = self.detector.resolve_all(self.records, self.duplicates, decisions)
        self._revalidate()

    def _revalidate(self) -> None:
        outcome = self.validator.validate(self.records, self.workflow)
        self.records = outcome.records
        self.issues = outcome.issues
        self.duplicates = self.detector.detect(self.records)

    def _blocking_count(self) -> int:
        return sum(1 for issue in self.issues if issue.is_blocking)

    # ------------------------------------------------------------------
    # Output
    # ------------------------------------------------------------------

    @property
    def ready_count(self) -> int:
        return ready_count(self.records, self.issues)

    def export(self) -> ExportResult:
        content = self.parser.generate_csv(self.records, headers_for(self.workflow))
        filename = self.parser.export_filename(self.workflow)
        logger.info("Exported records", filename=filename, rows=len(self.records))
        return ExportResult(filename=filename, content=content, row_count=len(self.records))

    def summary(self) -> Dict[str, Any]:
        """Run statistics for display"""
        issues_by_type: Dict[str, int] = {}
        issues_by_field: Dict[str, int] = {}
        for issue in self.issues:
            issues_by_type[issue.type.value] = issues_by_type.get(issue.type.value, 0) + 1
            key = f'{issue.field}-{issue.type.value}'
            issues_by_field[key] = issues_by_field.get(key, 0) + 1

        result = self.pipeline_result
        return {
            'workflow': self.workflow.value,
            'files': self.file_count,
            'input_rows': len(self.raw_rows),
            'dropped_rows': result.dropped_count if result else 0,
            'merged_rows': result.merged_count if result else 0,
            'records': len(self.records),
            'ready': self.ready_count,
            'issues_by_type': issues_by_type,
            'issues_by_field': issues_by_field,
            'duplicate_groups': len(self.duplicates),
            'placeholder_phones': self.allocator.issued_count if self.allocator else 0,
            'lookup': self.lookup.stats() if self.lookup else None,
        }

"""
Pipeline result types
"""
from dataclasses import dataclass, field
from typing import Any, Dict, List

from ..schemas import CanonicalRecord


@dataclass
class DroppedRow:
    """A source row removed by record-level filtering"""
    source_index: int
    reason: str
    values: Dict[str, str] = field(default_factory=dict)


@dataclass
class MergedRow:
    """A source row folded into an earlier identical record"""
    source_index: int
    kept_source_index: int
    reason: str


@dataclass
class PipelineResult:
    """Output of a transform pipeline run with traceability of every input row"""
    records: List[CanonicalRecord] = field(default_factory=list)
    source_rows: List[int] = field(default_factory=list)
    warnings: Dict[int, List[str]] = field(default_factory=dict)
    dropped: List[DroppedRow] = field(default_factory=list)
    merged: List[MergedRow] = field(default_factory=list)
    input_count: int = 0
    stats: Dict[str, Any] = field(default_factory=dict)

    @property
    def dropped_count(self) -> int:
        return len(self.dropped)

    @property
    def merged_count(self) -> int:
        return len(self.merged)

    @property
    def output_count(self) -> int:
        return len(self.records)

"""
Transform pipelines and the import session that drives them
"""
from .results import DroppedRow, MergedRow, PipelineResult
from .contact_pipeline import ContactPipeline
from .reservation_pipeline import ReservationPipeline, clean_rate
from .import_session import ExportResult, ImportSession

__all__ = [
    "DroppedRow",
    "MergedRow",
    "PipelineResult",
    "ContactPipeline",
    "ReservationPipeline",
    "clean_rate",
    "ExportResult",
    "ImportSession",
]

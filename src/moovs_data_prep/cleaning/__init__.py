"""
Record cleaning: placeholder allocation and ordered field-repair heuristics
"""
from .placeholders import PlaceholderAllocator
from .field_cleaners import (
    CONTACT_CLEANING_STEPS,
    CleaningContext,
    WorkingRecord,
    run_cleaning_steps,
)

__all__ = [
    "PlaceholderAllocator",
    "CONTACT_CLEANING_STEPS",
    "CleaningContext",
    "WorkingRecord",
    "run_cleaning_steps",
]

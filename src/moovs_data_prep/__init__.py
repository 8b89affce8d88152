"""
Moovs data prep

Normalizes dispatch-software CSV exports (LimoAnywhere and custom layouts)
into Moovs contact and reservation import files.
"""

__version__ = "1.0.0"

from .schemas import Contact, Reservation, SourceFormat, Workflow
from .pipeline import ImportSession, ExportResult

__all__ = [
    "Contact",
    "Reservation",
    "SourceFormat",
    "Workflow",
    "ImportSession",
    "ExportResult",
]

"""Data models for contact records."""

from card_manager.models.contact import (
    ContactFields,
    ContactRecord,
    ContactUpdate,
    ExtractedFields,
    Metadata,
    ScanResult,
)

__all__ = [
    "ContactFields",
    "ContactRecord",
    "ContactUpdate",
    "ExtractedFields",
    "Metadata",
    "ScanResult",
]

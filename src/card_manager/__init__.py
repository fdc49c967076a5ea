"""Business card contact manager with LLM field extraction."""

from card_manager.models.contact import ContactRecord
from card_manager.store import InMemoryRecordStore, RecordStore

__version__ = "0.1.0"
__all__ = ["ContactRecord", "InMemoryRecordStore", "RecordStore"]

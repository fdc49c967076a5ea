"""In-memory record store for contact records."""

from __future__ import annotations

import logging
import threading
from abc import ABC, abstractmethod
from datetime import datetime, timezone

from card_manager.errors import NotFoundError
from card_manager.models.contact import ContactFields, ContactRecord, ContactUpdate

logger = logging.getLogger(__name__)


class RecordStore(ABC):
    """Abstract collection of contact records."""

    @abstractmethod
    def list(self) -> list[ContactRecord]:
        """Return all records, newest first."""
        ...

    @abstractmethod
    def get(self, record_id: int) -> ContactRecord:
        """
        Return a single record.

        Raises:
            NotFoundError: If no record has this id.
        """
        ...

    @abstractmethod
    def create(self, fields: ContactFields) -> ContactRecord:
        """Assign an id, stamp the creation time and store a new record."""
        ...

    @abstractmethod
    def update(self, record_id: int, changes: ContactUpdate) -> ContactRecord:
        """
        Overwrite the fields present in ``changes``.

        Raises:
            NotFoundError: If no record has this id.
        """
        ...

    @abstractmethod
    def delete(self, record_id: int) -> None:
        """Remove a record. Unknown ids are ignored."""
        ...

    def search(self, query: str) -> list[ContactRecord]:
        """Return records whose name or company contains ``query`` (case-insensitive)."""
        needle = query.strip().lower()
        records = self.list()
        if not needle:
            return records
        return [
            r for r in records
            if needle in r.name.lower() or needle in r.company.lower()
        ]


class InMemoryRecordStore(RecordStore):
    """Record store held in process memory.

    Records are lost when the process exits. The list and the id counter
    live together behind one lock.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._records: list[ContactRecord] = []
        self._next_id = 1

    def __len__(self) -> int:
        with self._lock:
            return len(self._records)

    def list(self) -> list[ContactRecord]:
        with self._lock:
            return list(self._records)

    def get(self, record_id: int) -> ContactRecord:
        with self._lock:
            return self._records[self._index(record_id)]

    def create(self, fields: ContactFields) -> ContactRecord:
        with self._lock:
            record = ContactRecord(
                id=self._next_id,
                created_at=datetime.now(timezone.utc),
                **fields.model_dump(),
            )
            self._next_id += 1
            self._records.insert(0, record)
        logger.info("Created card %d", record.id)
        return record

    def update(self, record_id: int, changes: ContactUpdate) -> ContactRecord:
        with self._lock:
            index = self._index(record_id)
            record = self._records[index].model_copy(update=changes.changes())
            self._records[index] = record
        logger.info("Updated card %d", record_id)
        return record

    def delete(self, record_id: int) -> None:
        with self._lock:
            before = len(self._records)
            self._records = [r for r in self._records if r.id != record_id]
            removed = before - len(self._records)
        if removed:
            logger.info("Deleted card %d", record_id)
        else:
            logger.debug("Delete of unknown card %d ignored", record_id)

    def _index(self, record_id: int) -> int:
        """Position of a record in the list. Caller must hold the lock."""
        for i, record in enumerate(self._records):
            if record.id == record_id:
                return i
        raise NotFoundError(record_id)

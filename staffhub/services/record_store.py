"""
In-memory record collections.

Each store keeps its records newest-first. Every mutating method finishes in a
single synchronous step, so handlers interleaving at await points never see a
half-applied change. Nothing survives a restart.
"""

import random
import string
import time
from datetime import datetime, timezone
from typing import Any, Callable, Dict, Generic, List, Optional, TypeVar

from pydantic import BaseModel

from staffhub.schemas.tracking import Project, Task, FileRecord


RecordT = TypeVar("RecordT", bound=BaseModel)

_BASE36 = string.digits + string.ascii_lowercase


def _to_base36(number: int) -> str:
    if number == 0:
        return "0"
    digits = []
    while number:
        number, remainder = divmod(number, 36)
        digits.append(_BASE36[remainder])
    return "".join(reversed(digits))


def generate_id() -> str:
    """Random base-36 prefix followed by the base-36 millisecond clock"""
    prefix = "".join(random.choices(_BASE36, k=11))
    return prefix + _to_base36(int(time.time() * 1000))


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class RecordStore(Generic[RecordT]):
    """Ordered collection of pydantic records keyed by their ``id``"""

    def __init__(self, name: str):
        self.name = name
        self._records: List[RecordT] = []

    def __len__(self) -> int:
        return len(self._records)

    def all(self) -> List[RecordT]:
        return list(self._records)

    def filter(self, predicate: Callable[[RecordT], bool]) -> List[RecordT]:
        return [record for record in self._records if predicate(record)]

    def get(self, record_id: str) -> Optional[RecordT]:
        for record in self._records:
            if record.id == record_id:
                return record
        return None

    def insert(self, record: RecordT) -> RecordT:
        self._records.insert(0, record)
        return record

    def update(self, record_id: str, changes: Dict[str, Any]) -> Optional[RecordT]:
        """Apply ``changes`` and refresh ``updated_at``; returns the new record"""
        for index, record in enumerate(self._records):
            if record.id == record_id:
                updated = record.model_copy(update={**changes, "updated_at": utcnow()})
                self._records[index] = updated
                return updated
        return None

    def remove(self, record_id: str) -> Optional[RecordT]:
        for index, record in enumerate(self._records):
            if record.id == record_id:
                return self._records.pop(index)
        return None

    def remove_where(self, predicate: Callable[[RecordT], bool]) -> int:
        """Drop every matching record; returns how many were removed"""
        kept = [record for record in self._records if not predicate(record)]
        removed = len(self._records) - len(kept)
        self._records = kept
        return removed

    def clear(self) -> None:
        self._records = []


class TrackerState:
    """The three process-local collections behind projects, tasks and files"""

    def __init__(self):
        self.projects: RecordStore[Project] = RecordStore("projects")
        self.tasks: RecordStore[Task] = RecordStore("tasks")
        self.files: RecordStore[FileRecord] = RecordStore("files")

    def reset(self) -> None:
        self.projects.clear()
        self.tasks.clear()
        self.files.clear()


tracker_state = TrackerState()


def get_tracker_state() -> TrackerState:
    """FastAPI dependency; overridden in tests"""
    return tracker_state

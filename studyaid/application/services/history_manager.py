import logging
import threading
import time
from typing import List, Optional

from .persistent_store import PersistentStore
from ...exceptions import StorageError
from ...schemas.analysis.analysis import AnalysisRecord

logger = logging.getLogger(__name__)


class HistoryManager:
    """Newest-first list of analysis records, written through to storage on
    every mutation.

    Storage failures never reach the caller: a corrupt or unreadable history
    loads as empty, and a failed save keeps the in-memory change. Each
    mutation and its save run under one lock, so the persisted slot always
    matches the list it was written from.
    """

    def __init__(self, store: PersistentStore):
        self.store = store
        self._records: List[AnalysisRecord] = []
        self._last_id_ms = 0
        self._lock = threading.RLock()

    @property
    def records(self) -> List[AnalysisRecord]:
        with self._lock:
            return list(self._records)

    def __len__(self) -> int:
        return len(self._records)

    def load(self) -> List[AnalysisRecord]:
        try:
            loaded = self.store.read()
        except StorageError as e:
            logger.error(f"Failed to load history, starting empty: {e}")
            loaded = []

        records: List[AnalysisRecord] = []
        seen = set()
        for record in loaded:
            if record.id in seen:
                logger.warning(f"Dropping duplicate history record {record.id}")
                continue
            seen.add(record.id)
            records.append(record)

        with self._lock:
            self._records = records
            self._last_id_ms = max((_id_as_ms(r.id) for r in records), default=0)
        logger.info(f"Loaded {len(records)} history record(s)")
        return self.records

    def get(self, record_id: str) -> Optional[AnalysisRecord]:
        with self._lock:
            return next((r for r in self._records if r.id == record_id), None)

    def new_record_id(self, timestamp_ms: Optional[int] = None) -> str:
        if timestamp_ms is None:
            timestamp_ms = int(time.time() * 1000)
        with self._lock:
            candidate = max(timestamp_ms, self._last_id_ms + 1)
            self._last_id_ms = candidate
        return str(candidate)

    def append(self, record: AnalysisRecord) -> None:
        with self._lock:
            self._records.insert(0, record)
            self._last_id_ms = max(self._last_id_ms, _id_as_ms(record.id))
            self._persist()

    def remove(self, record_id: str) -> bool:
        with self._lock:
            for index, record in enumerate(self._records):
                if record.id == record_id:
                    del self._records[index]
                    self._persist()
                    return True
        return False

    def clear(self) -> None:
        with self._lock:
            self._records = []
            self._persist()

    def _persist(self) -> None:
        try:
            self.store.write(self._records)
        except StorageError as e:
            # in-memory state stays authoritative
            logger.error(f"Failed to save history (likely quota exceeded): {e}")


def _id_as_ms(record_id: str) -> int:
    try:
        return int(record_id)
    except ValueError:
        return 0

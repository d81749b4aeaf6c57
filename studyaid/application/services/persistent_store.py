from typing import List

from pydantic import TypeAdapter, ValidationError

from ..ports.storage_repo import KeyValueStorage
from ...exceptions import HistoryDecodeError
from ...schemas.analysis.analysis import AnalysisRecord

_records_adapter = TypeAdapter(List[AnalysisRecord])


def serialize_records(records: List[AnalysisRecord]) -> str:
    return _records_adapter.dump_json(records, by_alias=True).decode("utf-8")


def deserialize_records(raw: str) -> List[AnalysisRecord]:
    try:
        return _records_adapter.validate_json(raw)
    except ValidationError as e:
        raise HistoryDecodeError(f"Persisted history is malformed: {e.error_count()} error(s)") from e


class PersistentStore:
    """JSON list of AnalysisRecord kept in a single storage slot.

    Read and write errors propagate as StorageError subclasses; deciding
    whether they are fatal is left to the caller.
    """

    def __init__(self, storage: KeyValueStorage, key: str):
        self.storage = storage
        self.key = key

    def read(self) -> List[AnalysisRecord]:
        raw = self.storage.get_item(self.key)
        if raw is None:
            return []
        return deserialize_records(raw)

    def write(self, records: List[AnalysisRecord]) -> None:
        self.storage.set_item(self.key, serialize_records(records))

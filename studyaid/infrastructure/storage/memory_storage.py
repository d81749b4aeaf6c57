from typing import Dict, Optional

from ...application.ports.storage_repo import KeyValueStorage
from .quota import enforce_quota


class InMemoryStorage(KeyValueStorage):
    def __init__(self, quota_bytes: Optional[int] = None) -> None:
        self._store: Dict[str, str] = {}
        self.quota_bytes = quota_bytes

    def get_item(self, key: str) -> Optional[str]:
        return self._store.get(key)

    def set_item(self, key: str, value: str) -> None:
        enforce_quota(key, value, self.quota_bytes)
        self._store[key] = value

    def remove_item(self, key: str) -> None:
        self._store.pop(key, None)

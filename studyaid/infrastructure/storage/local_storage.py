import os
import re
import tempfile
import logging
from typing import Optional

from ...application.ports.storage_repo import KeyValueStorage
from ...exceptions import StorageError
from .quota import enforce_quota

logger = logging.getLogger(__name__)

_UNSAFE_CHARS = re.compile(r"[^A-Za-z0-9._-]")


class LocalFileStorage(KeyValueStorage):
    """One UTF-8 file per slot under a directory."""

    def __init__(self, storage_dir: str, quota_bytes: Optional[int] = None) -> None:
        self.storage_dir = storage_dir
        self.quota_bytes = quota_bytes

    def _path(self, key: str) -> str:
        return os.path.join(self.storage_dir, f"{_UNSAFE_CHARS.sub('_', key)}.json")

    def get_item(self, key: str) -> Optional[str]:
        path = self._path(key)
        if not os.path.exists(path):
            return None
        try:
            with open(path, "r", encoding="utf-8") as f:
                return f.read()
        except (OSError, UnicodeDecodeError) as e:
            raise StorageError(f"Failed to read slot '{key}': {e}") from e

    def set_item(self, key: str, value: str) -> None:
        enforce_quota(key, value, self.quota_bytes)
        path = self._path(key)
        tmp_path = None
        try:
            os.makedirs(self.storage_dir, exist_ok=True)
            fd, tmp_path = tempfile.mkstemp(
                dir=self.storage_dir, prefix=f"{os.path.basename(path)}.", suffix=".tmp"
            )
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(value)
            # atomic on POSIX and Windows
            os.replace(tmp_path, path)
        except OSError as e:
            if tmp_path is not None and os.path.exists(tmp_path):
                os.remove(tmp_path)
            raise StorageError(f"Failed to write slot '{key}': {e}") from e
        logger.debug(f"Wrote {len(value)} chars to {path}")

    def remove_item(self, key: str) -> None:
        try:
            os.remove(self._path(key))
        except FileNotFoundError:
            pass
        except OSError as e:
            raise StorageError(f"Failed to remove slot '{key}': {e}") from e

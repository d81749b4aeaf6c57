from typing import Optional

from ...exceptions import StorageQuotaExceededError


def enforce_quota(key: str, value: str, quota_bytes: Optional[int]) -> None:
    if quota_bytes is None:
        return
    size = len(value.encode("utf-8"))
    if size > quota_bytes:
        raise StorageQuotaExceededError(key, size, quota_bytes)

from datetime import datetime
from typing import Optional

from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session

from .....models import StorageSlot
from .....application.ports.storage_repo import KeyValueStorage
from .....exceptions import StorageError
from ....storage.quota import enforce_quota


class SqlSlotStorage(KeyValueStorage):
    def __init__(self, engine: Engine, quota_bytes: Optional[int] = None):
        self.engine = engine
        self.quota_bytes = quota_bytes

    def get_item(self, key: str) -> Optional[str]:
        try:
            with Session(self.engine) as session:
                slot = session.get(StorageSlot, key)
                return slot.value if slot else None
        except SQLAlchemyError as e:
            raise StorageError(f"Failed to read slot '{key}': {e}") from e

    def set_item(self, key: str, value: str) -> None:
        enforce_quota(key, value, self.quota_bytes)
        try:
            with Session(self.engine) as session:
                slot = session.get(StorageSlot, key)
                if slot is None:
                    slot = StorageSlot(key=key, value=value)
                else:
                    slot.value = value
                    slot.updated_at = datetime.utcnow()
                session.add(slot)
                session.commit()
        except SQLAlchemyError as e:
            raise StorageError(f"Failed to write slot '{key}': {e}") from e

    def remove_item(self, key: str) -> None:
        try:
            with Session(self.engine) as session:
                slot = session.get(StorageSlot, key)
                if slot is not None:
                    session.delete(slot)
                    session.commit()
        except SQLAlchemyError as e:
            raise StorageError(f"Failed to remove slot '{key}': {e}") from e

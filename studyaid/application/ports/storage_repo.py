from typing import Optional, Protocol


class KeyValueStorage(Protocol):
    """Named string slots, the server-side stand-in for browser local storage."""

    def get_item(self, key: str) -> Optional[str]:
        ...

    def set_item(self, key: str, value: str) -> None:
        ...

    def remove_item(self, key: str) -> None:
        ...

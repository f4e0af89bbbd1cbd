from __future__ import annotations

from typing import Optional, Protocol


class StorageSubstrate(Protocol):
    """Synchronous, string-keyed, string-valued store scoped to one browser tab.

    Note (DIP): the session store depends on this interface, never on a concrete backend.
    Implementations raise StorageFailure on backend errors.
    """

    def get_item(self, key: str) -> Optional[str]:
        raise NotImplementedError

    def set_item(self, key: str, value: str) -> None:
        raise NotImplementedError

    def remove_item(self, key: str) -> None:
        raise NotImplementedError

    def clear(self) -> None:
        raise NotImplementedError

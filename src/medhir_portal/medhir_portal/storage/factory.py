from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from typing import Optional

from cachetools import Cache, LRUCache

from ..core.constants import DEFAULT_MAX_MEMORY_TABS
from ..core.enums import StorageBackend
from ..database.connection import DatabaseConnection
from .memory_storage import InMemoryStorage
from .mysql_storage import MySQLTabStorage
from .substrate import StorageSubstrate

logger = logging.getLogger(__name__)


class _TabStores(LRUCache):
    """LRU map of tab stores; over the limit, empty stores go before live ones."""

    def popitem(self):
        for tab_id in list(self):
            # Cache.__getitem__ reads without refreshing the LRU order.
            if len(Cache.__getitem__(self, tab_id)) == 0:
                return tab_id, self.pop(tab_id)
        tab_id, storage = super().popitem()
        logger.warning("Evicted in-memory session store of tab %s (limit %d)", tab_id, self.maxsize)
        return tab_id, storage


@dataclass
class StorageFactory:
    """Factory Pattern: pick the per-tab substrate for the configured backend."""

    backend: StorageBackend
    conn_factory: Optional[DatabaseConnection] = None
    max_tabs: int = DEFAULT_MAX_MEMORY_TABS
    _tabs: _TabStores = field(init=False, repr=False)
    _lock: threading.Lock = field(default_factory=threading.Lock, init=False, repr=False)

    def __post_init__(self) -> None:
        if self.backend == StorageBackend.MYSQL and self.conn_factory is None:
            raise ValueError("MySQL storage backend needs a DatabaseConnection")
        if self.max_tabs <= 0:
            raise ValueError("max_tabs must be positive")
        self._tabs = _TabStores(maxsize=self.max_tabs)

    def for_tab(self, tab_id: str) -> StorageSubstrate:
        if self.backend == StorageBackend.MYSQL:
            return MySQLTabStorage(self.conn_factory, tab_id)

        # Flask may serve requests from several threads; each tab keeps one store.
        with self._lock:
            storage = self._tabs.get(tab_id)
            if storage is None:
                storage = InMemoryStorage()
                self._tabs[tab_id] = storage
            return storage

    def tab_count(self) -> int:
        with self._lock:
            return len(self._tabs)

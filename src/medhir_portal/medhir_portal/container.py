from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .core.constants import DEFAULT_MAX_MEMORY_TABS
from .core.enums import StorageBackend
from .database.connection import DBConfig, DatabaseConnection
from .session.cipher import ValueCipher
from .session.manager import SessionManager, SessionSettings
from .session.store import Reporter
from .storage.factory import StorageFactory


@dataclass(frozen=True)
class Container:
    storage_factory: StorageFactory
    session_settings: SessionSettings
    conn: Optional[DatabaseConnection] = None
    reporter: Optional[Reporter] = None
    cipher: Optional[ValueCipher] = None

    def session_manager(self, tab_id: str) -> SessionManager:
        return SessionManager(
            self.storage_factory.for_tab(tab_id),
            settings=self.session_settings,
            reporter=self.reporter,
            cipher=self.cipher,
        )


def build_container(
    *,
    backend: StorageBackend,
    session_settings: SessionSettings,
    db_config: Optional[dict] = None,
    reporter: Optional[Reporter] = None,
    encryption_key: Optional[str] = None,
    max_memory_tabs: int = DEFAULT_MAX_MEMORY_TABS,
) -> Container:
    conn = None
    if backend == StorageBackend.MYSQL:
        if not db_config:
            raise ValueError("DB_CONFIG is required for the mysql storage backend")
        conn = DatabaseConnection.get_instance(DBConfig.from_mapping(db_config))

    return Container(
        storage_factory=StorageFactory(backend=backend, conn_factory=conn, max_tabs=max_memory_tabs),
        session_settings=session_settings,
        conn=conn,
        reporter=reporter,
        cipher=ValueCipher.from_key(encryption_key),
    )

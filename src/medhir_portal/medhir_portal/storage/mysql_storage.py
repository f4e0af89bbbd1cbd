from __future__ import annotations

from typing import Optional

import mysql.connector

from ..core.exceptions import StorageFailure
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchone
from .substrate import StorageSubstrate


class MySQLTabStorage(StorageSubstrate):
    """Rows of `tab_storage` belonging to a single tab id."""

    def __init__(self, conn_factory: DatabaseConnection, tab_id: str):
        self._conn_factory = conn_factory
        self._tab_id = tab_id

    @property
    def tab_id(self) -> str:
        return self._tab_id

    def get_item(self, key: str) -> Optional[str]:
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    "SELECT item_value FROM tab_storage WHERE tab_id=%s AND item_key=%s",
                    (self._tab_id, key),
                )
                row = fetchone(cur)
        except mysql.connector.Error as e:
            raise StorageFailure(f"Cannot read {key!r}: {e}") from e
        return row["item_value"] if row else None

    def set_item(self, key: str, value: str) -> None:
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    """
                    INSERT INTO tab_storage (tab_id, item_key, item_value)
                    VALUES (%s, %s, %s)
                    ON DUPLICATE KEY UPDATE item_value = VALUES(item_value)
                    """,
                    (self._tab_id, key, value),
                )
        except mysql.connector.Error as e:
            raise StorageFailure(f"Cannot write {key!r}: {e}") from e

    def remove_item(self, key: str) -> None:
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    "DELETE FROM tab_storage WHERE tab_id=%s AND item_key=%s",
                    (self._tab_id, key),
                )
        except mysql.connector.Error as e:
            raise StorageFailure(f"Cannot remove {key!r}: {e}") from e

    def clear(self) -> None:
        # Single statement inside one transaction: no partially cleared tab is visible.
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute("DELETE FROM tab_storage WHERE tab_id=%s", (self._tab_id,))
        except mysql.connector.Error as e:
            raise StorageFailure(f"Cannot clear tab {self._tab_id!r}: {e}") from e

from __future__ import annotations

import sys
from pathlib import Path

import importlib

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from config import get_settings_module

from src.medhir_portal.medhir_portal.database.bootstrap import apply_schema, list_tables
from src.medhir_portal.medhir_portal.database.connection import DBConfig, DatabaseConnection


def main() -> None:
    settings = importlib.import_module(get_settings_module())
    db_config = dict(settings.DB_CONFIG or {})
    if not db_config:
        raise SystemExit("DB_CONFIG is empty for this APP_ENV; nothing to initialise")

    conn = DatabaseConnection.get_instance(DBConfig.from_mapping(db_config))
    schema_path = REPO_ROOT / "database" / "schema.sql"
    apply_schema(conn, database=str(db_config["database"]), schema_path=schema_path)
    tables = list_tables(conn)
    print(
        "OK: Applied schema.sql -> "
        f"{db_config.get('user')}@{db_config.get('host')}:{db_config.get('port', 3306)}/{db_config.get('database')} "
        f"(tables={len(tables)})"
    )


if __name__ == "__main__":
    main()

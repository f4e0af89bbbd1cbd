from __future__ import annotations

import importlib
import logging
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from flask import Flask

from config import get_settings_module

from .container import build_container
from .core.constants import DEFAULT_MAX_MEMORY_TABS
from .core.enums import StorageBackend
from .database.bootstrap import apply_schema, list_tables
from .leads.controller import register as register_leads
from .session.controller import register as register_session
from .session.manager import SessionSettings

logger = logging.getLogger(__name__)

SCHEMA_PATH = Path(__file__).resolve().parents[3] / "database" / "schema.sql"


def create_app(settings_module: Optional[str] = None) -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = settings_module or get_settings_module()
    settings = importlib.import_module(settings_module)
    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))

    logging.basicConfig(
        level=logging.DEBUG if app.config["DEBUG"] else logging.INFO,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )

    backend = StorageBackend(str(getattr(settings, "SESSION_STORAGE_BACKEND", "memory")).lower())
    db_config = getattr(settings, "DB_CONFIG", None)
    container = build_container(
        backend=backend,
        session_settings=SessionSettings.from_settings(settings),
        db_config=db_config,
        encryption_key=getattr(settings, "SESSION_ENCRYPTION_KEY", None),
        max_memory_tabs=int(getattr(settings, "MEMORY_MAX_TABS", DEFAULT_MAX_MEMORY_TABS)),
    )
    logger.info(
        "settings=%s storage=%s inactivity_threshold_ms=%s encrypted=%s",
        settings_module,
        backend.value,
        container.session_settings.inactivity_threshold_ms,
        container.cipher is not None,
    )

    if backend == StorageBackend.MYSQL and bool(getattr(settings, "AUTO_INIT_DB", False)):
        apply_schema(container.conn, database=str(db_config["database"]), schema_path=SCHEMA_PATH)
        logger.info("schema ready (tables=%d)", len(list_tables(container.conn)))

    app.extensions["medhir_portal"] = container

    register_session(app, container)
    register_leads(app, container)

    return app

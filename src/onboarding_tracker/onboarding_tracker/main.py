from __future__ import annotations

import importlib
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from flask import Flask

from config import get_settings_module

from .analytics.controller import register as register_analytics
from .container import Container, build_container
from .core.constants import DEFAULT_BUCKET_WIDTH
from .database.bootstrap import apply_schema, apply_seed_sql, list_tables
from .observability.events import LogEvent
from .observability.structured import configure_logging, create_logger
from .scans.controller import register as register_scans

REPO_ROOT = Path(__file__).resolve().parents[3]
SCHEMA_PATH = REPO_ROOT / "database" / "schema.sql"
SEED_PATH = REPO_ROOT / "database" / "seed.sql"

logger = create_logger("app")


def create_app(container: Optional[Container] = None) -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    db_config = getattr(settings, "DB_CONFIG")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))
    app.config["DEFAULT_BUCKET_WIDTH"] = int(getattr(settings, "DEFAULT_BUCKET_WIDTH", DEFAULT_BUCKET_WIDTH))

    configure_logging(getattr(settings, "LOG_LEVEL", "INFO"))

    if container is None:
        if bool(getattr(settings, "AUTO_INIT_DB", False)):
            apply_schema(db_config, schema_path=SCHEMA_PATH)
            logger.info(LogEvent.APP_STARTUP, "Schema ready", {"tables": len(list_tables(db_config))})
        if bool(getattr(settings, "AUTO_SEED_DB", False)):
            apply_seed_sql(db_config, seed_path=SEED_PATH)
            logger.info(LogEvent.APP_STARTUP, "Demo seed ready")

        container = build_container(
            db_config=db_config,
            analytics_timezone=str(getattr(settings, "ANALYTICS_TIMEZONE", "") or ""),
        )

    register_scans(app, container)
    register_analytics(app, container)

    return app

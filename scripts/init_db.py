"""Create the onboarding database and tables, optionally loading demo students.

    APP_ENV=development python scripts/init_db.py [--seed]
"""

from __future__ import annotations

import argparse
import importlib
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from config import get_settings_module

from src.onboarding_tracker.onboarding_tracker.database.bootstrap import apply_schema, apply_seed_sql, list_tables
from src.onboarding_tracker.onboarding_tracker.database.connection import DBConfig
from src.onboarding_tracker.onboarding_tracker.main import SCHEMA_PATH, SEED_PATH
from src.onboarding_tracker.onboarding_tracker.observability.structured import configure_logging


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument("--seed", action="store_true", help="also insert the demo students from seed.sql")
    args = parser.parse_args(argv)

    settings = importlib.import_module(get_settings_module())
    configure_logging(getattr(settings, "LOG_LEVEL", "INFO"))
    db_config = dict(settings.DB_CONFIG)
    target = DBConfig.from_mapping(db_config).describe()

    apply_schema(db_config, schema_path=SCHEMA_PATH)
    print(f"OK: schema applied to {target} ({len(list_tables(db_config))} tables)")

    if args.seed:
        apply_seed_sql(db_config, seed_path=SEED_PATH)
        print(f"OK: demo students loaded into {target}")


if __name__ == "__main__":
    main()

import os

from .config import Config

DB_CONFIG = Config.db_config()

DEBUG = True
LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")

ANALYTICS_TIMEZONE = Config.ANALYTICS_TIMEZONE
DEFAULT_BUCKET_WIDTH = Config.DEFAULT_BUCKET_WIDTH

# If enabled, app will apply schema.sql on startup (idempotent: CREATE IF NOT EXISTS)
AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "1")))
# Optional: also seed demo students on startup
AUTO_SEED_DB = bool(int(os.getenv("AUTO_SEED_DB", "0")))

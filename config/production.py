import os

from .config import Config

DB_CONFIG = Config.db_config()

DEBUG = False
LOG_LEVEL = Config.LOG_LEVEL

ANALYTICS_TIMEZONE = Config.ANALYTICS_TIMEZONE
DEFAULT_BUCKET_WIDTH = Config.DEFAULT_BUCKET_WIDTH

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))
AUTO_SEED_DB = bool(int(os.getenv("AUTO_SEED_DB", "0")))

from .config import Config

DB_CONFIG = Config.db_config()

DEBUG = False
TESTING = True
LOG_LEVEL = "WARNING"

ANALYTICS_TIMEZONE = "UTC"
DEFAULT_BUCKET_WIDTH = 60

AUTO_INIT_DB = False
AUTO_SEED_DB = False

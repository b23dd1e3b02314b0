import os


class Config:
    """Settings shared by every environment (read from the process environment)."""

    DB_USER = os.environ.get("DB_USER", "root")
    DB_PASSWORD = os.environ.get("DB_PASSWORD", "")
    DB_HOST = os.environ.get("DB_HOST", "localhost")
    DB_PORT = int(os.environ.get("DB_PORT", "3306"))
    DB_NAME = os.environ.get("DB_NAME", "onboarding_db")

    LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")

    # IANA zone used to read time-of-day from scan timestamps ("" = server local zone).
    ANALYTICS_TIMEZONE = os.environ.get("ANALYTICS_TIMEZONE", "")
    DEFAULT_BUCKET_WIDTH = int(os.environ.get("DEFAULT_BUCKET_WIDTH", "60"))

    @classmethod
    def db_config(cls) -> dict:
        return {
            "host": cls.DB_HOST,
            "port": cls.DB_PORT,
            "user": cls.DB_USER,
            "password": cls.DB_PASSWORD,
            "database": cls.DB_NAME,
        }

"""
Application configuration.

All configuration is loaded from environment variables.
Never hardcode secrets or connection strings in code.

Settings are passed explicitly to whatever needs them: the
store is built from a Settings instance and handed to the
ledger engine. Nothing in the engine reads configuration
on its own.
"""

import os
from functools import lru_cache

from dotenv import load_dotenv

# Load .env file into environment variables
load_dotenv()


def _env_bool(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() == "true"


class Settings:
    """Application settings loaded from environment variables."""

    def __init__(self, **overrides):
        # Application
        self.APP_NAME: str = os.getenv("APP_NAME", "Banking Ledger")
        self.APP_VERSION: str = "0.1.0"
        self.DEBUG: bool = _env_bool("DEBUG", "false")

        # Server
        self.HOST: str = os.getenv("HOST", "0.0.0.0")
        self.PORT: int = int(os.getenv("PORT", "8000"))

        # Database
        self.DATABASE_URL: str = os.getenv(
            "DATABASE_URL",
            "sqlite:///./ledger.db"
        )
        self.DATABASE_ECHO: bool = _env_bool("DATABASE_ECHO", "false")
        # Seconds a SQLite writer waits for the database lock
        self.SQLITE_BUSY_TIMEOUT: float = float(
            os.getenv("SQLITE_BUSY_TIMEOUT", "30")
        )
        self.AUTO_CREATE_SCHEMA: bool = _env_bool("AUTO_CREATE_SCHEMA", "true")

        # Logging
        self.LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

        # Transaction history
        self.DEFAULT_HISTORY_LIMIT: int = int(
            os.getenv("DEFAULT_HISTORY_LIMIT", "50")
        )
        self.MAX_HISTORY_LIMIT: int = int(os.getenv("MAX_HISTORY_LIMIT", "500"))

        # Environment
        self.ENVIRONMENT: str = os.getenv("ENVIRONMENT", "development")

        for key, value in overrides.items():
            if not hasattr(self, key):
                raise AttributeError(f"Unknown setting '{key}'")
            setattr(self, key, value)


@lru_cache()
def get_settings() -> Settings:
    """
    Return cached settings for process entry points.

    Only the application factory and the migration environment
    call this. Library code receives a Settings instance (or a
    store built from one) as an argument instead.
    """
    return Settings()

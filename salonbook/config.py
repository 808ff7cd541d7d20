# salonbook/config.py

"""
Settings are read from environment variables once, at import time.
Set them before importing the application (tests set STORE_BACKEND=memory).
"""

import os
from dataclasses import dataclass


def _flag(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() in {"1", "true", "yes"}


@dataclass
class Settings:
    project_name: str = os.getenv("PROJECT_NAME", "Salon Booking API")
    api_version: str = os.getenv("API_VERSION", "1.0.0")

    # sql = SQLModel/SQLite, memory = process-local maps (dev and tests)
    store_backend: str = os.getenv("STORE_BACKEND", "sql")
    database_url: str = os.getenv("DATABASE_URL", "sqlite:///./salon.db")
    sql_echo: bool = _flag("SQL_ECHO", "false")

    secret_key: str = os.getenv("SECRET_KEY", "change-me-later")
    algorithm: str = os.getenv("ALGORITHM", "HS256")
    access_token_expire_minutes: int = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", "30"))

    log_level: str = os.getenv("LOG_LEVEL", "INFO")
    log_file: str = os.getenv("LOG_FILE", "")

    # Booking rules that are looser by default
    strict_totals: bool = _flag("STRICT_TOTALS", "false")
    strict_transitions: bool = _flag("STRICT_TRANSITIONS", "false")

    seed_categories: bool = _flag("SEED_CATEGORIES", "true")


settings = Settings()

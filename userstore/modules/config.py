"""
Configuration

Typed view of the environment. Values come from the process environment,
optionally seeded from a local .env file.
"""
import os
from dataclasses import dataclass
from functools import lru_cache
from typing import List

from dotenv import load_dotenv

load_dotenv()


@dataclass(frozen=True)
class Settings:
    """Runtime settings for the user store."""
    database_url: str
    users_table: str
    log_level: str
    cors_origins: List[str]
    host: str
    port: int


def _int(value: str, default: int) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


@lru_cache
def get_settings() -> Settings:
    """Read the current environment and build a Settings instance."""
    origins = os.getenv("CORS_ORIGINS", "*")
    return Settings(
        database_url=os.getenv("DATABASE_URL", "sqlite:///./users.db"),
        users_table=os.getenv("USERS_TABLE", "users"),
        log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        cors_origins=[o.strip() for o in origins.split(",") if o.strip()],
        host=os.getenv("HOST", "0.0.0.0"),
        port=_int(os.getenv("PORT", "8000"), 8000),
    )

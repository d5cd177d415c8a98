import os
from dataclasses import dataclass


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    return int(raw)


@dataclass(frozen=True)
class Settings:
    SECRET_KEY: str
    DATABASE_URL: str | None
    CLASS_LOOKBACK_DAYS: int
    LOG_LEVEL: str


def get_settings() -> Settings:
    return Settings(
        SECRET_KEY=os.getenv("SECRET_KEY", "dev-insecure-key"),
        DATABASE_URL=os.getenv("DATABASE_URL"),
        CLASS_LOOKBACK_DAYS=_env_int("CLASS_LOOKBACK_DAYS", 10),
        LOG_LEVEL=os.getenv("LOG_LEVEL", "INFO").upper(),
    )

"""Environment-based configuration."""

from __future__ import annotations

import os
from dataclasses import dataclass

from sqlalchemy.engine import URL


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def resolve_database_url() -> str:
    """Resolve DB connection string.

    Priority:
      1) DATABASE_URL (explicit)
      2) Build from PG* env vars (common Postgres convention)
      3) Fallback to local sqlite
    """

    explicit = os.getenv("DATABASE_URL")
    if explicit:
        return explicit

    host = os.getenv("PGHOST")
    user = os.getenv("PGUSER")
    database = os.getenv("PGDATABASE")

    if host and user and database:
        sslmode = os.getenv("PGSSLMODE", "require")
        query = {"sslmode": sslmode} if sslmode else {}
        url = URL.create(
            drivername="postgresql+psycopg2",
            username=user,
            password=os.getenv("PGPASSWORD"),
            host=host,
            port=_env_int("PGPORT", 5432),
            database=database,
            query=query,
        )
        return url.render_as_string(hide_password=False)

    return "sqlite:///./studio_bingo.db"


@dataclass(frozen=True)
class BaseConfig:
    """Base configuration shared by all environments."""

    APP_ENV: str = os.getenv("APP_ENV", "development")
    SECRET_KEY: str = os.getenv("SECRET_KEY", "dev-secret")
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

    DATABASE_URL: str = resolve_database_url()
    DB_TIMEOUT_SEC: int = _env_int("DB_TIMEOUT_SEC", 10)

    CORS_ORIGINS: str = os.getenv("CORS_ORIGINS", "*")

    # Admin (define-card, raffle)
    STUDIO_CODE: str = os.getenv("STUDIO_CODE", "")

    # Geo gate for submit/scan
    ALLOW_ALL_GEO: bool = _env_bool("ALLOW_ALL_GEO", False)
    GEO_ALLOWED_COUNTRY: str = os.getenv("GEO_ALLOWED_COUNTRY", "US")
    GEO_ALLOWED_REGION: str = os.getenv("GEO_ALLOWED_REGION", "IN")
    GEO_ALLOWED_REGION_NAME: str = os.getenv("GEO_ALLOWED_REGION_NAME", "indiana")

    # Vision service
    SCANNING_ENABLED: bool = _env_bool("SCANNING_ENABLED", True)
    OPENAI_API_KEY: str = os.getenv("OPENAI_API_KEY", "")
    OPENAI_MODEL: str = os.getenv("OPENAI_MODEL", "gpt-4.1-mini")
    OPENAI_BASE_URL: str = os.getenv("OPENAI_BASE_URL", "https://api.openai.com/v1")
    VISION_TIMEOUT_SEC: int = _env_int("VISION_TIMEOUT_SEC", 30)
    VISION_RETRIES: int = _env_int("VISION_RETRIES", 2)
    MAX_IMAGE_BYTES: int = _env_int("MAX_IMAGE_BYTES", 6_000_000)

    LEADERBOARD_DEFAULT_LIMIT: int = _env_int("LEADERBOARD_DEFAULT_LIMIT", 50)
    LEADERBOARD_MAX_LIMIT: int = _env_int("LEADERBOARD_MAX_LIMIT", 100)
    RAFFLE_POOL_LIMIT: int = _env_int("RAFFLE_POOL_LIMIT", 50)

    # Ticket formula: marked + points_per_line * lines + full card bonus
    SCORING_POINTS_PER_LINE: int = _env_int("SCORING_POINTS_PER_LINE", 3)
    SCORING_FULL_CARD_BONUS: int = _env_int("SCORING_FULL_CARD_BONUS", 5)
    SCORING_COUNT_DIAGONALS: bool = _env_bool("SCORING_COUNT_DIAGONALS", True)

    # Rate limits: "<limit>/<window seconds>"
    RATE_LIMIT_SUBMIT_IP: str = os.getenv("RATE_LIMIT_SUBMIT_IP", "20/60")
    RATE_LIMIT_SUBMIT_DEVICE: str = os.getenv("RATE_LIMIT_SUBMIT_DEVICE", "10/60")
    RATE_LIMIT_SCAN_IP: str = os.getenv("RATE_LIMIT_SCAN_IP", "6/60")
    RATE_LIMIT_SCAN_DEVICE: str = os.getenv("RATE_LIMIT_SCAN_DEVICE", "3/60")
    RATE_LIMIT_SCAN_DEVICE_DAY: str = os.getenv("RATE_LIMIT_SCAN_DEVICE_DAY", "30/86400")
    RATE_LIMIT_DEFINE_IP: str = os.getenv("RATE_LIMIT_DEFINE_IP", "5/60")


@dataclass(frozen=True)
class DevelopmentConfig(BaseConfig):
    """Development configuration."""

    DEBUG: bool = True


@dataclass(frozen=True)
class ProductionConfig(BaseConfig):
    """Production configuration."""

    DEBUG: bool = False


def get_config() -> type[BaseConfig]:
    """Resolve configuration class based on APP_ENV."""

    env = os.getenv("APP_ENV", "development").lower().strip()
    if env == "production":
        return ProductionConfig
    return DevelopmentConfig

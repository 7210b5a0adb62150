import logging
import os
from dataclasses import dataclass

from dotenv import load_dotenv

load_dotenv()


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


def _env_int(name: str, default: int, min_value: int | None = None) -> int:
    raw = os.getenv(name)
    if raw is None:
        value = default
    else:
        try:
            value = int(raw)
        except ValueError:
            value = default
    if min_value is not None:
        return max(min_value, value)
    return value


def _normalize_prefix(raw: str) -> str:
    cleaned = raw.strip().strip("/")
    return f"/{cleaned}" if cleaned else ""


@dataclass(frozen=True)
class Settings:
    app_name: str
    api_prefix: str
    secret_key: str
    algorithm: str
    access_token_expire_minutes: int
    issuer: str
    cors_origins: tuple[str, ...]
    database_url: str
    database_sslmode: str
    auto_create_tables: bool
    seed_admin_enabled: bool
    seed_admin_email: str
    seed_admin_password: str
    seed_categories_enabled: bool
    expiry_warning_days: int
    log_level: str


settings = Settings(
    app_name=os.getenv("APP_NAME", "Esnaf Defterim API"),
    api_prefix=_normalize_prefix(os.getenv("API_PREFIX", "/api")),
    secret_key=os.getenv("SECRET_KEY", "CHANGE_ME_IN_PRODUCTION_32_CHAR_MIN_SECRET_KEY"),
    algorithm=os.getenv("ALGORITHM", "HS256"),
    # 7 days, same lifetime the mobile and web clients were built around
    access_token_expire_minutes=_env_int("ACCESS_TOKEN_EXPIRE_MINUTES", 7 * 24 * 60, min_value=1),
    issuer=os.getenv("TOKEN_ISSUER", "esnaf-defterim-api"),
    cors_origins=tuple(
        origin.strip().rstrip("/")
        for origin in os.getenv("CORS_ORIGINS", "http://localhost:3000").split(",")
        if origin.strip()
    ),
    database_url=os.getenv("DATABASE_URL", "sqlite:///./esnaf_defterim.db"),
    database_sslmode=os.getenv("DATABASE_SSLMODE", ""),
    auto_create_tables=_env_bool("AUTO_CREATE_TABLES", True),
    seed_admin_enabled=_env_bool("SEED_ADMIN_ENABLED", True),
    seed_admin_email=os.getenv("SEED_ADMIN_EMAIL", "admin@kasap.com"),
    seed_admin_password=os.getenv("SEED_ADMIN_PASSWORD", "admin123"),
    seed_categories_enabled=_env_bool("SEED_CATEGORIES_ENABLED", True),
    expiry_warning_days=_env_int("EXPIRY_WARNING_DAYS", 3, min_value=0),
    log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
)


def configure_logging() -> None:
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )

import json
import os
import threading
from urllib.parse import urlparse

from dotenv import load_dotenv
from pydantic import BaseModel, Field


load_dotenv()


def _parse_bool(name: str, raw: str) -> bool:
    value = raw.strip().lower()
    if value in {"1", "true", "yes", "on"}:
        return True
    if value in {"0", "false", "no", "off"}:
        return False
    raise ValueError(f"{name} must be a boolean value")


def _parse_subject_list(raw: str) -> list[str]:
    """Parse ADMIN_USERS as CSV or as a JSON array of subject ids."""
    raw = raw.strip()
    if not raw:
        return []
    if raw.startswith("["):
        try:
            parsed_list = json.loads(raw)
        except json.JSONDecodeError as exc:
            raise ValueError(f"ADMIN_USERS JSON is malformed: {exc}") from exc
        if not isinstance(parsed_list, list):
            raise ValueError("ADMIN_USERS JSON must be an array")
        return [
            str(subject).strip()
            for subject in parsed_list
            if isinstance(subject, (str, int)) and str(subject).strip()
        ]
    return [subject.strip() for subject in raw.split(",") if subject.strip()]


class Settings(BaseModel):
    app_name: str = Field(default="Timetrack")
    debug: bool = Field(default=False)
    log_level: str = Field(default="INFO")
    database_url: str = Field(default="")
    db_pool_size: int = Field(default=5)
    db_max_overflow: int = Field(default=10)
    db_pool_recycle: int = Field(default=1800)
    db_pool_pre_ping: bool = Field(default=True)
    admin_users: list[str] = Field(default_factory=list)

    @property
    def admin_subjects(self) -> frozenset[str]:
        return frozenset(self.admin_users)

    @classmethod
    def from_env(cls) -> "Settings":
        database_url = os.getenv("DATABASE_URL", "").strip()
        if not database_url:
            raise ValueError("DATABASE_URL environment variable must be set")

        parsed_db = urlparse(database_url)
        if parsed_db.scheme != "postgresql+asyncpg":
            raise ValueError("DATABASE_URL must start with 'postgresql+asyncpg://'")
        if not parsed_db.hostname:
            raise ValueError("DATABASE_URL must include hostname")

        db_pool_size = int(os.getenv("DB_POOL_SIZE", cls.model_fields["db_pool_size"].default))
        if db_pool_size <= 0:
            raise ValueError("DB_POOL_SIZE must be greater than 0")

        db_max_overflow = int(
            os.getenv("DB_MAX_OVERFLOW", cls.model_fields["db_max_overflow"].default)
        )
        if db_max_overflow < 0:
            raise ValueError("DB_MAX_OVERFLOW must be greater than or equal to 0")

        db_pool_recycle = int(
            os.getenv("DB_POOL_RECYCLE", cls.model_fields["db_pool_recycle"].default)
        )
        if db_pool_recycle <= 0:
            raise ValueError("DB_POOL_RECYCLE must be greater than 0")

        db_pool_pre_ping = _parse_bool(
            "DB_POOL_PRE_PING",
            os.getenv("DB_POOL_PRE_PING", str(cls.model_fields["db_pool_pre_ping"].default)),
        )

        return cls(
            app_name=os.getenv("APP_NAME", cls.model_fields["app_name"].default),
            debug=_parse_bool("DEBUG", os.getenv("DEBUG", "false")),
            log_level=os.getenv("LOG_LEVEL", cls.model_fields["log_level"].default).strip().upper(),
            database_url=database_url,
            db_pool_size=db_pool_size,
            db_max_overflow=db_max_overflow,
            db_pool_recycle=db_pool_recycle,
            db_pool_pre_ping=db_pool_pre_ping,
            admin_users=_parse_subject_list(os.getenv("ADMIN_USERS", "")),
        )


# Deferred so the module can be imported without a configured environment
_settings_instance: Settings | None = None
_settings_lock = threading.Lock()


def get_settings() -> Settings:
    """Get settings instance, creating it on first access.

    Uses double-checked locking so concurrent first accesses build a single
    instance.

    Raises:
        ValueError: If required environment variables are missing or invalid
    """
    global _settings_instance

    if _settings_instance is not None:
        return _settings_instance

    with _settings_lock:
        if _settings_instance is None:
            _settings_instance = Settings.from_env()

    return _settings_instance


def reset_settings() -> None:
    """Drop the cached settings so the next access re-reads the environment."""
    global _settings_instance
    with _settings_lock:
        _settings_instance = None


class _SettingsProxy:
    """Proxy to defer settings creation until first attribute access."""

    def __getattr__(self, name: str):
        return getattr(get_settings(), name)


settings = _SettingsProxy()  # type: ignore[assignment]

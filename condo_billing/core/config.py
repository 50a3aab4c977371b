"""Environment driven configuration for the billing core."""
from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

_FALSE_VALUES = {"0", "false", "False", "no", ""}


def _load_env(dotenv_path: Optional[Path] = None) -> None:
    """Load the .env file once for the process."""

    if getattr(_load_env, "_loaded", False):  # type: ignore[attr-defined]
        return

    load_dotenv(dotenv_path)
    setattr(_load_env, "_loaded", True)  # type: ignore[attr-defined]


def _get_env(name: str, default: str) -> str:
    return os.getenv(name, default)


def _get_flag(name: str, default: str) -> bool:
    return _get_env(name, default).strip() not in _FALSE_VALUES


def _get_int(name: str, default: str) -> int:
    raw_value = _get_env(name, default).strip()
    try:
        return int(raw_value)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw_value!r}") from None


@dataclass(frozen=True, slots=True)
class DatabaseSettings:
    """Connection details for the record store database."""

    driver: str = "mysql+pymysql"
    host: str = "127.0.0.1"
    port: int = 3306
    user: str = "condo"
    password: str = "condo"
    name: str = "condominiums"
    url_override: str | None = None

    @classmethod
    def from_env(cls) -> "DatabaseSettings":
        """Instantiate settings using environment overrides when present."""

        defaults = cls()
        return cls(
            driver=_get_env("DB_DRIVER", defaults.driver),
            host=_get_env("DB_HOST", defaults.host),
            port=_get_int("DB_PORT", str(defaults.port)),
            user=_get_env("DB_USER", defaults.user),
            password=_get_env("DB_PASSWORD", defaults.password),
            name=_get_env("DB_NAME", defaults.name),
            url_override=os.getenv("DATABASE_URL") or None,
        )

    @property
    def sqlalchemy_url(self) -> str:
        """Build a SQLAlchemy compatible URL."""

        if self.url_override:
            return self.url_override
        if self.password:
            credentials = f"{self.user}:{self.password}"
        else:
            credentials = self.user
        return f"{self.driver}://{credentials}@{self.host}:{self.port}/{self.name}"


@dataclass(frozen=True, slots=True)
class LoggingSettings:
    """Options forwarded to ``init_logging``."""

    level: str = "INFO"
    log_dir: Path | None = None
    console: bool = True

    @classmethod
    def from_env(cls) -> "LoggingSettings":
        log_dir = _get_env("LOG_DIR", "").strip()
        return cls(
            level=_get_env("LOG_LEVEL", "INFO").upper(),
            log_dir=Path(log_dir) if log_dir else None,
            console=_get_flag("LOG_CONSOLE", "1"),
        )


@dataclass(frozen=True, slots=True)
class BillingSettings:
    """Presentation options for amounts returned to the console."""

    currency_symbol: str = "$"

    @classmethod
    def from_env(cls) -> "BillingSettings":
        return cls(currency_symbol=_get_env("CURRENCY_SYMBOL", "$"))


@dataclass(frozen=True, slots=True)
class Settings:
    """Top-level configuration container."""

    database: DatabaseSettings
    logging: LoggingSettings
    billing: BillingSettings
    sqlalchemy_echo: bool = False

    @classmethod
    def from_env(cls, dotenv_path: Optional[Path] = None) -> "Settings":
        """Build ``Settings`` using environment variables (optionally from ``.env``)."""

        _load_env(dotenv_path)
        return cls(
            database=DatabaseSettings.from_env(),
            logging=LoggingSettings.from_env(),
            billing=BillingSettings.from_env(),
            sqlalchemy_echo=_get_flag("SQLALCHEMY_ECHO", "0"),
        )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return a cached ``Settings`` instance."""

    settings = Settings.from_env()

    # Import locally to avoid circular dependencies during module import time.
    from .log import get_logger, init_logging

    init_logging(
        level=settings.logging.level,
        log_dir=settings.logging.log_dir,
        console=settings.logging.console,
    )
    logger = get_logger(__name__)
    logger.debug(
        "Settings initialised",
        extra={
            "sqlalchemy_echo": settings.sqlalchemy_echo,
            "database": {
                "driver": settings.database.driver,
                "host": settings.database.host,
                "port": settings.database.port,
                "name": settings.database.name,
                "user": settings.database.user,
            },
            "currency_symbol": settings.billing.currency_symbol,
        },
    )
    return settings

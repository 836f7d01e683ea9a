"""Application configuration primitives."""
from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

_FALSE_VALUES = {"0", "false", "False", "no", "off"}


def _load_env(dotenv_path: Optional[Path] = None) -> None:
    """Load the .env file once for the process."""

    if getattr(_load_env, "_loaded", False):  # type: ignore[attr-defined]
        return

    load_dotenv(dotenv_path)
    setattr(_load_env, "_loaded", True)  # type: ignore[attr-defined]


def _env_flag(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip() not in _FALSE_VALUES


@dataclass(frozen=True)
class DatabaseSettings:
    """Configuration for the relational database."""

    driver: str = "mysql+pymysql"
    user: str = "finance"
    password: str = "finance"
    host: str = "127.0.0.1"
    port: int = 3306
    name: str = "finance"
    isolation_level: str = "SERIALIZABLE"

    @classmethod
    def from_env(cls) -> "DatabaseSettings":
        """Instantiate settings using environment overrides when present."""

        defaults = cls()
        return cls(
            driver=os.getenv("DB_DRIVER", defaults.driver),
            user=os.getenv("DB_USER", defaults.user),
            password=os.getenv("DB_PASSWORD", defaults.password),
            host=os.getenv("DB_HOST", defaults.host),
            port=int(os.getenv("DB_PORT", defaults.port)),
            name=os.getenv("DB_NAME", defaults.name),
            isolation_level=os.getenv("DB_ISOLATION_LEVEL", defaults.isolation_level),
        )

    @property
    def sqlalchemy_url(self) -> str:
        """Return a SQLAlchemy compatible URL."""

        if self.driver.startswith("sqlite"):
            return f"{self.driver}:///{self.name}"
        if self.password:
            credentials = f"{self.user}:{self.password}"
        else:
            credentials = self.user
        return f"{self.driver}://{credentials}@{self.host}:{self.port}/{self.name}"

    @property
    def masked_url(self) -> str:
        """Return the URL with the password replaced, safe for logging."""

        if self.driver.startswith("sqlite"):
            return self.sqlalchemy_url
        pwd = "***" if self.password else ""
        return f"{self.driver}://{self.user}:{pwd}@{self.host}:{self.port}/{self.name}"


@dataclass(frozen=True)
class AuthSettings:
    """Bearer token verification settings."""

    secret_key: str = "change-me"
    algorithm: str = "HS256"
    access_token_expire_minutes: int = 120
    organization_header: str = "X-Organization-Id"
    enabled: bool = True

    @classmethod
    def from_env(cls) -> "AuthSettings":
        defaults = cls()
        return cls(
            secret_key=os.getenv("JWT_SECRET_KEY", defaults.secret_key),
            algorithm=os.getenv("JWT_ALGORITHM", defaults.algorithm),
            access_token_expire_minutes=int(
                os.getenv("JWT_EXPIRE_MINUTES", defaults.access_token_expire_minutes)
            ),
            organization_header=os.getenv("ORG_HEADER", defaults.organization_header),
            enabled=_env_flag("AUTH_ENABLED", defaults.enabled),
        )


@dataclass(frozen=True)
class LedgerSettings:
    """Behavioural switches of the ledger engine.

    ``require_destination_ownership`` controls whether the destination account
    of a transfer must also belong to the caller. It is off by default so an
    organization can pay out to a member's personal account.

    ``apply_non_completed`` controls whether ``pending`` and ``failed``
    transactions move balances. It is on by default, which means every
    transaction is booked as if it were ``completed`` regardless of status.
    """

    require_destination_ownership: bool = False
    apply_non_completed: bool = True
    list_limit: int = 100

    @classmethod
    def from_env(cls) -> "LedgerSettings":
        defaults = cls()
        return cls(
            require_destination_ownership=_env_flag(
                "LEDGER_TRANSFER_REQUIRES_DESTINATION_OWNERSHIP",
                defaults.require_destination_ownership,
            ),
            apply_non_completed=_env_flag(
                "LEDGER_APPLY_NON_COMPLETED", defaults.apply_non_completed
            ),
            list_limit=int(os.getenv("LEDGER_LIST_LIMIT", defaults.list_limit)),
        )


@dataclass(frozen=True)
class Settings:
    """Container for application configuration."""

    database: DatabaseSettings
    auth: AuthSettings
    ledger: LedgerSettings
    sqlalchemy_echo: bool = False

    @classmethod
    def from_env(cls, dotenv_path: Optional[Path] = None) -> "Settings":
        """Build ``Settings`` using environment variables (optionally from ``.env``)."""

        _load_env(dotenv_path)

        return cls(
            database=DatabaseSettings.from_env(),
            auth=AuthSettings.from_env(),
            ledger=LedgerSettings.from_env(),
            sqlalchemy_echo=_env_flag("SQLALCHEMY_ECHO", False),
        )


@lru_cache()
def get_settings(dotenv_path: Optional[Path] = None) -> Settings:
    """Return a cached settings instance."""

    return Settings.from_env(dotenv_path=dotenv_path)

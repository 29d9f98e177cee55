"""
Runtime settings.

    settings = Settings.from_env()
    settings = Settings().with_database_url("sqlite+aiosqlite:///shop.db")

Note: Immutable; each ``with_*`` returns a new Settings.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, replace
from datetime import timedelta
from pathlib import Path

from dotenv import load_dotenv


def _get_env(*keys: str, default: str | None = None) -> str | None:
    for k in keys:
        v = os.getenv(k)
        if v is not None and str(v).strip() != "":
            return v.strip()
    return default


def _get_float(*keys: str, default: float) -> float:
    v = _get_env(*keys)
    if v is None:
        return default
    return float(v)


def _get_bool(*keys: str, default: bool) -> bool:
    v = _get_env(*keys)
    if v is None:
        return default
    return v.lower() in ("1", "true", "yes", "on")


@dataclass(frozen=True, slots=True)
class Settings:
    database_url: str = "sqlite+aiosqlite:///:memory:"
    guest_cart_key: str = "oddwheels:guest-cart"
    merge_timeout: timedelta = timedelta(seconds=15)
    watch_stock: bool = True
    log_level: str = "INFO"

    @classmethod
    def from_env(cls, env_file: str | Path | None = None) -> Settings:
        """Read ODDWHEELS_* variables, loading a .env file first if given."""
        load_dotenv(dotenv_path=env_file)
        defaults = cls()
        return cls(
            database_url=_get_env(
                "ODDWHEELS_DATABASE_URL", "DATABASE_URL", default=defaults.database_url
            )
            or defaults.database_url,
            guest_cart_key=_get_env(
                "ODDWHEELS_GUEST_CART_KEY", default=defaults.guest_cart_key
            )
            or defaults.guest_cart_key,
            merge_timeout=timedelta(
                seconds=_get_float(
                    "ODDWHEELS_MERGE_TIMEOUT",
                    default=defaults.merge_timeout.total_seconds(),
                )
            ),
            watch_stock=_get_bool("ODDWHEELS_WATCH_STOCK", default=defaults.watch_stock),
            log_level=_get_env("ODDWHEELS_LOG_LEVEL", "LOG_LEVEL", default="INFO") or "INFO",
        )

    def with_database_url(self, url: str) -> Settings:
        return replace(self, database_url=url)

    def with_merge_timeout(
        self,
        seconds: float | None = None,
        duration: timedelta | None = None,
    ) -> Settings:
        if duration is not None:
            return replace(self, merge_timeout=duration)
        if seconds is not None:
            return replace(self, merge_timeout=timedelta(seconds=seconds))
        raise ValueError("Must provide seconds or duration")

    def with_guest_cart_key(self, key: str) -> Settings:
        return replace(self, guest_cart_key=key)


def configure_logging(settings: Settings | None = None) -> None:
    level = (settings or Settings()).log_level
    logging.basicConfig(
        level=level,
        format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
    )


__all__ = ("Settings", "configure_logging")

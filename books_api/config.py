# books_api/config.py
from dataclasses import dataclass
from functools import lru_cache
import logging
import os
from typing import Mapping, Optional


DEFAULT_DATABASE_URL = "sqlite:///./books.db"
DEFAULT_LOG_LEVEL = "INFO"
DEFAULT_PAGE_SIZE = 20
DEFAULT_MAX_PAGE_SIZE = 2000

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off", ""}


def _parse_int(name: str, raw_value: str, minimum: int = 1) -> int:
    try:
        value = int(raw_value)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw_value!r}") from None
    if value < minimum:
        raise ValueError(f"{name} must be >= {minimum}")
    return value


def _parse_bool(name: str, raw_value: str) -> bool:
    value = raw_value.strip().lower()
    if value in _TRUE_VALUES:
        return True
    if value in _FALSE_VALUES:
        return False
    raise ValueError(f"{name} must be a boolean, got {raw_value!r}")


@dataclass(frozen=True)
class Settings:
    """Runtime settings read from ``BOOKS_*`` environment variables."""

    database_url: str = DEFAULT_DATABASE_URL
    log_level: str = DEFAULT_LOG_LEVEL
    default_page_size: int = DEFAULT_PAGE_SIZE
    max_page_size: int = DEFAULT_MAX_PAGE_SIZE
    sql_echo: bool = False

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Settings":
        source: Mapping[str, str] = os.environ if environ is None else environ

        database_url = source.get("BOOKS_DATABASE_URL", DEFAULT_DATABASE_URL).strip()
        if not database_url:
            raise ValueError("BOOKS_DATABASE_URL cannot be empty")

        log_level = source.get("BOOKS_LOG_LEVEL", DEFAULT_LOG_LEVEL).strip().upper()
        if not isinstance(logging.getLevelName(log_level), int):
            raise ValueError(f"BOOKS_LOG_LEVEL must be a logging level name, got {log_level!r}")

        default_page_size = _parse_int(
            "BOOKS_DEFAULT_PAGE_SIZE", source.get("BOOKS_DEFAULT_PAGE_SIZE", str(DEFAULT_PAGE_SIZE))
        )
        max_page_size = _parse_int(
            "BOOKS_MAX_PAGE_SIZE",
            source.get("BOOKS_MAX_PAGE_SIZE", str(DEFAULT_MAX_PAGE_SIZE)),
            minimum=default_page_size,
        )
        sql_echo = _parse_bool("BOOKS_SQL_ECHO", source.get("BOOKS_SQL_ECHO", "false"))

        return cls(
            database_url=database_url,
            log_level=log_level,
            default_page_size=default_page_size,
            max_page_size=max_page_size,
            sql_echo=sql_echo,
        )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings.from_env()

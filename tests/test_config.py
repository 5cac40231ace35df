from __future__ import annotations

import pytest

from books_api.config import DEFAULT_DATABASE_URL, Settings


def test_defaults_when_environment_is_empty() -> None:
    settings = Settings.from_env({})

    assert settings.database_url == DEFAULT_DATABASE_URL
    assert settings.log_level == "INFO"
    assert settings.default_page_size == 20
    assert settings.max_page_size == 2000
    assert settings.sql_echo is False


def test_values_are_read_from_environment() -> None:
    settings = Settings.from_env(
        {
            "BOOKS_DATABASE_URL": "sqlite:///tmp/test.db",
            "BOOKS_LOG_LEVEL": "debug",
            "BOOKS_DEFAULT_PAGE_SIZE": "5",
            "BOOKS_MAX_PAGE_SIZE": "50",
            "BOOKS_SQL_ECHO": "yes",
        }
    )

    assert settings.database_url == "sqlite:///tmp/test.db"
    assert settings.log_level == "DEBUG"
    assert settings.default_page_size == 5
    assert settings.max_page_size == 50
    assert settings.sql_echo is True


@pytest.mark.parametrize(
    ("environ", "name"),
    [
        ({"BOOKS_DATABASE_URL": "  "}, "BOOKS_DATABASE_URL"),
        ({"BOOKS_LOG_LEVEL": "LOUD"}, "BOOKS_LOG_LEVEL"),
        ({"BOOKS_DEFAULT_PAGE_SIZE": "0"}, "BOOKS_DEFAULT_PAGE_SIZE"),
        ({"BOOKS_DEFAULT_PAGE_SIZE": "ten"}, "BOOKS_DEFAULT_PAGE_SIZE"),
        ({"BOOKS_DEFAULT_PAGE_SIZE": "30", "BOOKS_MAX_PAGE_SIZE": "10"}, "BOOKS_MAX_PAGE_SIZE"),
        ({"BOOKS_SQL_ECHO": "maybe"}, "BOOKS_SQL_ECHO"),
    ],
)
def test_invalid_values_fail_fast(environ, name: str) -> None:
    with pytest.raises(ValueError, match=name):
        Settings.from_env(environ)

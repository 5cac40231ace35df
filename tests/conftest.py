from __future__ import annotations

from datetime import date
from pathlib import Path
from typing import Iterator

import pytest
from fastapi.testclient import TestClient

from books_api.catalog.router import get_today
from books_api.main import app
from books_api.storage import SqlBookStore, get_store

# BE 2568 is the current year, BE 2569 is in the future.
TODAY = date(2025, 12, 31)


@pytest.fixture
def today() -> date:
    return TODAY


@pytest.fixture
def store(tmp_path: Path) -> Iterator[SqlBookStore]:
    book_store = SqlBookStore.from_url(f"sqlite:///{tmp_path / 'books.db'}")
    book_store.create_schema()
    yield book_store
    book_store.dispose()


@pytest.fixture
def client(store: SqlBookStore) -> Iterator[TestClient]:
    app.dependency_overrides[get_store] = lambda: store
    app.dependency_overrides[get_today] = lambda: TODAY
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()

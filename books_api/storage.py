# books_api/storage.py
import logging
from dataclasses import dataclass
from datetime import date
from typing import List, Optional, Protocol, Sequence

from sqlalchemy import Column, Date, Index, Integer, String, create_engine, delete, func, select
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import declarative_base, sessionmaker

from .catalog.errors import StorageError
from .catalog.validation import ValidatedBook
from .config import get_settings


logger = logging.getLogger(__name__)

Base = declarative_base()


class BookEntity(Base):
    __tablename__ = "books"

    id = Column(Integer, primary_key=True, autoincrement=True)
    title = Column(String(255), nullable=False)
    author = Column(String(255), nullable=False)
    published_date = Column(Date, nullable=False)
    # author.casefold(), which can be up to three times longer than author.
    author_key = Column(String(765), nullable=False)


# Author lookups compare the case-folded key.
AUTHOR_INDEX = Index("idx_books_author", BookEntity.__table__.c.author_key)

SORTABLE_COLUMNS = {
    "id": BookEntity.id,
    "title": BookEntity.title,
    "author": BookEntity.author,
    "publishedDate": BookEntity.published_date,
}


@dataclass(frozen=True)
class BookRecord:
    id: int
    title: str
    author: str
    published_date: date


@dataclass
class StorePage:
    items: List[BookRecord]
    total: int


class BookStore(Protocol):
    def insert(self, book: ValidatedBook) -> BookRecord: ...

    def insert_many(self, books: Sequence[ValidatedBook]) -> List[BookRecord]: ...

    def find_by_author(
        self, author: str, page: int, size: int, sort_key: str = "publishedDate", descending: bool = False
    ) -> StorePage: ...

    def find_all(self, page: int, size: int, sort_key: str = "id", descending: bool = False) -> StorePage: ...


def author_matches(author: str):
    return BookEntity.author_key == author.casefold()


def _to_record(entity: BookEntity) -> BookRecord:
    return BookRecord(
        id=entity.id,
        title=entity.title,
        author=entity.author,
        published_date=entity.published_date,
    )


class SqlBookStore:
    """``BookStore`` backed by an SQLAlchemy engine."""

    def __init__(self, engine: Engine) -> None:
        self._engine = engine
        self._sessions = sessionmaker(bind=engine, expire_on_commit=False)

    @classmethod
    def from_url(cls, url: str, echo: bool = False) -> "SqlBookStore":
        connect_args = {"check_same_thread": False} if url.startswith("sqlite") else {}
        return cls(create_engine(url, echo=echo, connect_args=connect_args))

    @property
    def engine(self) -> Engine:
        return self._engine

    def create_schema(self) -> None:
        Base.metadata.create_all(self._engine)

    def dispose(self) -> None:
        self._engine.dispose()

    def insert(self, book: ValidatedBook) -> BookRecord:
        return self.insert_many([book])[0]

    def insert_many(self, books: Sequence[ValidatedBook]) -> List[BookRecord]:
        entities = [
            BookEntity(
                title=b.title,
                author=b.author,
                author_key=b.author.casefold(),
                published_date=b.published_date,
            )
            for b in books
        ]
        try:
            with self._sessions.begin() as session:
                session.add_all(entities)
                session.flush()
                records = [_to_record(e) for e in entities]
        except SQLAlchemyError as exc:
            logger.exception("Failed to insert %d book(s)", len(entities))
            raise StorageError("Could not store books") from exc
        return records

    def find_by_author(
        self, author: str, page: int, size: int, sort_key: str = "publishedDate", descending: bool = False
    ) -> StorePage:
        return self._find_page(author_matches(author), page, size, sort_key, descending)

    def find_all(self, page: int, size: int, sort_key: str = "id", descending: bool = False) -> StorePage:
        return self._find_page(None, page, size, sort_key, descending)

    def clear(self) -> None:
        """Delete every book. Only meant for test isolation."""
        try:
            with self._sessions.begin() as session:
                session.execute(delete(BookEntity))
        except SQLAlchemyError as exc:
            logger.exception("Failed to clear books")
            raise StorageError("Could not clear books") from exc

    def _find_page(self, condition, page: int, size: int, sort_key: str, descending: bool) -> StorePage:
        column = SORTABLE_COLUMNS[sort_key]
        order_by = [column.desc() if descending else column.asc()]
        # id breaks ties so that pages never overlap.
        if sort_key != "id":
            order_by.append(BookEntity.id.asc())

        query = select(BookEntity)
        count_query = select(func.count()).select_from(BookEntity)
        if condition is not None:
            query = query.where(condition)
            count_query = count_query.where(condition)
        query = query.order_by(*order_by).offset(page * size).limit(size)

        try:
            with self._sessions() as session:
                total = session.execute(count_query).scalar_one()
                rows = session.execute(query).scalars().all()
        except SQLAlchemyError as exc:
            logger.exception("Failed to read books page %d (size %d)", page, size)
            raise StorageError("Could not read books") from exc
        return StorePage(items=[_to_record(r) for r in rows], total=total)


_store: Optional[SqlBookStore] = None


def get_store() -> BookStore:
    global _store
    if _store is None:
        settings = get_settings()
        _store = SqlBookStore.from_url(settings.database_url, echo=settings.sql_echo)
        _store.create_schema()
        logger.info("Book store ready on %s", _store.engine.url.render_as_string(hide_password=True))
    return _store

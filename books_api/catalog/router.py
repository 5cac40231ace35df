"""
Route definitions for the books API.

Endpoints under /books:
- POST /books            : store one book (publishedDate in Buddhist Era)
- POST /books/bulk       : store a batch of books, all or nothing
- GET  /books?author=... : one page of an author's books (case-insensitive)
- GET  /books/all        : one page of every book

Dates are received as Buddhist Era ``yyyy-MM-dd`` and returned as
Gregorian ``yyyy-MM-dd``.
"""

from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Depends, Query

from ..config import Settings, get_settings
from ..models import BookPostResponse, BookSubmission
from ..storage import BookStore, get_store
from . import service
from .schemas import PageResponse

router = APIRouter(prefix="/books", tags=["books"])


def get_today() -> date:
    """Reference date for the publication year check."""
    return date.today()


@router.post("", response_model=BookPostResponse, status_code=201)
def create_book(
    submission: BookSubmission,
    store: BookStore = Depends(get_store),
    today: date = Depends(get_today),
) -> BookPostResponse:
    return service.ingest_one(store, submission, today=today)


@router.post("/bulk", response_model=List[BookPostResponse], status_code=201)
def create_books(
    submissions: List[BookSubmission],
    store: BookStore = Depends(get_store),
    today: date = Depends(get_today),
) -> List[BookPostResponse]:
    return service.ingest_many(store, submissions, today=today)


@router.get("", response_model=PageResponse)
def list_books_by_author(
    author: Optional[str] = Query(default=None, description="Author name, matched ignoring case"),
    page: int = Query(default=0, ge=0, description="Page number (0-based)"),
    size: Optional[int] = Query(default=None, ge=1, description="Page size"),
    sort: Optional[str] = Query(default=None, description="property[,asc|desc], default publishedDate"),
    store: BookStore = Depends(get_store),
    settings: Settings = Depends(get_settings),
) -> PageResponse:
    return service.by_author(
        store,
        author,
        page=page,
        size=size or settings.default_page_size,
        sort=sort,
        max_page_size=settings.max_page_size,
    )


@router.get("/all", response_model=PageResponse)
def list_all_books(
    page: int = Query(default=0, ge=0, description="Page number (0-based)"),
    size: Optional[int] = Query(default=None, ge=1, description="Page size"),
    sort: Optional[str] = Query(default=None, description="property[,asc|desc], default id"),
    store: BookStore = Depends(get_store),
    settings: Settings = Depends(get_settings),
) -> PageResponse:
    return service.all_books(
        store,
        page=page,
        size=size or settings.default_page_size,
        sort=sort,
        max_page_size=settings.max_page_size,
    )

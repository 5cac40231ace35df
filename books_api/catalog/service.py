"""
Ingestion and retrieval services for the catalogue.

The functions here sit between the routes in ``router.py`` and the
store. They hold no state of their own: every call validates its input,
talks to the ``BookStore`` it is given and shapes the result. Keeping
the store and the reference date as parameters lets the tests drive
them with a temporary database and a fixed "today".
"""

import logging
from datetime import date
from typing import List, Optional, Sequence, Tuple

from ..models import BookPostResponse, BookSubmission
from ..storage import SORTABLE_COLUMNS, BookStore, StorePage
from .dates import to_buddhist_era
from .errors import BookValidationError, FieldError, InvalidParameter, MissingParameter
from .schemas import BookDetail, PageResponse
from .validation import ValidatedBook, validate_submission

logger = logging.getLogger(__name__)

DEFAULT_PAGE_SIZE = 20
MAX_PAGE_SIZE = 2000
# Largest row offset a 64-bit SQL integer can hold.
MAX_OFFSET = 2**63 - 1

AUTHOR_DEFAULT_SORT = "publishedDate"
ALL_DEFAULT_SORT = "id"


def ingest_one(store: BookStore, submission: BookSubmission, today: Optional[date] = None) -> BookPostResponse:
    """Validate one submission and store it.

    Raises
    ------
    BookValidationError
        With every failing field, before anything is written.
    """
    result = validate_submission(submission, today=today)
    if not result.ok:
        logger.info("Rejected book submission: %s", [e.to_dict() for e in result.errors])
        raise BookValidationError(result.errors)

    record = store.insert(result.book)
    logger.info(
        "Stored book %d (%r by %r, published %s BE)",
        record.id,
        record.title,
        record.author,
        to_buddhist_era(record.published_date),
    )
    return BookPostResponse(id=record.id)


def ingest_many(
    store: BookStore, submissions: Sequence[BookSubmission], today: Optional[date] = None
) -> List[BookPostResponse]:
    """Validate a batch and store it in one transaction.

    The batch is all-or-nothing: if any item fails validation nothing is
    stored and the error lists the failing fields of every failing item,
    prefixed with the item's position (``[1].author``).
    """
    if not submissions:
        raise BookValidationError([FieldError(None, "at least one book is required")])

    books: List[ValidatedBook] = []
    errors: List[FieldError] = []
    for index, submission in enumerate(submissions):
        result = validate_submission(submission, today=today)
        if result.ok:
            books.append(result.book)
        else:
            errors.extend(FieldError(f"[{index}].{e.field}", e.message) for e in result.errors)

    if errors:
        logger.info("Rejected bulk submission of %d book(s): %d error(s)", len(submissions), len(errors))
        raise BookValidationError(errors)

    records = store.insert_many(books)
    logger.info("Stored %d book(s) in bulk: ids %s", len(records), [r.id for r in records])
    return [BookPostResponse(id=r.id) for r in records]


def parse_sort(sort: Optional[str], default_key: str) -> Tuple[str, bool]:
    """Parse a ``property[,asc|desc]`` sort parameter.

    Returns
    -------
    Tuple[str, bool]
        The property name and whether the order is descending.
    """
    if sort is None or not sort.strip():
        return default_key, False

    parts = [p.strip() for p in sort.split(",")]
    if len(parts) > 2:
        raise InvalidParameter("sort", "sort must look like 'property' or 'property,asc|desc'")

    key = parts[0]
    direction = parts[1].lower() if len(parts) == 2 and parts[1] else "asc"
    if key not in SORTABLE_COLUMNS:
        allowed = ", ".join(sorted(SORTABLE_COLUMNS))
        raise InvalidParameter("sort", f"cannot sort by '{key}'; expected one of: {allowed}")
    if direction not in ("asc", "desc"):
        raise InvalidParameter("sort", f"sort direction must be 'asc' or 'desc', got '{parts[1]}'")
    return key, direction == "desc"


def _check_page(page: int, size: int) -> None:
    if page * size > MAX_OFFSET:
        raise InvalidParameter("page", f"page must be at most {MAX_OFFSET // size} for page size {size}")


def _clamp_size(size: int, max_page_size: int) -> int:
    return max(1, min(size, max_page_size))


def build_page(store_page: StorePage, page: int, size: int, sort_key: str, descending: bool) -> PageResponse:
    total = store_page.total
    total_pages = (total + size - 1) // size
    return PageResponse(
        content=[BookDetail.from_record(r) for r in store_page.items],
        total_elements=total,
        total_pages=total_pages,
        number=page,
        size=size,
        first=page == 0,
        last=page >= total_pages - 1,
        sort=f"{sort_key}: {'DESC' if descending else 'ASC'}",
    )


def by_author(
    store: BookStore,
    author: Optional[str],
    page: int = 0,
    size: int = DEFAULT_PAGE_SIZE,
    sort: Optional[str] = None,
    max_page_size: int = MAX_PAGE_SIZE,
) -> PageResponse:
    """Return one page of the books whose author matches, ignoring case.

    Raises
    ------
    MissingParameter
        If ``author`` is absent or blank.
    """
    if author is None or not author.strip():
        raise MissingParameter("author")

    sort_key, descending = parse_sort(sort, AUTHOR_DEFAULT_SORT)
    size = _clamp_size(size, max_page_size)
    _check_page(page, size)
    store_page = store.find_by_author(author.strip(), page, size, sort_key=sort_key, descending=descending)
    return build_page(store_page, page, size, sort_key, descending)


def all_books(
    store: BookStore,
    page: int = 0,
    size: int = DEFAULT_PAGE_SIZE,
    sort: Optional[str] = None,
    max_page_size: int = MAX_PAGE_SIZE,
) -> PageResponse:
    """Return one page of every stored book."""
    sort_key, descending = parse_sort(sort, ALL_DEFAULT_SORT)
    size = _clamp_size(size, max_page_size)
    _check_page(page, size)
    store_page = store.find_all(page, size, sort_key=sort_key, descending=descending)
    return build_page(store_page, page, size, sort_key, descending)

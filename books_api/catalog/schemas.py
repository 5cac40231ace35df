"""
Pydantic schema definitions for the catalog module.

``BookDetail`` is what clients receive for every stored book; its
``publishedDate`` is always a Gregorian date. ``PageResponse`` bundles
one slice of an ordered result with the pagination metadata clients
need to walk the remaining pages. Field names on the wire are
camelCase; the Python attributes stay snake_case.
"""

from datetime import date
from typing import List

from pydantic import BaseModel, ConfigDict, Field


class BookDetail(BaseModel):
    """A stored book as returned by the read endpoints."""

    model_config = ConfigDict(populate_by_name=True)

    id: int
    title: str
    author: str
    published_date: date = Field(alias="publishedDate")

    @classmethod
    def from_record(cls, record) -> "BookDetail":
        return cls(
            id=record.id,
            title=record.title,
            author=record.author,
            published_date=record.published_date,
        )


class PageResponse(BaseModel):
    """One page of books plus pagination metadata.

    ``number`` is 0-based. ``sort`` describes the requested ordering,
    e.g. ``"publishedDate: DESC"``.
    """

    model_config = ConfigDict(populate_by_name=True)

    content: List[BookDetail] = Field(default_factory=list)
    total_elements: int = Field(alias="totalElements")
    total_pages: int = Field(alias="totalPages")
    number: int
    size: int
    first: bool
    last: bool
    sort: str = ""

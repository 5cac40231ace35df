"""
Exceptions raised by the catalogue.

All of them derive from ``BooksApiError`` so that ``main.py`` can turn
them into the JSON error envelope in one place. ``InvalidDate`` is a
``ValueError`` because it is raised by a pure parsing function and is
always converted into a field error by the validator before it reaches
the HTTP layer.
"""

from dataclasses import dataclass
from typing import List, Optional


class InvalidDate(ValueError):
    """A lexically valid date that is out of range or does not exist."""


@dataclass(frozen=True)
class FieldError:
    """One failing field together with a human readable message."""

    field: Optional[str]
    message: str

    def to_dict(self) -> dict:
        if self.field is None:
            return {"message": self.message}
        return {"field": self.field, "message": self.message}


class BooksApiError(Exception):
    """Base class for errors reported to API clients."""

    status_code = 400

    def field_errors(self) -> List[FieldError]:
        return [FieldError(None, str(self))]


class BookValidationError(BooksApiError):
    """One or more submissions failed validation."""

    def __init__(self, errors: List[FieldError]) -> None:
        super().__init__("; ".join(e.message for e in errors))
        self.errors = list(errors)

    def field_errors(self) -> List[FieldError]:
        return self.errors


class MissingParameter(BooksApiError):
    """A required query parameter is absent or blank."""

    def __init__(self, name: str) -> None:
        super().__init__(f"{name} is required")
        self.name = name

    def field_errors(self) -> List[FieldError]:
        return [FieldError(self.name, str(self))]


class InvalidParameter(BooksApiError):
    """A query parameter has a value the catalogue cannot honour."""

    def __init__(self, name: str, message: str) -> None:
        super().__init__(message)
        self.name = name

    def field_errors(self) -> List[FieldError]:
        return [FieldError(self.name, str(self))]


class StorageError(BooksApiError):
    """The store could not complete an operation."""

    status_code = 500

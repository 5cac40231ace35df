"""
Validation of incoming book submissions.

``validate_submission`` runs every check and collects all failures in a
``ValidationResult`` instead of stopping at the first one, so a client
that sends an empty title *and* an empty author learns about both in a
single response. The publication date is only handed to the Buddhist
Era normalizer once it has the ``yyyy-MM-dd`` shape.
"""

from dataclasses import dataclass, field
from datetime import date
from typing import List, Optional

from ..models import BookSubmission
from .dates import is_date_shaped, normalize_be_date
from .errors import FieldError, InvalidDate

MAX_TEXT_LENGTH = 255

DATE_FIELD = "publishedDate"


@dataclass(frozen=True)
class ValidatedBook:
    """A submission that passed validation, with its date in AD."""

    title: str
    author: str
    published_date: date


@dataclass
class ValidationResult:
    book: Optional[ValidatedBook] = None
    errors: List[FieldError] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors


def _check_text(name: str, value: Optional[str], errors: List[FieldError]) -> str:
    text = (value or "").strip()
    if not text:
        errors.append(FieldError(name, f"{name} must not be empty"))
    elif len(text) > MAX_TEXT_LENGTH:
        errors.append(FieldError(name, f"{name} must be at most {MAX_TEXT_LENGTH} characters"))
    return text


def validate_submission(submission: BookSubmission, today: Optional[date] = None) -> ValidationResult:
    """Validate one submission and normalize its date.

    Parameters
    ----------
    submission : BookSubmission
        The decoded request body.
    today : Optional[date]
        Reference date for the "not in the future" rule.

    Returns
    -------
    ValidationResult
        ``book`` is set only when ``errors`` is empty.
    """
    errors: List[FieldError] = []
    title = _check_text("title", submission.title, errors)
    author = _check_text("author", submission.author, errors)

    published: Optional[date] = None
    raw_date = (submission.published_date or "").strip()
    if not raw_date:
        errors.append(FieldError(DATE_FIELD, f"{DATE_FIELD} must not be empty"))
    elif not is_date_shaped(raw_date):
        errors.append(FieldError(DATE_FIELD, f"{DATE_FIELD} must match yyyy-MM-dd"))
    else:
        try:
            published = normalize_be_date(raw_date, today=today)
        except InvalidDate as exc:
            errors.append(FieldError(DATE_FIELD, str(exc)))

    if errors:
        return ValidationResult(errors=errors)
    return ValidationResult(book=ValidatedBook(title=title, author=author, published_date=published))

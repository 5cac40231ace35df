# books_api/main.py
import logging
from datetime import datetime, timezone
from typing import List, Optional, Sequence, Union

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from .catalog.errors import BooksApiError, FieldError
from .catalog.router import router as catalog_router
from .config import get_settings


settings = get_settings()
logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


app = FastAPI(
    title="Books API",
    description=(
        "Microservice de catalogue : enregistre des livres dont la date de "
        "publication est donnée en ère bouddhique et les restitue en "
        "calendrier grégorien, filtrés par auteur et paginés."
    ),
    version="1.0.0",
)
app.include_router(catalog_router)


def _error_body(request: Request, status: int, errors: List[FieldError]) -> dict:
    return {
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "status": status,
        "errors": [e.to_dict() for e in errors],
        "path": request.url.path,
    }


def _field_name(loc: Sequence[Union[str, int]]) -> Optional[str]:
    # ("body", 1, "title") -> "[1].title", ("query", "page") -> "page"
    name = ""
    for part in loc[1:]:
        if isinstance(part, int):
            name += f"[{part}]"
        else:
            name += f".{part}" if name else str(part)
    return name or None


@app.exception_handler(BooksApiError)
def handle_books_api_error(request: Request, exc: BooksApiError) -> JSONResponse:
    if exc.status_code >= 500:
        errors = [FieldError(None, "Internal storage error")]
    else:
        errors = exc.field_errors()
    return JSONResponse(status_code=exc.status_code, content=_error_body(request, exc.status_code, errors))


@app.exception_handler(RequestValidationError)
def handle_request_validation(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = []
    for err in exc.errors():
        if err.get("type") == "json_invalid":
            errors.append(FieldError(None, "Malformed JSON body"))
        else:
            errors.append(FieldError(_field_name(err["loc"]), err["msg"]))
    return JSONResponse(status_code=400, content=_error_body(request, 400, errors))


# 🔹 Route de base pour tester rapidement
@app.get("/")
def health_check():
    return {"status": "ok", "message": "Books API live"}

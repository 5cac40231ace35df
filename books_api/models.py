# books_api/models.py
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class BookSubmission(BaseModel):
    # Every field is optional here so that missing values are reported by
    # the validator together with the other field errors.
    model_config = ConfigDict(populate_by_name=True)

    title: Optional[str] = None
    author: Optional[str] = None
    published_date: Optional[str] = Field(
        default=None,
        alias="publishedDate",
        description="Date de publication en ère bouddhique, format yyyy-MM-dd (ex. 2568-09-14).",
        examples=["2568-09-14"],
    )


class BookPostResponse(BaseModel):
    id: int

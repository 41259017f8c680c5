"""
Book Pydantic Schemas

Handles:
- Required catalogue fields (title, author, description)
- Cover image URL validation
- Pagination envelope for list responses ({books, page, pages, totalBooks})
"""

from datetime import date, datetime

from pydantic import AnyHttpUrl, Field, TypeAdapter, field_validator

from bookreview.schemas.base import CamelModel

_http_url = TypeAdapter(AnyHttpUrl)


def _check_cover_url(v: str | None) -> str | None:
    if v is None:
        return v
    v = v.strip()
    if not v:
        return None
    try:
        _http_url.validate_python(v)
    except ValueError:
        raise ValueError("Cover image must be a valid URL") from None
    return v


class BookBase(CamelModel):
    """
    Base schema with shared book fields.

    Text fields are trimmed; required ones may not be blank.
    """

    title: str = Field(
        ...,
        min_length=1,
        max_length=500,
        description="Book title",
        examples=["Pride and Prejudice"],
    )

    author: str = Field(
        ...,
        min_length=1,
        max_length=255,
        description="Author name",
        examples=["Jane Austen"],
    )

    description: str = Field(
        ...,
        min_length=1,
        max_length=10000,
        description="Book description or summary",
    )

    cover_image_url: str | None = Field(
        default=None,
        max_length=1000,
        description="URL of the cover image",
    )

    genre: str | None = Field(
        default=None,
        max_length=100,
        description="Genre label",
        examples=["Classic Romance"],
    )

    isbn: str | None = Field(
        default=None,
        max_length=20,
        description="ISBN",
    )

    publisher: str | None = Field(
        default=None,
        max_length=255,
        description="Publisher name",
    )

    publication_date: date | None = Field(
        default=None,
        description="Date of publication",
        examples=["1813-01-28"],
    )

    @field_validator("title", "author", "description")
    @classmethod
    def required_text_must_not_be_blank(cls, v: str, info) -> str:
        if not v.strip():
            raise ValueError(f"{info.field_name.capitalize()} is required")
        return v.strip()

    @field_validator("genre", "isbn", "publisher")
    @classmethod
    def strip_optional_text(cls, v: str | None) -> str | None:
        if v is None:
            return v
        return v.strip() or None

    @field_validator("cover_image_url")
    @classmethod
    def validate_cover_image_url(cls, v: str | None) -> str | None:
        return _check_cover_url(v)


class BookCreate(BookBase):
    """
    Schema for creating a new book.

    Example request body:
    {
        "title": "Treasure Island",
        "author": "Robert Louis Stevenson",
        "description": "An adventure novel...",
        "genre": "Adventure",
        "publicationDate": "1883-11-14"
    }
    """

    pass


class BookUpdate(CamelModel):
    """
    Schema for updating an existing book.

    All fields are optional. averageRating is not accepted: it is
    maintained by the rating aggregator only.
    """

    title: str | None = Field(default=None, min_length=1, max_length=500)
    author: str | None = Field(default=None, min_length=1, max_length=255)
    description: str | None = Field(default=None, min_length=1, max_length=10000)
    cover_image_url: str | None = Field(default=None, max_length=1000)
    genre: str | None = Field(default=None, max_length=100)
    isbn: str | None = Field(default=None, max_length=20)
    publisher: str | None = Field(default=None, max_length=255)
    publication_date: date | None = Field(default=None)

    @field_validator("title", "author", "description")
    @classmethod
    def required_text_must_not_be_blank(cls, v: str | None, info) -> str:
        # Defaults are not validated, so this only runs for fields the
        # client sent; an explicit null would clear a required column.
        if v is None or not v.strip():
            raise ValueError(f"{info.field_name.capitalize()} cannot be empty")
        return v.strip()

    @field_validator("cover_image_url")
    @classmethod
    def validate_cover_image_url(cls, v: str | None) -> str | None:
        return _check_cover_url(v)


class BookResponse(CamelModel):
    """
    Schema for book responses.

    Serializes stored rows as they are. Input rules from BookBase are not
    reapplied, so a row written by a script or migration still renders.
    averageRating is null while the book has no reviews.
    """

    id: int = Field(..., description="Unique identifier")
    title: str
    author: str
    description: str
    cover_image_url: str | None = None
    genre: str | None = None
    isbn: str | None = None
    publisher: str | None = None
    publication_date: date | None = None
    average_rating: float | None = Field(
        default=None,
        description="Mean review rating (0-5), null if no reviews",
    )
    added_by_id: int | None = Field(default=None, description="User who added the book")
    created_at: datetime = Field(..., description="When the book was created")
    updated_at: datetime = Field(..., description="When the book was last updated")


class BookMinimal(CamelModel):
    """Book info embedded in review responses."""

    id: int = Field(..., description="Book ID")
    title: str = Field(..., description="Book title")
    cover_image_url: str | None = Field(default=None, description="Cover image URL")


class BookListResponse(CamelModel):
    """
    Schema for paginated book list responses.

    - books: Books on this page
    - page: Current page number
    - pages: Total number of pages
    - totalBooks: Total number of books matching the query
    """

    books: list[BookResponse] = Field(..., description="Books for this page")
    page: int = Field(..., ge=1, description="Current page number")
    pages: int = Field(..., ge=0, description="Total number of pages")
    total_books: int = Field(..., ge=0, description="Total number of books")

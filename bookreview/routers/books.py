"""
Books Router

Catalogue endpoints. Reading is public; writing is admin-only.

Endpoints:
- GET /books - Paginated list, optional genre filter and text search
- GET /books/genres - Distinct genre labels
- GET /books/{book_id} - Single book with its average rating
- POST /books - Create a book (admin)
- PUT /books/{book_id} - Update catalogue fields (admin)
- DELETE /books/{book_id} - Delete a book and its reviews (admin)

The average rating is read-only here; it is maintained by the rating
aggregator whenever reviews change.
"""

import logging
import math

from fastapi import APIRouter, Query, Request, status
from sqlalchemy import func, or_, select

from bookreview.config import get_settings
from bookreview.dependencies import AdminUser, DbSession, Pagination, get_book_or_404
from bookreview.models import Book
from bookreview.schemas import (
    BookCreate,
    BookListResponse,
    BookResponse,
    BookUpdate,
    MessageResponse,
)
from bookreview.services.rate_limiter import limiter

logger = logging.getLogger(__name__)

settings = get_settings()

router = APIRouter(
    prefix="/books",
    tags=["Books"],
    responses={
        404: {"description": "Book not found"},
    },
)


def apply_book_filters(stmt, genre: str | None, search: str | None):
    """
    Narrow a book query.

    - genre: exact genre label
    - search: case-insensitive substring of title or author
    """
    if genre:
        stmt = stmt.where(Book.genre == genre)

    if search:
        search_term = f"%{search.lower()}%"
        stmt = stmt.where(
            or_(
                func.lower(Book.title).like(search_term),
                func.lower(Book.author).like(search_term),
            )
        )

    return stmt


@router.get(
    "",
    response_model=BookListResponse,
    summary="List books",
    description="Get a paginated list of books, newest first, optionally filtered by genre or search text.",
)
@limiter.limit(settings.rate_limit_default)
def list_books(
    request: Request,
    db: DbSession,
    pagination: Pagination,
    genre: str | None = Query(
        default=None,
        max_length=100,
        description="Filter by genre (exact match)",
    ),
    search: str | None = Query(
        default=None,
        max_length=100,
        description="Search title and author (case-insensitive)",
    ),
) -> BookListResponse:
    """
    List books with pagination.

    Examples:
        GET /api/v1/books?page=2&limit=20
        GET /api/v1/books?genre=Adventure%20Fiction
        GET /api/v1/books?search=austen
    """
    base_stmt = apply_book_filters(select(Book), genre, search)

    count_stmt = select(func.count()).select_from(base_stmt.subquery())
    total = db.execute(count_stmt).scalar() or 0

    pages = math.ceil(total / pagination.limit) if total > 0 else 0

    stmt = (
        base_stmt
        .order_by(Book.created_at.desc(), Book.id.desc())
        .offset(pagination.skip)
        .limit(pagination.limit)
    )
    books = db.execute(stmt).scalars().all()

    return BookListResponse(
        books=[BookResponse.model_validate(book) for book in books],
        page=pagination.page,
        pages=pages,
        total_books=total,
    )


@router.get(
    "/genres",
    response_model=list[str],
    summary="List genres",
    description="Distinct genre labels used by the catalogue, sorted alphabetically.",
)
@limiter.limit(settings.rate_limit_default)
def list_genres(request: Request, db: DbSession) -> list[str]:
    stmt = (
        select(Book.genre)
        .where(Book.genre.is_not(None), Book.genre != "")
        .distinct()
        .order_by(Book.genre)
    )
    return list(db.execute(stmt).scalars().all())


@router.get(
    "/{book_id}",
    response_model=BookResponse,
    summary="Get a book by ID",
    description="Retrieve a book including its average rating (null when unrated).",
)
@limiter.limit(settings.rate_limit_default)
def get_book(
    request: Request,
    book_id: int,
    db: DbSession,
) -> BookResponse:
    book = get_book_or_404(db, book_id)
    return BookResponse.model_validate(book)


@router.post(
    "",
    response_model=BookResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a new book",
    description="Add a book to the catalogue. Requires an admin token.",
)
@limiter.limit(settings.rate_limit_write)
def create_book(
    request: Request,
    book_data: BookCreate,
    db: DbSession,
    current_user: AdminUser,
) -> BookResponse:
    """
    Create a new book.

    New books start unrated; averageRating is never taken from the body.

    Args:
        book_data: Validated book data from request body
        current_user: Admin creating the entry (stored as addedById)

    Returns:
        Created book
    """
    book = Book(
        **book_data.model_dump(),
        added_by_id=current_user.id,
    )

    db.add(book)
    db.commit()
    db.refresh(book)

    logger.info(f"Book {book.id} created by user {current_user.id}")

    return BookResponse.model_validate(book)


@router.put(
    "/{book_id}",
    response_model=BookResponse,
    summary="Update a book",
    description="Update catalogue fields of a book. Requires an admin token.",
)
@limiter.limit(settings.rate_limit_write)
def update_book(
    request: Request,
    book_id: int,
    book_data: BookUpdate,
    db: DbSession,
    current_user: AdminUser,
) -> BookResponse:
    """
    Update an existing book.

    Only provided fields are updated (PATCH-like behaviour).

    Raises:
        BookNotFoundError: 404 if book not found
    """
    book = get_book_or_404(db, book_id)

    # model_dump(exclude_unset=True) returns only fields that were set
    update_data = book_data.model_dump(exclude_unset=True)

    for field, value in update_data.items():
        setattr(book, field, value)

    db.commit()
    db.refresh(book)

    logger.info(f"Book {book_id} updated by user {current_user.id}")

    return BookResponse.model_validate(book)


@router.delete(
    "/{book_id}",
    response_model=MessageResponse,
    summary="Delete a book",
    description="Delete a book and all of its reviews. Requires an admin token.",
)
@limiter.limit(settings.rate_limit_write)
def delete_book(
    request: Request,
    book_id: int,
    db: DbSession,
    current_user: AdminUser,
) -> MessageResponse:
    book = get_book_or_404(db, book_id)

    # Reviews go with the book (cascade), so there is no aggregate to update
    db.delete(book)
    db.commit()

    logger.info(f"Book {book_id} deleted by user {current_user.id}")

    return MessageResponse(message="Book removed")

"""
Reviews Router

Endpoints for book reviews. Every mutation goes through ReviewService,
which also keeps the book's average rating up to date.

Endpoints:
- GET /reviews?bookId= - List reviews for a book
- GET /reviews/{review_id} - Get a specific review
- POST /reviews - Create a review (authenticated)
- PUT /reviews/{review_id} - Update a review (author only)
- DELETE /reviews/{review_id} - Delete a review (author or admin)

Business Rules:
- One review per user per book
- Only the review author can update their review
- The review author or an admin can delete a review
"""

from fastapi import APIRouter, Query, Request, status

from bookreview.config import get_settings
from bookreview.dependencies import CurrentUser, ReviewServiceDep
from bookreview.schemas import (
    MessageResponse,
    ReviewCreate,
    ReviewResponse,
    ReviewUpdate,
)
from bookreview.services.exceptions import InvalidInputError
from bookreview.services.rate_limiter import limiter

settings = get_settings()

router = APIRouter(
    prefix="/reviews",
    tags=["Reviews"],
    responses={
        404: {"description": "Review or book not found"},
    },
)


@router.get(
    "",
    response_model=list[ReviewResponse],
    summary="List reviews for a book",
    description="Get all reviews of a book, newest first, with reviewer names.",
)
@limiter.limit(settings.rate_limit_default)
def list_reviews(
    request: Request,
    service: ReviewServiceDep,
    book_id: int | None = Query(
        default=None,
        alias="bookId",
        ge=1,
        description="Book to list reviews for",
    ),
) -> list[ReviewResponse]:
    """
    List reviews for a book.

    Raises:
        InvalidInputError: 400 if bookId is missing
        BookNotFoundError: 404 if the book does not exist
    """
    if book_id is None:
        raise InvalidInputError("Book ID is required")

    reviews = service.list_by_book(book_id)
    return [ReviewResponse.model_validate(r) for r in reviews]


@router.get(
    "/{review_id}",
    response_model=ReviewResponse,
    summary="Get a review by ID",
    description="Retrieve a specific review with user and book information.",
)
@limiter.limit(settings.rate_limit_default)
def get_review(
    request: Request,
    review_id: int,
    service: ReviewServiceDep,
) -> ReviewResponse:
    review = service.get(review_id)
    return ReviewResponse.model_validate(review)


@router.post(
    "",
    response_model=ReviewResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a review",
    description="Create a review for a book. Requires authentication. One review per book per user.",
)
@limiter.limit(settings.rate_limit_write)
def create_review(
    request: Request,
    review_data: ReviewCreate,
    service: ReviewServiceDep,
    current_user: CurrentUser,
) -> ReviewResponse:
    """
    Create a new review.

    Args:
        review_data: bookId, rating and comment
        current_user: Authenticated author

    Returns:
        Created review with user and book info

    Raises:
        BookNotFoundError: 404 if the book does not exist
        DuplicateReviewError: 400 if the user already reviewed this book
    """
    review = service.submit(
        book_id=review_data.book_id,
        user=current_user,
        rating=review_data.rating,
        comment=review_data.comment,
    )
    return ReviewResponse.model_validate(review)


@router.put(
    "/{review_id}",
    response_model=ReviewResponse,
    summary="Update a review",
    description="Update your own review. Only the review author can update.",
)
@limiter.limit(settings.rate_limit_write)
def update_review(
    request: Request,
    review_id: int,
    review_data: ReviewUpdate,
    service: ReviewServiceDep,
    current_user: CurrentUser,
) -> ReviewResponse:
    """
    Update an existing review.

    Raises:
        ReviewNotFoundError: 404 if review not found
        ReviewPermissionError: 403 if user is not the review author
    """
    review = service.update(
        review_id,
        current_user,
        rating=review_data.rating,
        comment=review_data.comment,
    )
    return ReviewResponse.model_validate(review)


@router.delete(
    "/{review_id}",
    response_model=MessageResponse,
    summary="Delete a review",
    description="Delete a review. Only the review author or an admin can delete.",
)
@limiter.limit(settings.rate_limit_write)
def delete_review(
    request: Request,
    review_id: int,
    service: ReviewServiceDep,
    current_user: CurrentUser,
) -> MessageResponse:
    service.delete(review_id, current_user)
    return MessageResponse(message="Review removed successfully")

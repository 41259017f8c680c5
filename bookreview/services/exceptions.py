"""
Domain exceptions for the review services.

Every error a client can see derives from BookReviewError and carries the
HTTP status and message used by the exception handler in bookreview.main.
RatingAggregationError is the exception: it is internal and never reaches
the client.
"""

from fastapi import status


class BookReviewError(Exception):
    """Base exception for errors surfaced to API clients."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message: str = "An internal error occurred."

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class NotFoundError(BookReviewError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Resource not found"


class BookNotFoundError(NotFoundError):
    """Referenced book does not exist."""

    default_message = "Book not found"


class ReviewNotFoundError(NotFoundError):
    """Referenced review does not exist."""

    default_message = "Review not found"


class UserNotFoundError(NotFoundError):
    """Referenced user does not exist."""

    default_message = "User not found"


class InvalidInputError(BookReviewError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Invalid input"


class InvalidReviewError(InvalidInputError):
    """Rating out of range or empty comment."""


class ConflictError(BookReviewError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Conflict"


class DuplicateReviewError(ConflictError):
    """User already reviewed this book."""

    default_message = "You have already reviewed this book"


class ForbiddenError(BookReviewError):
    status_code = status.HTTP_403_FORBIDDEN
    default_message = "Not authorized to perform this action"


class ReviewPermissionError(ForbiddenError):
    """User cannot modify this review."""


class AuthenticationError(BookReviewError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Not authorized"


class RatingAggregationError(Exception):
    """
    A book's average rating could not be recomputed.

    Raised by the rating aggregator and logged by the review service;
    the review mutation that triggered the recompute is not rolled back.
    """

    def __init__(self, book_id: int, reason: str) -> None:
        self.book_id = book_id
        self.reason = reason
        super().__init__(f"Could not recompute rating for book {book_id}: {reason}")

"""
Review Service

All review mutations go through ReviewService, which is also the only
caller of the rating aggregator.

Each mutation follows the same order:
1. Validate input and permissions (no writes yet)
2. Commit the review change
3. Recompute the book's average rating from the committed reviews

Step 3 is best-effort. A failed recompute is logged and the review change
stays committed; the aggregate is repaired by the next successful recompute
for that book (or by scripts/recalculate_ratings.py).
"""

import logging
from collections.abc import Iterable

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, selectinload

from bookreview.models import Book, Review, User
from bookreview.services.exceptions import (
    BookNotFoundError,
    DuplicateReviewError,
    InvalidReviewError,
    RatingAggregationError,
    ReviewNotFoundError,
    ReviewPermissionError,
    UserNotFoundError,
)
from bookreview.services.ratings import RatingAggregator

logger = logging.getLogger(__name__)

MIN_RATING = 1
MAX_RATING = 5


def validate_rating(rating) -> int:
    """Ratings are whole stars from 1 to 5."""
    # bool is a subclass of int
    if isinstance(rating, bool) or not isinstance(rating, int):
        raise InvalidReviewError("Rating must be an integer between 1 and 5")
    if not MIN_RATING <= rating <= MAX_RATING:
        raise InvalidReviewError("Rating must be an integer between 1 and 5")
    return rating


def validate_comment(comment) -> str:
    if not isinstance(comment, str) or not comment.strip():
        raise InvalidReviewError("Comment is required")
    return comment.strip()


class ReviewService:
    """
    Orchestrates review create/update/delete and keeps ratings in sync.

    Args:
        db: Database session for the current unit of work
        aggregator: Rating aggregator; defaults to one bound to the same session
    """

    def __init__(self, db: Session, aggregator: RatingAggregator | None = None) -> None:
        self.db = db
        self.aggregator = aggregator or RatingAggregator(db)

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------
    def _select_reviews(self):
        return select(Review).options(
            selectinload(Review.user),
            selectinload(Review.book),
        )

    def get(self, review_id: int) -> Review:
        """Get a review with user and book loaded, or raise ReviewNotFoundError."""
        stmt = self._select_reviews().where(Review.id == review_id)
        review = self.db.execute(stmt).scalar_one_or_none()

        if review is None:
            raise ReviewNotFoundError(f"Review with id {review_id} not found")
        return review

    def list_by_book(self, book_id: int) -> list[Review]:
        """All reviews for a book, newest first."""
        if self.db.get(Book, book_id) is None:
            raise BookNotFoundError(f"Book with id {book_id} not found")

        stmt = (
            self._select_reviews()
            .where(Review.book_id == book_id)
            .order_by(Review.created_at.desc(), Review.id.desc())
        )
        return list(self.db.execute(stmt).scalars().all())

    def list_by_user(self, user_id: int) -> list[Review]:
        """All reviews written by a user, newest first."""
        if self.db.get(User, user_id) is None:
            raise UserNotFoundError(f"User with id {user_id} not found")

        stmt = (
            self._select_reviews()
            .where(Review.user_id == user_id)
            .order_by(Review.created_at.desc(), Review.id.desc())
        )
        return list(self.db.execute(stmt).scalars().all())

    def find_existing(self, book_id: int, user_id: int) -> Review | None:
        stmt = select(Review).where(
            Review.book_id == book_id,
            Review.user_id == user_id,
        )
        return self.db.execute(stmt).scalar_one_or_none()

    def _book_exists(self, book_id: int) -> bool:
        # Query the row, not the identity map
        stmt = select(Book.id).where(Book.id == book_id)
        return self.db.execute(stmt).first() is not None

    # -------------------------------------------------------------------------
    # Mutations
    # -------------------------------------------------------------------------
    def submit(self, book_id: int, user: User, rating: int, comment: str) -> Review:
        """
        Create a review for a book.

        Args:
            book_id: ID of the book to review
            user: Authenticated author
            rating: 1-5 stars
            comment: Non-empty review text

        Returns:
            Created review with user and book loaded

        Raises:
            BookNotFoundError: Book does not exist
            InvalidReviewError: Rating out of range or empty comment
            DuplicateReviewError: User already reviewed this book
        """
        if self.db.get(Book, book_id) is None:
            raise BookNotFoundError(f"Book with id {book_id} not found")

        rating = validate_rating(rating)
        comment = validate_comment(comment)

        if self.find_existing(book_id, user.id) is not None:
            raise DuplicateReviewError()

        review = Review(
            book_id=book_id,
            user_id=user.id,
            rating=rating,
            comment=comment,
        )
        self.db.add(review)

        # The unique constraint is authoritative: a concurrent submit for the
        # same (book, user) can pass the check above and still lose here.
        try:
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            # A foreign key failure means the book was deleted after the check
            if not self._book_exists(book_id):
                logger.info(f"Review rejected, book {book_id} was deleted meanwhile")
                raise BookNotFoundError(f"Book with id {book_id} not found") from None
            logger.info(f"Duplicate review rejected by constraint: book={book_id} user={user.id}")
            raise DuplicateReviewError() from None

        review_id = review.id
        logger.info(f"Review {review_id} created for book {book_id} by user {user.id}")

        self._refresh_rating(book_id)
        return self.get(review_id)

    def update(
        self,
        review_id: int,
        user: User,
        rating: int | None = None,
        comment: str | None = None,
    ) -> Review:
        """
        Update the rating and/or comment of a review.

        Only the author may update. Fields left as None are kept.

        Raises:
            ReviewNotFoundError: Review does not exist
            ReviewPermissionError: User is not the author
            InvalidReviewError: Invalid rating or comment
        """
        review = self.get(review_id)

        if review.user_id != user.id:
            raise ReviewPermissionError("You can only update your own reviews")

        if rating is not None:
            rating = validate_rating(rating)
        if comment is not None:
            comment = validate_comment(comment)

        if rating is not None:
            review.rating = rating
        if comment is not None:
            review.comment = comment

        self.db.commit()
        logger.info(f"Review {review_id} updated by user {user.id}")

        # Recompute after every update, not only rating changes: the
        # recompute is idempotent and also heals a previously stale value.
        self._refresh_rating(review.book_id)
        return self.get(review_id)

    def delete(self, review_id: int, user: User) -> None:
        """
        Delete a review.

        The author or an admin may delete.

        Raises:
            ReviewNotFoundError: Review does not exist
            ReviewPermissionError: User is neither author nor admin
        """
        review = self.get(review_id)

        if review.user_id != user.id and not user.is_admin:
            raise ReviewPermissionError("You can only delete your own reviews")

        # Captured before deletion; the review row is gone afterwards
        book_id = review.book_id

        self.db.delete(review)
        self.db.commit()
        logger.info(f"Review {review_id} deleted by user {user.id}")

        self._refresh_rating(book_id)

    # -------------------------------------------------------------------------
    # Rating Aggregation
    # -------------------------------------------------------------------------
    def refresh_ratings(self, book_ids: Iterable[int]) -> None:
        """Best-effort recompute for several books."""
        for book_id in sorted(set(book_ids)):
            self._refresh_rating(book_id)

    def _refresh_rating(self, book_id: int) -> None:
        try:
            self.aggregator.recompute(book_id)
        except RatingAggregationError as e:
            logger.error(f"Rating aggregation failed, leaving stale value: {e}")

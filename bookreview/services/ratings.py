"""
Ratings Service

Maintains the denormalized `average_rating` field on the Book model.

The average is always recomputed from the persisted reviews with a single
AVG() aggregate; it is never adjusted by deltas. That makes a recompute
idempotent and safe to run at any time: concurrent recomputes for the same
book race, the last write wins, and whichever runs after the last review
mutation leaves the correct value.

No rounding happens here. Clients round for display.
"""

import logging

from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from bookreview.models import Book, Review
from bookreview.services.exceptions import RatingAggregationError

logger = logging.getLogger(__name__)


class RatingAggregator:
    """
    Single writer of Book.average_rating.

    Args:
        db: Database session the aggregate is read from and written with
    """

    def __init__(self, db: Session) -> None:
        self.db = db

    def recompute(self, book_id: int) -> float | None:
        """
        Recalculate and store a book's average rating.

        Must be called after the triggering review mutation is committed,
        otherwise the aggregate reads a stale review set.

        Args:
            book_id: ID of the book to update

        Returns:
            The new average, or None when the book has no reviews

        Raises:
            RatingAggregationError: If the book is gone or the store failed
        """
        try:
            stmt = select(func.avg(Review.rating)).where(Review.book_id == book_id)
            avg_rating = self.db.execute(stmt).scalar()

            book = self.db.get(Book, book_id)
            if book is None:
                raise RatingAggregationError(book_id, "book no longer exists")

            # PostgreSQL returns Decimal for AVG over integers
            new_average = float(avg_rating) if avg_rating is not None else None
            book.average_rating = new_average
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            raise RatingAggregationError(book_id, str(e)) from e

        logger.info(f"Average rating for book {book_id} is now {new_average}")
        return new_average

    def recompute_all(self) -> tuple[int, int]:
        """
        Recalculate the average rating of every book.

        Useful for repairing aggregates left stale by a failed recompute.
        A book that fails is logged and skipped so the rest still get
        repaired.

        Returns:
            Tuple of (books updated, books that failed)
        """
        book_ids = self.db.execute(select(Book.id)).scalars().all()

        updated = 0
        failed = 0
        for book_id in book_ids:
            try:
                self.recompute(book_id)
            except RatingAggregationError as e:
                logger.error(f"Skipping book during recalculation: {e}")
                failed += 1
            else:
                updated += 1

        if failed:
            logger.warning(f"Recalculation finished with {failed} failed books")
        return updated, failed

"""
Book Model

The catalogue entry reviewed by users.

`average_rating` is derived data: it is written only by the rating
aggregator (bookreview.services.ratings) and always reflects the mean of
the book's reviews. NULL means the book has no reviews yet ("unrated"),
which is distinct from any real rating.
"""

from datetime import date, datetime
from typing import TYPE_CHECKING

from sqlalchemy import (
    CheckConstraint,
    Date,
    DateTime,
    Float,
    ForeignKey,
    Integer,
    String,
    Text,
    func,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from bookreview.database import Base

if TYPE_CHECKING:
    from bookreview.models.review import Review


class Book(Base):
    """
    Book model representing books in the catalogue.

    Table: books

    Fields:
    - title, author, description: Required catalogue data
    - cover_image_url, genre, isbn, publisher, publication_date: Optional
    - added_by_id: Admin who created the entry
    - average_rating: Mean review rating, NULL when unrated

    Relationships:
    - reviews: One-to-Many (deleted together with the book)

    Indexes:
    - title, author: For search
    - genre: For filtering

    Example:
        book = Book(
            title="Moby Dick; or The Whale",
            author="Herman Melville",
            description="The narrative of the obsessive quest of Ahab...",
            genre="Adventure Fiction",
            publication_date=date(1851, 10, 18),
        )
    """

    __tablename__ = "books"

    id: Mapped[int] = mapped_column(primary_key=True)

    # -------------------------------------------------------------------------
    # Catalogue Fields
    # -------------------------------------------------------------------------
    title: Mapped[str] = mapped_column(
        String(500),
        index=True,
        nullable=False,
        comment="Book title"
    )

    author: Mapped[str] = mapped_column(
        String(255),
        index=True,
        nullable=False,
        comment="Author name"
    )

    description: Mapped[str] = mapped_column(
        Text,
        nullable=False,
        comment="Book description or summary"
    )

    cover_image_url: Mapped[str | None] = mapped_column(
        String(1000),
        nullable=True,
        comment="URL of the cover image"
    )

    genre: Mapped[str | None] = mapped_column(
        String(100),
        index=True,
        nullable=True,
        comment="Genre label"
    )

    isbn: Mapped[str | None] = mapped_column(
        String(20),
        nullable=True,
        comment="International Standard Book Number"
    )

    publisher: Mapped[str | None] = mapped_column(
        String(255),
        nullable=True,
        comment="Publisher name"
    )

    publication_date: Mapped[date | None] = mapped_column(
        Date,
        nullable=True,
        comment="Date of publication"
    )

    added_by_id: Mapped[int | None] = mapped_column(
        Integer,
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
        comment="User who added the book"
    )

    # -------------------------------------------------------------------------
    # Derived Fields
    # -------------------------------------------------------------------------
    # Stored at full precision; rounding is a presentation concern.
    average_rating: Mapped[float | None] = mapped_column(
        Float,
        nullable=True,
        default=None,
        comment="Mean review rating (0-5), NULL if no reviews"
    )

    # -------------------------------------------------------------------------
    # Timestamps
    # -------------------------------------------------------------------------
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
    )

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )

    # -------------------------------------------------------------------------
    # Relationships
    # -------------------------------------------------------------------------
    reviews: Mapped[list["Review"]] = relationship(
        "Review",
        back_populates="book",
        cascade="all, delete-orphan",
    )

    __table_args__ = (
        CheckConstraint(
            "average_rating IS NULL OR (average_rating >= 0 AND average_rating <= 5)",
            name="ck_book_average_rating_range",
        ),
    )

    def __repr__(self) -> str:
        return f"Book(id={self.id}, title='{self.title}', author='{self.author}')"

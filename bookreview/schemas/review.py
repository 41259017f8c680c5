"""
Review Pydantic Schemas

Schemas:
- ReviewCreate: Create a new review for a book
- ReviewUpdate: Change rating and/or comment of an existing review
- ReviewResponse: Review with reviewer name and book summary embedded

Business Rules:
- Rating must be a whole number from 1 to 5
- Comment is required and may not be blank
- One review per user per book (enforced by ReviewService and the database)
"""

from datetime import datetime

from pydantic import Field, field_validator

from bookreview.schemas.base import CamelModel
from bookreview.schemas.book import BookMinimal
from bookreview.schemas.user import UserPublicResponse


class ReviewCreate(CamelModel):
    """
    Schema for creating a new review.

    Example request body:
    {
        "bookId": 1,
        "rating": 5,
        "comment": "One of the best books I've ever read"
    }
    """

    book_id: int = Field(..., ge=1, description="Book being reviewed")

    rating: int = Field(
        ...,
        ge=1,
        le=5,
        strict=True,
        description="Rating from 1 to 5 stars",
        examples=[4, 5],
    )

    comment: str = Field(
        ...,
        min_length=1,
        max_length=5000,
        description="Review text",
    )

    @field_validator("comment")
    @classmethod
    def comment_must_not_be_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Comment is required")
        return v.strip()


class ReviewUpdate(CamelModel):
    """
    Schema for updating an existing review.

    Both fields are optional; omitted fields are left unchanged.
    The book a review belongs to cannot be changed.
    """

    rating: int | None = Field(default=None, ge=1, le=5, strict=True)
    comment: str | None = Field(default=None, min_length=1, max_length=5000)

    @field_validator("comment")
    @classmethod
    def comment_must_not_be_blank(cls, v: str | None) -> str | None:
        if v is not None and not v.strip():
            raise ValueError("Comment cannot be empty")
        return v.strip() if v else v


class ReviewResponse(CamelModel):
    """Full review data returned by the API."""

    id: int = Field(..., description="Unique review identifier")
    book_id: int = Field(..., description="Reviewed book")
    user_id: int = Field(..., description="Author of the review")
    rating: int = Field(..., description="Rating 1-5")
    comment: str = Field(..., description="Review text")
    created_at: datetime = Field(..., description="When the review was written")
    updated_at: datetime | None = Field(default=None, description="Last edit time")

    user: UserPublicResponse = Field(..., description="Reviewer")
    book: BookMinimal = Field(..., description="Reviewed book")

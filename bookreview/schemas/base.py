"""
Shared schema configuration.

The API speaks camelCase JSON (bookId, averageRating, createdAt) while the
Python side stays snake_case. Request bodies accept either form.
"""

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base schema: camelCase aliases, readable from ORM objects."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class MessageResponse(BaseModel):
    """Confirmation body, also the shape of every error response."""

    message: str = Field(..., description="Human-readable message")

    model_config = ConfigDict(
        json_schema_extra={"example": {"message": "Review removed successfully"}},
    )

"""
User Pydantic Schemas

Schemas:
- UserCreate: Registration data (name, email, password, bio)
- UserLogin: Login credentials
- UserUpdate: Profile update fields
- UserResponse: Profile data (never exposes the password hash)
- UserPublicResponse: Display name only, embedded in reviews
- TokenResponse: Login result (token + profile)
"""

from datetime import datetime

from pydantic import EmailStr, Field, field_validator

from bookreview.schemas.base import CamelModel


class UserCreate(CamelModel):
    """
    Schema for user registration.

    Example request body:
    {
        "name": "Jane Reader",
        "email": "jane@example.com",
        "password": "secret123",
        "bio": "Reads everything"
    }
    """

    name: str = Field(
        ...,
        min_length=1,
        max_length=100,
        description="Display name",
        examples=["Jane Reader"],
    )

    email: EmailStr = Field(
        ...,
        description="User's email address",
        examples=["jane@example.com"],
    )

    password: str = Field(
        ...,
        min_length=6,
        max_length=72,
        description="Password (6-72 characters)",
    )

    bio: str | None = Field(
        default=None,
        max_length=1000,
        description="Short biography",
    )

    @field_validator("name")
    @classmethod
    def name_must_not_be_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Name is required")
        return v.strip()


class UserLogin(CamelModel):
    """Login credentials."""

    email: EmailStr = Field(..., description="User's email address")
    password: str = Field(..., min_length=1, description="Password")


class UserUpdate(CamelModel):
    """
    Schema for updating a profile.

    All fields are optional for partial updates.
    """

    name: str | None = Field(
        default=None,
        min_length=1,
        max_length=100,
        description="Display name",
    )

    email: EmailStr | None = Field(
        default=None,
        description="User's email address",
    )

    bio: str | None = Field(
        default=None,
        max_length=1000,
        description="Short biography",
    )

    @field_validator("name")
    @classmethod
    def name_must_not_be_blank(cls, v: str | None) -> str | None:
        if v is not None and not v.strip():
            raise ValueError("Name cannot be empty")
        return v.strip() if v else v


class UserPublicResponse(CamelModel):
    """Reviewer identity embedded in review responses."""

    id: int = Field(..., description="User ID")
    name: str = Field(..., description="Display name")


class UserResponse(CamelModel):
    """
    Schema for profile responses.

    SECURITY: Never includes the password hash.
    """

    id: int = Field(..., description="Unique user identifier")
    name: str = Field(..., description="Display name")
    email: EmailStr = Field(..., description="User's email address")
    bio: str | None = Field(default=None, description="Short biography")
    role: str = Field(..., description="Role (user, admin)")
    created_at: datetime = Field(..., description="When the user registered")


class TokenResponse(CamelModel):
    """Login result: bearer token and the user's profile."""

    token: str = Field(..., description="JWT access token")
    user: UserResponse = Field(..., description="Authenticated user")

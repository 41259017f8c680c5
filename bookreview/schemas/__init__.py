"""
Pydantic Schemas Package

Request validation and response serialization. All schemas use camelCase
aliases on the wire (see base.py).
"""

from bookreview.schemas.base import CamelModel, MessageResponse
from bookreview.schemas.book import (
    BookCreate,
    BookListResponse,
    BookMinimal,
    BookResponse,
    BookUpdate,
)
from bookreview.schemas.review import ReviewCreate, ReviewResponse, ReviewUpdate
from bookreview.schemas.user import (
    TokenResponse,
    UserCreate,
    UserLogin,
    UserPublicResponse,
    UserResponse,
    UserUpdate,
)

__all__ = [
    "CamelModel",
    "MessageResponse",
    "BookCreate",
    "BookUpdate",
    "BookResponse",
    "BookMinimal",
    "BookListResponse",
    "ReviewCreate",
    "ReviewUpdate",
    "ReviewResponse",
    "UserCreate",
    "UserLogin",
    "UserUpdate",
    "UserResponse",
    "UserPublicResponse",
    "TokenResponse",
]

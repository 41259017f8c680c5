"""
FastAPI Dependencies Module

Reusable components injected into route handlers with Depends():
- Database session (per request)
- Pagination parameters
- JWT authentication (current user, admin)
- Review service bound to the request's session
- Entity lookups that 404 when missing
"""

from typing import Annotated

from fastapi import Depends, HTTPException, Query, status
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.orm import Session

from bookreview.config import get_settings
from bookreview.database import get_db
from bookreview.models import Book, User
from bookreview.services.exceptions import BookNotFoundError, UserNotFoundError
from bookreview.services.reviews import ReviewService
from bookreview.services.security import verify_token_type

settings = get_settings()

# =============================================================================
# Type Aliases with Annotated
# =============================================================================
# Route signatures read `db: DbSession` instead of
# `db: Session = Depends(get_db)`.

DbSession = Annotated[Session, Depends(get_db)]


# =============================================================================
# Pagination Parameters
# =============================================================================
class PaginationParams:
    """
    Pagination parameters for list endpoints.

    - page: Which page to return (1-indexed)
    - limit: How many items per page
    - skip: Calculated offset for the database query

    Usage:
        GET /api/v1/books?page=2&limit=20
    """

    def __init__(
        self,
        page: int = Query(
            default=1,
            ge=1,
            description="Page number (1-indexed)",
            examples=[1, 2, 3],
        ),
        limit: int = Query(
            default=10,
            ge=1,
            le=100,
            description="Number of items per page (max 100)",
            examples=[10, 25, 50],
        ),
    ) -> None:
        self.page = page
        self.limit = limit

    @property
    def skip(self) -> int:
        """
        Number of records to skip.

        Page 1 → skip 0 items, page 2 → skip `limit` items, and so on.
        """
        return (self.page - 1) * self.limit


Pagination = Annotated[PaginationParams, Depends()]


# =============================================================================
# JWT Authentication
# =============================================================================
# auto_error=False so a missing token produces our own 401 message
# instead of FastAPI's default one.

oauth2_scheme = OAuth2PasswordBearer(
    tokenUrl=f"/api/{settings.api_version}/users/login",
    auto_error=False,
)


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def get_current_user(
    db: DbSession,
    token: str | None = Depends(oauth2_scheme),
) -> User:
    """
    Extract and validate the current user from the JWT bearer token.

    1. Extracts the token from the Authorization header
    2. Decodes it and checks it is an access token
    3. Looks up the user named in the "sub" claim

    Raises:
        HTTPException: 401 if the token is missing or invalid, or the user
            no longer exists
    """
    if not token:
        raise _unauthorized("Not authorized, no token")

    payload = verify_token_type(token, "access")
    if payload is None:
        raise _unauthorized("Not authorized, token failed")

    user_id = payload.get("sub")
    try:
        user = db.get(User, int(user_id)) if user_id is not None else None
    except (TypeError, ValueError):
        user = None

    if user is None:
        raise _unauthorized("Not authorized, token failed")

    return user


def get_current_admin(
    current_user: User = Depends(get_current_user),
) -> User:
    """
    Verify the current user is an admin.

    Raises:
        HTTPException: 403 if the user's role is not admin
    """
    if not current_user.is_admin:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=f"User role '{current_user.role}' is not authorized to access this route",
        )
    return current_user


CurrentUser = Annotated[User, Depends(get_current_user)]
AdminUser = Annotated[User, Depends(get_current_admin)]


# =============================================================================
# Services
# =============================================================================
def get_review_service(db: DbSession) -> ReviewService:
    """ReviewService bound to the request's session."""
    return ReviewService(db)


ReviewServiceDep = Annotated[ReviewService, Depends(get_review_service)]


# =============================================================================
# Lookups
# =============================================================================
def get_book_or_404(db: Session, book_id: int) -> Book:
    book = db.get(Book, book_id)
    if book is None:
        raise BookNotFoundError(f"Book with id {book_id} not found")
    return book


def get_user_or_404(db: Session, user_id: int) -> User:
    user = db.get(User, user_id)
    if user is None:
        raise UserNotFoundError(f"User with id {user_id} not found")
    return user

"""
Users Router

Registration, login and profile endpoints.

Endpoints:
- POST /users/register - Create an account
- POST /users/login - Email/password → JWT token + profile
- GET /users - All users (admin)
- GET /users/{user_id} - Profile
- PUT /users/{user_id} - Update own profile
- DELETE /users/{user_id} - Delete a user and their reviews (admin)
- GET /users/{user_id}/reviews - Reviews written by a user

Security:
=========
- Passwords are hashed with bcrypt before storage
- Plain text passwords are never logged or stored
- Login failures return the same message for unknown email and bad password
"""

import logging

from fastapi import APIRouter, HTTPException, Request, status
from sqlalchemy import select
from sqlalchemy.orm import Session

from bookreview.config import get_settings
from bookreview.dependencies import (
    AdminUser,
    CurrentUser,
    DbSession,
    ReviewServiceDep,
    get_user_or_404,
)
from bookreview.models import Review, User, UserRole
from bookreview.schemas import (
    MessageResponse,
    ReviewResponse,
    TokenResponse,
    UserCreate,
    UserLogin,
    UserResponse,
    UserUpdate,
)
from bookreview.services.exceptions import (
    ConflictError,
    ForbiddenError,
    InvalidInputError,
)
from bookreview.services.rate_limiter import limiter
from bookreview.services.security import (
    create_access_token,
    hash_password,
    verify_password,
)

logger = logging.getLogger(__name__)
settings = get_settings()

router = APIRouter(
    prefix="/users",
    tags=["Users"],
    responses={
        401: {"description": "Not authenticated"},
        404: {"description": "User not found"},
    },
)


def _email_taken(db: Session, email: str, exclude_user_id: int | None = None) -> bool:
    stmt = select(User.id).where(User.email == email.lower())
    if exclude_user_id is not None:
        stmt = stmt.where(User.id != exclude_user_id)
    return db.execute(stmt).first() is not None


# -------------------------------------------------------------------------
# Registration & Login
# -------------------------------------------------------------------------
@router.post(
    "/register",
    response_model=UserResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Register a new user",
    description="Create a new account. Passwords need at least 6 characters.",
)
@limiter.limit(settings.rate_limit_auth)
def register(
    request: Request,
    user_data: UserCreate,
    db: DbSession,
) -> UserResponse:
    """
    Register a new user.

    1. Validates name, email and password (handled by Pydantic)
    2. Rejects an email that is already registered
    3. Hashes the password with bcrypt
    4. Creates the user with the regular role
    """
    if _email_taken(db, user_data.email):
        raise ConflictError("User already exists")

    user = User(
        name=user_data.name,
        email=user_data.email.lower(),
        hashed_password=hash_password(user_data.password),
        bio=user_data.bio,
        role=UserRole.USER.value,
    )

    db.add(user)
    db.commit()
    db.refresh(user)

    logger.info(f"New user registered: {user.email}")

    return UserResponse.model_validate(user)


@router.post(
    "/login",
    response_model=TokenResponse,
    summary="Login with email and password",
    description="""
    Authenticate with email and password to receive a JWT.

    **Usage:**
    Include the token in the Authorization header:
    ```
    Authorization: Bearer <token>
    ```
    """,
)
@limiter.limit(settings.rate_limit_auth)
def login(
    request: Request,
    credentials: UserLogin,
    db: DbSession,
) -> TokenResponse:
    email = credentials.email.lower()

    stmt = select(User).where(User.email == email)
    user = db.execute(stmt).scalar_one_or_none()

    if user is None or not verify_password(credentials.password, user.hashed_password):
        logger.warning(f"Login failed for {email}")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid email or password",
            headers={"WWW-Authenticate": "Bearer"},
        )

    token = create_access_token(data={"sub": str(user.id)})

    logger.info(f"User logged in: {user.email}")

    return TokenResponse(token=token, user=UserResponse.model_validate(user))


# -------------------------------------------------------------------------
# Profiles
# -------------------------------------------------------------------------
@router.get(
    "",
    response_model=list[UserResponse],
    summary="List users",
    description="List every registered user. Admin only.",
)
@limiter.limit(settings.rate_limit_default)
def list_users(
    request: Request,
    db: DbSession,
    current_user: AdminUser,
) -> list[UserResponse]:
    users = db.execute(select(User).order_by(User.id)).scalars().all()
    return [UserResponse.model_validate(u) for u in users]


@router.get(
    "/{user_id}",
    response_model=UserResponse,
    summary="Get a user profile",
)
@limiter.limit(settings.rate_limit_default)
def get_user(
    request: Request,
    user_id: int,
    db: DbSession,
) -> UserResponse:
    user = get_user_or_404(db, user_id)
    return UserResponse.model_validate(user)


@router.put(
    "/{user_id}",
    response_model=UserResponse,
    summary="Update a user profile",
    description="Update your own name, email or bio.",
)
@limiter.limit(settings.rate_limit_write)
def update_user(
    request: Request,
    user_id: int,
    user_data: UserUpdate,
    db: DbSession,
    current_user: CurrentUser,
) -> UserResponse:
    """
    Update a profile.

    Users may only update their own profile. Role and password are not
    changeable here.

    Raises:
        UserNotFoundError: 404 if the user does not exist
        ForbiddenError: 403 when updating someone else's profile
        ConflictError: 400 if the new email is already registered
    """
    user = get_user_or_404(db, user_id)

    if user.id != current_user.id:
        raise ForbiddenError("You can only update your own profile")

    update_data = user_data.model_dump(exclude_unset=True)

    if update_data.get("email") is not None:
        update_data["email"] = update_data["email"].lower()
        if _email_taken(db, update_data["email"], exclude_user_id=user.id):
            raise ConflictError("Email is already in use")

    for field, value in update_data.items():
        if field in ("name", "email") and value is None:
            continue
        setattr(user, field, value)

    db.commit()
    db.refresh(user)

    logger.info(f"User {user.id} updated their profile")

    return UserResponse.model_validate(user)


@router.delete(
    "/{user_id}",
    response_model=MessageResponse,
    summary="Delete a user",
    description="Delete a user and all of their reviews. Admin only; admins cannot be deleted.",
)
@limiter.limit(settings.rate_limit_write)
def delete_user(
    request: Request,
    user_id: int,
    db: DbSession,
    service: ReviewServiceDep,
    current_user: AdminUser,
) -> MessageResponse:
    """
    Delete a user.

    The user's reviews are removed with them, so the average rating of
    every book they reviewed is recomputed afterwards.
    """
    user = get_user_or_404(db, user_id)

    if user.is_admin:
        raise InvalidInputError("Cannot delete admin user")

    # Captured before deletion; the reviews go with the user
    book_ids = db.execute(
        select(Review.book_id).where(Review.user_id == user_id)
    ).scalars().all()

    db.delete(user)
    db.commit()

    logger.info(f"User {user_id} deleted by admin {current_user.id}")

    service.refresh_ratings(book_ids)

    return MessageResponse(message="User removed")


@router.get(
    "/{user_id}/reviews",
    response_model=list[ReviewResponse],
    summary="List a user's reviews",
    description="Reviews written by a user, newest first, with book title and cover.",
)
@limiter.limit(settings.rate_limit_default)
def list_user_reviews(
    request: Request,
    user_id: int,
    service: ReviewServiceDep,
) -> list[ReviewResponse]:
    reviews = service.list_by_user(user_id)
    return [ReviewResponse.model_validate(r) for r in reviews]

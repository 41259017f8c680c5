"""
pytest Fixtures for Book Review API Tests

Shared fixtures used across all test files.

For database tests we use:
- a fresh in-memory SQLite engine per test (tables created from the models)
- a session bound to that engine, shared with the TestClient through the
  get_db dependency override

A fresh engine per test keeps tests isolated even when the code under test
commits or rolls back (the review service does both).
"""

# =============================================================================
# TEST ENVIRONMENT SETUP
# =============================================================================
# IMPORTANT: Set environment variables BEFORE importing the app
# This disables rate limiting, sets a test secret key and keeps the
# module-level engine off PostgreSQL.
import os

os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["SECRET_KEY"] = "test-secret-key-for-unit-tests-at-least-32-characters-long"
os.environ["DATABASE_URL"] = "sqlite://"

from collections.abc import Generator
from datetime import date

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from bookreview.database import Base, get_db
from bookreview.main import app
from bookreview.models import Book, Review, User, UserRole
from bookreview.services.reviews import ReviewService
from bookreview.services.security import create_access_token, hash_password


# =============================================================================
# DATABASE FIXTURES
# =============================================================================
@pytest.fixture
def engine():
    """
    SQLite in-memory engine with all tables created.

    StaticPool keeps the single connection alive; without it the in-memory
    database would disappear between connections.
    """
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)

    yield engine

    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def db_session(engine) -> Generator[Session, None, None]:
    """Database session for a single test."""
    TestSessionLocal = sessionmaker(
        autocommit=False,
        autoflush=False,
        bind=engine,
    )
    session = TestSessionLocal()

    yield session

    session.close()


@pytest.fixture
def client(db_session: Session) -> Generator[TestClient, None, None]:
    """
    Test client using the test database.

    The get_db dependency is overridden so requests share the test session.
    """

    def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


@pytest.fixture
def review_service(db_session: Session) -> ReviewService:
    return ReviewService(db_session)


# =============================================================================
# HELPERS
# =============================================================================
def make_user(
    db: Session,
    name: str,
    email: str,
    password: str = "secret123",
    role: UserRole = UserRole.USER,
) -> User:
    user = User(
        name=name,
        email=email,
        hashed_password=hash_password(password),
        role=role.value,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def get_auth_header(user: User) -> dict:
    """Authorization header carrying a valid token for the user."""
    token = create_access_token({"sub": str(user.id)})
    return {"Authorization": f"Bearer {token}"}


# =============================================================================
# SAMPLE DATA FIXTURES
# =============================================================================
@pytest.fixture
def sample_user(db_session: Session) -> User:
    """A regular reader."""
    return make_user(db_session, "Test Reader", "reader@example.com")


@pytest.fixture
def second_user(db_session: Session) -> User:
    """A second reader for ownership scenarios."""
    return make_user(db_session, "Second Reader", "second@example.com")


@pytest.fixture
def admin_user(db_session: Session) -> User:
    """A user with the admin role."""
    return make_user(
        db_session,
        "Admin User",
        "admin@example.com",
        password="adminpass",
        role=UserRole.ADMIN,
    )


@pytest.fixture
def sample_book(db_session: Session) -> Book:
    """An unrated book."""
    book = Book(
        title="Pride and Prejudice",
        author="Jane Austen",
        description="A classic novel of manners.",
        genre="Classic Romance",
        publication_date=date(1813, 1, 28),
        cover_image_url="https://www.gutenberg.org/cache/epub/1342/pg1342.cover.medium.jpg",
    )
    db_session.add(book)
    db_session.commit()
    db_session.refresh(book)
    return book


@pytest.fixture
def second_book(db_session: Session) -> Book:
    book = Book(
        title="Treasure Island",
        author="Robert Louis Stevenson",
        description="A tale of buccaneers and buried gold.",
        genre="Adventure",
        publication_date=date(1883, 11, 14),
    )
    db_session.add(book)
    db_session.commit()
    db_session.refresh(book)
    return book


@pytest.fixture
def multiple_books(db_session: Session) -> list[Book]:
    """Fifteen books for pagination, alternating two genres."""
    books = []
    for i in range(15):
        book = Book(
            title=f"Test Book {i + 1}",
            author="Mark Twain" if i % 2 == 0 else "Arthur Conan Doyle",
            description=f"Description for book {i + 1}",
            genre="Adventure" if i % 2 == 0 else "Mystery",
        )
        books.append(book)
        db_session.add(book)

    db_session.commit()
    for book in books:
        db_session.refresh(book)

    return books


@pytest.fixture
def sample_review(
    review_service: ReviewService,
    sample_book: Book,
    sample_user: User,
) -> Review:
    """A 4-star review, submitted through the service so the book is rated."""
    return review_service.submit(
        sample_book.id,
        sample_user,
        rating=4,
        comment="I really enjoyed reading this book.",
    )

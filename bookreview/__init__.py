"""
Book Review API Package

REST API for a book review platform: a catalogue of books, one review per
user per book, and an average rating kept in step with each book's reviews.

Package Structure:
- config.py: Application configuration using Pydantic Settings
- database.py: SQLAlchemy database connection and session management
- main.py: FastAPI application factory and exception handlers
- dependencies.py: Dependency injection (sessions, auth, services)
- models/: SQLAlchemy ORM models
- schemas/: Pydantic request/response schemas
- routers/: API route handlers
- services/: Business logic (reviews, rating aggregation, security)
"""

__version__ = "0.1.0"

"""
API Routers Package

Router Structure:
- books.py: /api/v1/books/* endpoints
- reviews.py: /api/v1/reviews/* endpoints
- users.py: /api/v1/users/* endpoints (registration, login, profiles)

Each router is imported and registered in main.py.
"""

from bookreview.routers.books import router as books_router
from bookreview.routers.reviews import router as reviews_router
from bookreview.routers.users import router as users_router

__all__ = [
    "books_router",
    "reviews_router",
    "users_router",
]

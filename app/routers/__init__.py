"""
API Routers Package

Router Structure:
- auth.py: /api/auth/* endpoints (signup, login)
- books.py: /api/books/* endpoints (catalog, search, user content, review creation)
- reviews.py: /api/reviews/* endpoints (update, delete)

Each router is imported and registered in main.py.
"""

from app.routers.auth import router as auth_router
from app.routers.books import router as books_router
from app.routers.reviews import router as reviews_router

__all__ = [
    "auth_router",
    "books_router",
    "reviews_router",
]

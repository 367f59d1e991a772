"""
API Routes for Bookish

Route modules:
- lookup: ISBN and title/author metadata resolution
- library: Filter/sort view-model and Amazon links
"""

from bookish.api.routes.lookup import router as lookup_router
from bookish.api.routes.library import router as library_router

__all__ = [
    "lookup_router",
    "library_router",
]

"""
API routers for book service endpoints.
"""

from . import book_router, health_router

__all__ = ["book_router", "health_router"]

"""
REST API Endpoints

Thin API layer that delegates to services.
"""

from .user_endpoints import ROUTES, build_router, router as user_router

__all__ = [
    "ROUTES",
    "build_router",
    "user_router",
]

"""
Business Logic Services

Services contain business logic and orchestrate repository calls.
"""

from .user_service import ServiceResult, UserService, UserUpdate, build_user_update

__all__ = [
    "ServiceResult",
    "UserService",
    "UserUpdate",
    "build_user_update",
]

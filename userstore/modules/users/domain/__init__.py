"""
Domain Models

Pure data model and validation rules for the user entity.
"""

from .user import User
from .validation import (
    DATE_OF_BIRTH_FORMAT,
    INVALID_DATE_OF_BIRTH,
    USER_ID_REQUIRED,
    validate_date_of_birth,
)

__all__ = [
    "User",
    "DATE_OF_BIRTH_FORMAT",
    "INVALID_DATE_OF_BIRTH",
    "USER_ID_REQUIRED",
    "validate_date_of_birth",
]

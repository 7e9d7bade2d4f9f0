"""
Data Access Layer (Repositories)

Repositories handle all database interactions.
"""

from .errors import StorageError
from .user_table import UpdateResult, UserTable

__all__ = [
    "StorageError",
    "UpdateResult",
    "UserTable",
]

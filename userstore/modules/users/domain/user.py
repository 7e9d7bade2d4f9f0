"""
User Domain Model

Pure data model representing a user record.
"""
from dataclasses import dataclass
from typing import Any, Dict, Optional

from .validation import USER_ID_REQUIRED, must_be_string, validate_date_of_birth

# Wire and storage attribute names, in validation order.
FIELDS = ("userId", "name", "email", "dateOfBirth")


@dataclass
class User:
    """User domain model.

    Values arrive straight from request bodies, so any field may hold a
    non-string value until ``full_validate`` has passed.
    """
    userId: Any = None
    name: Any = None
    email: Any = None
    dateOfBirth: Any = None

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "User":
        """Create User from a storage record or request body."""
        data = data or {}
        return cls(
            userId=data.get("userId"),
            name=data.get("name"),
            email=data.get("email"),
            dateOfBirth=data.get("dateOfBirth"),
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert User to dictionary."""
        return {
            "userId": self.userId,
            "name": self.name,
            "email": self.email,
            "dateOfBirth": self.dateOfBirth,
        }

    def full_validate(self) -> str:
        """
        Run every check required before a full write.

        Returns the first failing message, or an empty string.
        """
        for field in FIELDS:
            if not isinstance(getattr(self, field), str):
                return must_be_string(field)
        if self.userId.strip() == "":
            return USER_ID_REQUIRED
        return validate_date_of_birth(self.dateOfBirth)

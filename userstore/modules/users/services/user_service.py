"""
User Service

Business logic for user record operations.

Every operation returns a ``ServiceResult`` for expected outcomes, including
validation failures. Storage faults (``StorageError``) are not caught here and
reach the caller unchanged.
"""
import logging
from dataclasses import dataclass
from typing import Any, Dict, NamedTuple, Optional

from userstore.modules.users.domain.user import User
from userstore.modules.users.domain.validation import (
    USER_ID_REQUIRED,
    must_be_string,
    validate_date_of_birth,
)
from userstore.modules.users.repositories.user_table import ALL_NEW, ALL_OLD, UserTable

logger = logging.getLogger("userstore.users.service")

USER_NOT_FOUND = "User not found"
NO_PROPERTIES_TO_UPDATE = "No valid properties to update"
UPDATE_REJECTED = {"msg": "Could not update user"}


class ServiceResult(NamedTuple):
    status_code: int
    payload: Any


@dataclass
class UserUpdate:
    """Sparse mutation for one user record."""
    expression: str
    attribute_names: Optional[Dict[str, str]]
    attribute_values: Dict[str, Any]


def build_user_update(user: User) -> Optional[UserUpdate]:
    """
    Build the SET expression for the truthy fields of ``user``.

    Field order is fixed: name, email, dateOfBirth. ``name`` goes through the
    ``#name`` alias since it is a reserved word for the table engine.
    Returns None when there is nothing to update.
    """
    fragments = []
    attribute_names = None
    attribute_values: Dict[str, Any] = {}

    if user.name:
        fragments.append("#name = :name")
        attribute_names = {"#name": "name"}
        attribute_values[":name"] = user.name
    if user.email:
        fragments.append("email = :email")
        attribute_values[":email"] = user.email
    if user.dateOfBirth:
        fragments.append("dateOfBirth = :dateOfBirth")
        attribute_values[":dateOfBirth"] = user.dateOfBirth

    if not fragments:
        return None
    return UserUpdate(
        expression="SET " + ", ".join(fragments),
        attribute_names=attribute_names,
        attribute_values=attribute_values,
    )


class UserService:
    """Service for user business logic."""

    def __init__(self, table: UserTable):
        self.table = table

    async def get_all(self) -> ServiceResult:
        """List every user."""
        logger.debug("[UserService.get_all]")
        records = await self.table.scan()
        return ServiceResult(200, [User.from_dict(record) for record in records])

    async def get(self, user_id: str) -> ServiceResult:
        """Get user by userId."""
        logger.debug(f"[UserService.get] user_id={user_id}")
        record = await self.table.get(user_id)
        if record is None:
            return ServiceResult(404, USER_NOT_FOUND)
        return ServiceResult(200, User.from_dict(record))

    async def _write(self, user: User, success_msg: str) -> ServiceResult:
        msg = user.full_validate()
        if msg:
            logger.debug(f"[UserService._write] rejected user_id={user.userId!r}: {msg}")
            return ServiceResult(400, msg)
        await self.table.put(user.to_dict())
        return ServiceResult(200, {"msg": success_msg})

    async def post(self, user: User) -> ServiceResult:
        """Create a user, overwriting any record with the same userId."""
        logger.debug(f"[UserService.post] user_id={user.userId!r}")
        return await self._write(user, "User created successfully")

    async def put(self, user: User) -> ServiceResult:
        """Replace a user record in full."""
        logger.debug(f"[UserService.put] user_id={user.userId!r}")
        return await self._write(user, "User updated successfully")

    async def patch(self, user: User) -> ServiceResult:
        """Update only the fields set on ``user`` and return the merged record."""
        logger.debug(f"[UserService.patch] user_id={user.userId!r}")
        if not user.userId:
            return ServiceResult(400, USER_ID_REQUIRED)
        for field in ("name", "email"):
            value = getattr(user, field)
            if value and not isinstance(value, str):
                return ServiceResult(400, must_be_string(field))
        if user.dateOfBirth:
            msg = validate_date_of_birth(user.dateOfBirth)
            if msg:
                return ServiceResult(400, msg)

        update = build_user_update(user)
        if update is None:
            return ServiceResult(400, NO_PROPERTIES_TO_UPDATE)

        result = await self.table.update(
            user.userId,
            update.expression,
            update.attribute_names,
            update.attribute_values,
            return_values=ALL_NEW,
        )
        if result.status_code != 200:
            logger.warning(f"[UserService.patch] user_id={user.userId} storage status={result.status_code}")
            return ServiceResult(result.status_code, dict(UPDATE_REJECTED))
        return ServiceResult(200, User.from_dict(result.attributes))

    async def delete(self, user_id: str) -> ServiceResult:
        """Delete a user and return its prior values (None when it did not exist)."""
        logger.debug(f"[UserService.delete] user_id={user_id}")
        record = await self.table.delete(user_id, return_values=ALL_OLD)
        if record is None:
            return ServiceResult(200, None)
        return ServiceResult(200, User.from_dict(record))

"""
User Table

Key-value style access to the users table: scan, get, put, update and delete
keyed by userId. Records crossing this boundary are keyed by attribute names
(userId, name, email, dateOfBirth); column names stay inside this module.
"""
import logging
import re
from typing import Any, Dict, List, NamedTuple, Optional

from databases import Database

from .errors import StorageError

logger = logging.getLogger("userstore.users.repository")

ALL_NEW = "ALL_NEW"
ALL_OLD = "ALL_OLD"

KEY_ATTRIBUTE = "userId"
ATTRIBUTE_COLUMNS = {
    "userId": "user_id",
    "name": "name",
    "email": "email",
    "dateOfBirth": "date_of_birth",
}

_IDENTIFIER = re.compile(r"[A-Za-z_][A-Za-z0-9_]*")
_ASSIGNMENT = re.compile(r"(#?[A-Za-z_][A-Za-z0-9_]*)\s*=\s*(:[A-Za-z_][A-Za-z0-9_]*)")


class UpdateResult(NamedTuple):
    status_code: int
    attributes: Optional[Dict[str, Any]]


def parse_set_expression(
    expression: str,
    attribute_names: Optional[Dict[str, str]],
    attribute_values: Dict[str, Any],
) -> Dict[str, Any]:
    """
    Resolve ``SET a = :a, #b = :b`` into ``{attribute: value}``.

    ``#alias`` targets are looked up in ``attribute_names`` and ``:placeholder``
    values in ``attribute_values``. Raises ValueError for anything malformed.
    """
    head, _, body = expression.strip().partition(" ")
    if head.upper() != "SET" or not body.strip():
        raise ValueError(f"Unsupported update expression: {expression!r}")

    names = attribute_names or {}
    assignments: Dict[str, Any] = {}
    for fragment in body.split(","):
        match = _ASSIGNMENT.fullmatch(fragment.strip())
        if not match:
            raise ValueError(f"Malformed assignment: {fragment.strip()!r}")
        target, placeholder = match.groups()
        if target.startswith("#"):
            if target not in names:
                raise ValueError(f"Unresolved attribute name {target}")
            target = names[target]
        if target == KEY_ATTRIBUTE:
            raise ValueError(f"{KEY_ATTRIBUTE} cannot be updated")
        if target not in ATTRIBUTE_COLUMNS:
            raise ValueError(f"Unknown attribute {target}")
        if placeholder not in attribute_values:
            raise ValueError(f"Missing value for {placeholder}")
        assignments[target] = attribute_values[placeholder]
    return assignments


class UserTable:
    """Storage adapter for user records."""

    def __init__(self, database: Database, table_name: str = "users"):
        if not _IDENTIFIER.fullmatch(table_name or ""):
            raise ValueError(f"Invalid table name: {table_name!r}")
        self.database = database
        self.table_name = table_name

    @staticmethod
    def _to_record(row: Any) -> Optional[Dict[str, Any]]:
        if row is None:
            return None
        return {attr: row[column] for attr, column in ATTRIBUTE_COLUMNS.items()}

    async def create_table(self) -> None:
        """Create the users table if it does not exist."""
        query = f"""
            CREATE TABLE IF NOT EXISTS {self.table_name} (
                user_id TEXT PRIMARY KEY,
                name TEXT,
                email TEXT,
                date_of_birth TEXT
            )
        """
        try:
            await self.database.execute(query=query)
        except Exception as e:
            logger.error(f"[UserTable.create_table] ERROR: {e}", exc_info=True)
            raise StorageError(f"Could not create table {self.table_name}") from e

    async def scan(self) -> List[Dict[str, Any]]:
        """Return every record in the table."""
        query = f"SELECT user_id, name, email, date_of_birth FROM {self.table_name}"
        try:
            rows = await self.database.fetch_all(query)
        except Exception as e:
            logger.error(f"[UserTable.scan] ERROR: {e}", exc_info=True)
            raise StorageError("Scan failed") from e
        return [self._to_record(row) for row in rows]

    async def get(self, key: str) -> Optional[Dict[str, Any]]:
        """Get a record by userId, or None when absent."""
        query = f"""
            SELECT user_id, name, email, date_of_birth
            FROM {self.table_name}
            WHERE user_id = :user_id
        """
        try:
            row = await self.database.fetch_one(query, {"user_id": key})
        except Exception as e:
            logger.error(f"[UserTable.get] key={key} ERROR: {e}", exc_info=True)
            raise StorageError(f"Get failed for {key}") from e
        return self._to_record(row)

    async def put(self, record: Dict[str, Any]) -> None:
        """Write a full record, overwriting any record with the same key."""
        query = f"""
            INSERT INTO {self.table_name} (user_id, name, email, date_of_birth)
            VALUES (:user_id, :name, :email, :date_of_birth)
            ON CONFLICT (user_id) DO UPDATE SET
                name = excluded.name,
                email = excluded.email,
                date_of_birth = excluded.date_of_birth
        """
        values = {column: record.get(attr) for attr, column in ATTRIBUTE_COLUMNS.items()}
        try:
            await self.database.execute(query, values)
        except Exception as e:
            logger.error(f"[UserTable.put] key={values['user_id']} ERROR: {e}", exc_info=True)
            raise StorageError(f"Put failed for {values['user_id']}") from e

    async def update(
        self,
        key: str,
        set_expression: str,
        attribute_names: Optional[Dict[str, str]],
        attribute_values: Dict[str, Any],
        return_values: str = ALL_NEW,
    ) -> UpdateResult:
        """
        Apply a SET expression to one record and return the merged record.

        A missing key is created with only the assigned attributes.
        """
        assignments = parse_set_expression(set_expression, attribute_names, attribute_values)
        columns = [ATTRIBUTE_COLUMNS[attr] for attr in assignments]
        values = {"user_id": key}
        values.update({ATTRIBUTE_COLUMNS[attr]: value for attr, value in assignments.items()})

        query = f"""
            INSERT INTO {self.table_name} (user_id, {", ".join(columns)})
            VALUES (:user_id, {", ".join(":" + c for c in columns)})
            ON CONFLICT (user_id) DO UPDATE SET
                {", ".join(f"{c} = excluded.{c}" for c in columns)}
        """
        select_query = f"""
            SELECT user_id, name, email, date_of_birth
            FROM {self.table_name}
            WHERE user_id = :user_id
        """
        try:
            async with self.database.transaction():
                await self.database.execute(query, values)
                row = await self.database.fetch_one(select_query, {"user_id": key})
        except Exception as e:
            logger.error(f"[UserTable.update] key={key} ERROR: {e}", exc_info=True)
            raise StorageError(f"Update failed for {key}") from e

        if row is None:
            logger.warning(f"[UserTable.update] key={key} not readable after update")
            return UpdateResult(500, None)
        if return_values != ALL_NEW:
            return UpdateResult(200, None)
        return UpdateResult(200, self._to_record(row))

    async def delete(self, key: str, return_values: str = ALL_OLD) -> Optional[Dict[str, Any]]:
        """Delete a record by userId, returning its prior values (None if absent)."""
        select_query = f"""
            SELECT user_id, name, email, date_of_birth
            FROM {self.table_name}
            WHERE user_id = :user_id
        """
        delete_query = f"DELETE FROM {self.table_name} WHERE user_id = :user_id"
        try:
            async with self.database.transaction():
                row = await self.database.fetch_one(select_query, {"user_id": key})
                await self.database.execute(delete_query, {"user_id": key})
        except Exception as e:
            logger.error(f"[UserTable.delete] key={key} ERROR: {e}", exc_info=True)
            raise StorageError(f"Delete failed for {key}") from e

        if return_values != ALL_OLD:
            return None
        return self._to_record(row)

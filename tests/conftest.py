import pytest
from unittest.mock import AsyncMock

from userstore.modules.config import Settings
from userstore.modules.users.domain.user import User
from userstore.modules.users.repositories.user_table import UserTable


@pytest.fixture
def valid_user():
    return User("test", "Test User", "test@test.com", "1990/01/01")


@pytest.fixture
def table_mock():
    """UserTable stand-in whose coroutine methods are AsyncMocks."""
    return AsyncMock(spec=UserTable)


@pytest.fixture
def settings(tmp_path):
    """Settings pointing at a throwaway SQLite file."""
    return Settings(
        database_url=f"sqlite:///{tmp_path / 'users.db'}",
        users_table="users",
        log_level="DEBUG",
        cors_origins=["*"],
        host="127.0.0.1",
        port=8000,
    )

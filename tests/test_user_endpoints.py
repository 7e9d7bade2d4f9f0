"""
Tests for the users REST endpoints.

The service is replaced by an AsyncMock, so these tests cover request mapping,
response shapes and fault handling only.
"""
import pytest
from unittest.mock import AsyncMock
from fastapi.testclient import TestClient

from userstore.app import create_app
from userstore.modules.users.api import ROUTES
from userstore.modules.users.domain.user import User
from userstore.modules.users.repositories import StorageError
from userstore.modules.users.services.user_service import ServiceResult, UserService

BODY = {"userId": "test", "name": "Test User", "email": "test@test.com", "dateOfBirth": "1990/01/01"}


@pytest.fixture
def service():
    return AsyncMock(spec=UserService)


@pytest.fixture
def client(settings, service):
    app = create_app(settings)
    app.state.user_service = service
    # No context manager: lifespan (and the database) stays off.
    return TestClient(app)


def test_route_table_covers_every_operation():
    assert [(method, path) for method, path, _, _ in ROUTES] == [
        ("GET", "/users"),
        ("POST", "/users"),
        ("GET", "/users/{user_id}"),
        ("PUT", "/users/{user_id}"),
        ("PATCH", "/users/{user_id}"),
        ("DELETE", "/users/{user_id}"),
    ]


def test_list_users(client, service):
    service.get_all.return_value = ServiceResult(200, [User(**BODY)])

    resp = client.get("/users")

    assert resp.status_code == 200
    assert resp.json() == [BODY]


def test_get_user(client, service):
    service.get.return_value = ServiceResult(200, User(**BODY))

    resp = client.get("/users/test")

    assert resp.status_code == 200
    assert resp.json() == BODY
    service.get.assert_awaited_once_with("test")


def test_get_user_not_found(client, service):
    service.get.return_value = ServiceResult(404, "User not found")

    resp = client.get("/users/ghost")

    assert resp.status_code == 404
    assert resp.json() == {"error": "User not found"}


def test_create_user(client, service):
    service.post.return_value = ServiceResult(200, {"msg": "User created successfully"})

    resp = client.post("/users", json=dict(BODY, extra="ignored"))

    assert resp.status_code == 200
    assert resp.json() == {"msg": "User created successfully"}
    service.post.assert_awaited_once_with(User(**BODY))


def test_create_user_validation_error(client, service):
    service.post.return_value = ServiceResult(400, '"userId" is required')

    resp = client.post("/users", json=dict(BODY, userId=""))

    assert resp.status_code == 400
    assert resp.json() == {"error": '"userId" is required'}


def test_create_user_passes_raw_values_through(client, service):
    service.post.return_value = ServiceResult(400, '"userId" must be a string')

    client.post("/users", json={"userId": 7, "name": "Bo"})

    service.post.assert_awaited_once_with(User(7, "Bo", None, None))


@pytest.mark.parametrize("content", [b"", b"not json", b"[1, 2]"])
def test_create_user_rejects_non_object_body(client, service, content):
    resp = client.post("/users", content=content, headers={"Content-Type": "application/json"})

    assert resp.status_code == 400
    assert resp.json() == {"error": "Request body must be a JSON object"}
    service.post.assert_not_called()


def test_replace_user_takes_user_id_from_path(client, service):
    service.put.return_value = ServiceResult(200, {"msg": "User updated successfully"})

    resp = client.put("/users/test", json=dict(BODY, userId="other"))

    assert resp.status_code == 200
    assert resp.json() == {"msg": "User updated successfully"}
    service.put.assert_awaited_once_with(User(**BODY))


def test_patch_user(client, service):
    service.patch.return_value = ServiceResult(200, User(**dict(BODY, name="New Name")))

    resp = client.patch("/users/test", json={"name": "New Name"})

    assert resp.status_code == 200
    assert resp.json() == dict(BODY, name="New Name")
    service.patch.assert_awaited_once_with(User("test", "New Name", None, None))


def test_patch_user_storage_rejection(client, service):
    service.patch.return_value = ServiceResult(503, {"msg": "Could not update user"})

    resp = client.patch("/users/test", json={"name": "New Name"})

    assert resp.status_code == 503
    assert resp.json() == {"error": {"msg": "Could not update user"}}


def test_delete_user(client, service):
    service.delete.return_value = ServiceResult(200, User(**BODY))

    resp = client.delete("/users/test")

    assert resp.status_code == 200
    assert resp.json() == BODY
    service.delete.assert_awaited_once_with("test")


def test_delete_missing_user_returns_null(client, service):
    service.delete.return_value = ServiceResult(200, None)

    resp = client.delete("/users/ghost")

    assert resp.status_code == 200
    assert resp.json() is None


@pytest.mark.parametrize(
    "method, path, service_method, kwargs, message",
    [
        ("GET", "/users", "get_all", {}, "Could not retrieve users"),
        ("GET", "/users/test", "get", {}, "Could not retrieve user"),
        ("POST", "/users", "post", {"json": BODY}, "Could not create user"),
        ("PUT", "/users/test", "put", {"json": BODY}, "Could not update user"),
        ("PATCH", "/users/test", "patch", {"json": {"name": "x"}}, "Could not update user"),
        ("DELETE", "/users/test", "delete", {}, "Could not delete user"),
    ],
)
def test_storage_fault_becomes_500(client, service, method, path, service_method, kwargs, message):
    getattr(service, service_method).side_effect = StorageError("connection refused")

    resp = client.request(method, path, **kwargs)

    assert resp.status_code == 500
    assert resp.json() == {"error": message}


@pytest.mark.parametrize(
    "method, path",
    [("GET", "/"), ("GET", "/accounts"), ("GET", "/users/test/extra"), ("DELETE", "/users"), ("POST", "/users/test")],
)
def test_unmatched_routes_are_not_found(client, method, path):
    resp = client.request(method, path)

    assert resp.status_code == 404
    assert resp.json() == {"error": "Not Found"}


def test_missing_service_still_answers_with_json_error(settings):
    app = create_app(settings)
    app.state.user_service = None
    client = TestClient(app, raise_server_exceptions=False)

    resp = client.get("/users")

    assert resp.status_code == 500
    assert resp.json() == {"error": "Internal Server Error"}

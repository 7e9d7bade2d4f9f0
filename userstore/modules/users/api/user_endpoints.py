"""
User API Endpoints

REST endpoints for user records. Each endpoint builds a User from the request,
calls the service, and writes the (status, payload) pair as JSON. Storage
faults are caught here, once per endpoint, and answered with a 500.
"""
import logging
from typing import Any

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from userstore.modules.users.api.schemas import ErrorResponse, MessageResponse, UserBody
from userstore.modules.users.domain.user import User
from userstore.modules.users.services.user_service import ServiceResult, UserService

logger = logging.getLogger("userstore.users.api")


def get_user_service(request: Request) -> UserService:
    svc = getattr(getattr(request.app, "state", None), "user_service", None)
    if not svc:
        raise RuntimeError("UserService not configured")
    return svc


def _serialize(payload: Any) -> Any:
    if isinstance(payload, User):
        return payload.to_dict()
    if isinstance(payload, list):
        return [_serialize(item) for item in payload]
    return payload


def _respond(result: ServiceResult) -> JSONResponse:
    status_code, payload = result
    if status_code == 200:
        return JSONResponse(status_code=200, content=_serialize(payload))
    return JSONResponse(status_code=status_code, content={"error": _serialize(payload)})


def _fault(message: str) -> JSONResponse:
    return JSONResponse(status_code=500, content={"error": message})


async def list_users(service: UserService = Depends(get_user_service)):
    """List all users."""
    logger.debug("[user_endpoints.list_users]")
    try:
        return _respond(await service.get_all())
    except Exception as e:
        logger.error(f"[user_endpoints.list_users] ERROR: {e}", exc_info=True)
        return _fault("Could not retrieve users")


async def get_user(user_id: str, service: UserService = Depends(get_user_service)):
    """Get a user by userId."""
    logger.debug(f"[user_endpoints.get_user] user_id={user_id}")
    try:
        return _respond(await service.get(user_id))
    except Exception as e:
        logger.error(f"[user_endpoints.get_user] ERROR: {e}", exc_info=True)
        return _fault("Could not retrieve user")


async def create_user(body: UserBody, service: UserService = Depends(get_user_service)):
    """Create a user. An existing record with the same userId is overwritten."""
    logger.debug(f"[user_endpoints.create_user] user_id={body.userId!r}")
    try:
        user = User(body.userId, body.name, body.email, body.dateOfBirth)
        return _respond(await service.post(user))
    except Exception as e:
        logger.error(f"[user_endpoints.create_user] ERROR: {e}", exc_info=True)
        return _fault("Could not create user")


async def replace_user(user_id: str, body: UserBody, service: UserService = Depends(get_user_service)):
    """Replace every field of a user. The userId comes from the path."""
    logger.debug(f"[user_endpoints.replace_user] user_id={user_id}")
    try:
        user = User(user_id, body.name, body.email, body.dateOfBirth)
        return _respond(await service.put(user))
    except Exception as e:
        logger.error(f"[user_endpoints.replace_user] ERROR: {e}", exc_info=True)
        return _fault("Could not update user")


async def update_user(user_id: str, body: UserBody, service: UserService = Depends(get_user_service)):
    """Update only the fields present in the body and return the merged user."""
    logger.debug(f"[user_endpoints.update_user] user_id={user_id}")
    try:
        user = User(user_id, body.name, body.email, body.dateOfBirth)
        return _respond(await service.patch(user))
    except Exception as e:
        logger.error(f"[user_endpoints.update_user] ERROR: {e}", exc_info=True)
        return _fault("Could not update user")


async def delete_user(user_id: str, service: UserService = Depends(get_user_service)):
    """Delete a user and return its prior values."""
    logger.debug(f"[user_endpoints.delete_user] user_id={user_id}")
    try:
        return _respond(await service.delete(user_id))
    except Exception as e:
        logger.error(f"[user_endpoints.delete_user] ERROR: {e}", exc_info=True)
        return _fault("Could not delete user")


_ERRORS = {
    400: {"model": ErrorResponse},
    500: {"model": ErrorResponse},
}

# (method, path, endpoint, extra route options)
ROUTES = [
    ("GET", "/users", list_users, {"responses": _ERRORS}),
    ("POST", "/users", create_user, {"responses": {**_ERRORS, 200: {"model": MessageResponse}}}),
    ("GET", "/users/{user_id}", get_user, {"responses": {**_ERRORS, 404: {"model": ErrorResponse}}}),
    ("PUT", "/users/{user_id}", replace_user, {"responses": {**_ERRORS, 200: {"model": MessageResponse}}}),
    ("PATCH", "/users/{user_id}", update_user, {"responses": _ERRORS}),
    ("DELETE", "/users/{user_id}", delete_user, {"responses": _ERRORS}),
]


def build_router() -> APIRouter:
    """Register every entry of ROUTES on a fresh router."""
    router = APIRouter(tags=["users"])
    for method, path, endpoint, options in ROUTES:
        router.add_api_route(path, endpoint, methods=[method], **options)
    return router


router = build_router()

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from userstore import __version__
from userstore.modules.config import Settings, get_settings
from userstore.modules.database import connect_to_db, create_database, disconnect_from_db
from userstore.modules.users.api import user_router
from userstore.modules.users.repositories import UserTable
from userstore.modules.users.services import UserService

logger = logging.getLogger("userstore.app")


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """Build the FastAPI app with its database, table adapter and service."""
    settings = settings or get_settings()
    configure_logging(settings.log_level)

    database = create_database(settings.database_url)
    table = UserTable(database, settings.users_table)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        # Startup
        await connect_to_db(database)
        await table.create_table()
        logger.info(f"Serving table '{settings.users_table}'")
        yield
        # Shutdown
        await disconnect_from_db(database)

    app = FastAPI(title="User Store", version=__version__, lifespan=lifespan)
    app.state.database = database
    app.state.user_service = UserService(table)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        # Unknown paths and unsupported methods look the same to clients.
        if exc.status_code in (404, 405):
            return JSONResponse(status_code=404, content={"error": "Not Found"})
        return JSONResponse(status_code=exc.status_code, content={"error": exc.detail})

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        logger.debug(f"Rejected body for {request.method} {request.url.path}: {exc.errors()}")
        return JSONResponse(status_code=400, content={"error": "Request body must be a JSON object"})

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        # Faults outside an endpoint's own try block, e.g. in dependencies.
        logger.error(f"Unhandled error for {request.method} {request.url.path}: {exc}", exc_info=exc)
        return JSONResponse(status_code=500, content={"error": "Internal Server Error"})

    app.include_router(user_router)
    return app

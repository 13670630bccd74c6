"""
FastAPI app assembly: logging, error mapping and router wiring.

Repository errors and rejected requests are translated to status codes here;
routers never catch them. Pending migrations are applied during startup
unless ``Settings.auto_migrate`` is off.
"""
import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, status
from fastapi.exceptions import RequestValidationError
from starlette.requests import Request
from starlette.responses import JSONResponse

from protocol_service import __version__
from protocol_service.config import Settings
from protocol_service.db import migrate
from protocol_service.db.database import Database
from protocol_service.db.errors import (
    BadRequest,
    ConcurrencyConflict,
    NotFound,
    RepositoryError,
    ValidationError,
)
from protocol_service.api.organizations import router as organizations_router
from protocol_service.api.users import router as users_router
from protocol_service.api.protocols import router as protocols_router
from protocol_service.api.protocol_templates import router as protocol_templates_router

logger = logging.getLogger(__name__)

_STATUS_BY_ERROR = (
    (NotFound, status.HTTP_404_NOT_FOUND),
    (ConcurrencyConflict, status.HTTP_409_CONFLICT),
    (BadRequest, status.HTTP_400_BAD_REQUEST),
    (ValidationError, status.HTTP_400_BAD_REQUEST),
)


def _configure_logging(level_name: str) -> None:
    level = getattr(logging, level_name, logging.INFO)
    logging.basicConfig(level=level)
    logging.getLogger("protocol_service").setLevel(level)


def status_for(error: RepositoryError) -> int:
    for error_type, code in _STATUS_BY_ERROR:
        if isinstance(error, error_type):
            return code
    return status.HTTP_500_INTERNAL_SERVER_ERROR


async def repository_error_handler(request: Request, exc: RepositoryError) -> JSONResponse:
    code = status_for(exc)
    if code >= 500:
        logger.error("repository_error: path=%s error=%s", request.url.path, exc)
    else:
        logger.info("repository_error: path=%s status=%s error=%s", request.url.path, code, exc)
    return JSONResponse(exc.to_dict(), status_code=code)


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Render unparseable requests like repository validation failures (400)."""
    first = exc.errors()[0] if exc.errors() else {}
    loc = [str(part) for part in first.get("loc", ()) if part not in ("body", "path", "query")]
    field = ".".join(loc) or None
    error = ValidationError(f"{field or 'request'}: {first.get('msg', 'invalid request')}", field=field)
    logger.info("request_invalid: path=%s field=%s", request.url.path, field)
    return JSONResponse(error.to_dict(), status_code=status.HTTP_400_BAD_REQUEST)


def create_app(settings: Settings, database: Optional[Database] = None) -> FastAPI:
    """Assemble the application for ``settings``.

    ``database`` may be supplied to share an engine with the caller (tests);
    otherwise one is built from ``settings``.
    """
    _configure_logging(settings.log_level)
    db = database or Database(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if settings.auto_migrate:
            migrate.upgrade_to_head(settings, engine=db.engine)
        logger.info("app_startup: log_level=%s dialect=%s", settings.log_level, db.engine.dialect.name)
        yield
        if database is None:
            db.dispose()

    app = FastAPI(
        title="Protocol Service",
        description="API for managing organizations, users, protocols and protocol templates.",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.database = db
    app.add_exception_handler(RepositoryError, repository_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)

    app.include_router(organizations_router)
    app.include_router(users_router)
    app.include_router(protocols_router)
    app.include_router(protocol_templates_router)
    return app

"""
FastAPI application for RecruitMatch.

Every error response carries a JSON ``{"error": ...}`` body.
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pymongo.errors import PyMongoError
from starlette.concurrency import run_in_threadpool
from starlette.exceptions import HTTPException as StarletteHTTPException

from recruitmatch import __app_name__, __version__
from recruitmatch.core.exceptions import AutoMatchAborted, RecruitMatchError, StorageError
from recruitmatch.data.database import get_database_manager
from recruitmatch.utils.config import get_settings
from recruitmatch.utils.logger import get_logger, setup_logging

from .routes import router

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging()
    logger.info(f"Starting {__app_name__} API {__version__}")
    if get_settings().api.ensure_indexes:
        try:
            created = await run_in_threadpool(get_database_manager().ensure_indexes)
            logger.info(f"{len(created)} indexes in place")
        except PyMongoError as e:
            # Serve anyway; /health reports the database as degraded
            logger.error(f"Could not create indexes at startup: {e}")
    yield
    get_database_manager().close_all()


async def handle_domain_error(request: Request, exc: RecruitMatchError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


async def handle_storage_error(request: Request, exc: StorageError) -> JSONResponse:
    logger.error(f"{request.method} {request.url.path} failed: {exc.message} ({exc.cause})")
    content = {"error": "Server error"}
    if isinstance(exc, AutoMatchAborted):
        content["applied_count"] = exc.applied_count
    return JSONResponse(status_code=500, content=content)


async def handle_request_validation(request: Request, exc: RequestValidationError) -> JSONResponse:
    fields = sorted(
        {str(err["loc"][-1]) for err in exc.errors() if err.get("loc")}
    )
    message = "Invalid request"
    if fields:
        message = f"Missing or invalid field(s): {', '.join(fields)}"
    return JSONResponse(status_code=400, content={"error": message})


async def handle_http_error(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content={"error": str(exc.detail)})


async def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(f"Unhandled error on {request.method} {request.url.path}: {exc}")
    return JSONResponse(status_code=500, content={"error": "Server error"})


def create_app() -> FastAPI:
    """Build the API application."""
    settings = get_settings()
    app = FastAPI(
        title=__app_name__,
        version=__version__,
        description=settings.description,
        root_path=settings.api.root_path,
        lifespan=lifespan,
    )

    # Most specific handler wins, so StorageError takes precedence over its base
    app.add_exception_handler(StorageError, handle_storage_error)
    app.add_exception_handler(RecruitMatchError, handle_domain_error)
    app.add_exception_handler(RequestValidationError, handle_request_validation)
    app.add_exception_handler(StarletteHTTPException, handle_http_error)
    app.add_exception_handler(Exception, handle_unexpected_error)

    app.include_router(router)

    @app.get("/health")
    async def health():
        database_ok = await get_database_manager().check_async_connection()
        return {"status": "ok" if database_ok else "degraded", "database": database_ok}

    return app

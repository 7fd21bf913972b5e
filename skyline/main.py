"""
Main FastAPI application entry point.
"""

import logging
import time
from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncGenerator, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.base import BaseHTTPMiddleware

from skyline import __version__
from skyline.config import Settings, get_settings
from skyline.database import Database
from skyline.exceptions import AppError, RouteNotFoundError
from skyline.services.images import LOCAL_IMAGES_PATH, LocalImageStore, build_image_store
from skyline.services.security import TokenService

logger = logging.getLogger(__name__)

GENERIC_ERROR_MESSAGE = "Some error, please try again."
SLOW_REQUEST_MS = 100


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Application lifespan handler.
    Prepares the database on startup and closes connections on shutdown.
    """
    settings: Settings = app.state.settings
    database: Database = app.state.database
    logger.info("Starting %s v%s (%s)", settings.app_name, __version__, settings.environment)

    if settings.db_auto_create:
        await database.create_tables()
    else:
        await database.verify()

    image_store = app.state.image_store
    if isinstance(image_store, LocalImageStore):
        Path(image_store.directory).mkdir(parents=True, exist_ok=True)

    yield

    await database.close()
    logger.info("%s shutdown complete", settings.app_name)


class TimingMiddleware(BaseHTTPMiddleware):
    """Log requests slower than SLOW_REQUEST_MS."""

    async def dispatch(self, request, call_next):
        start = time.perf_counter()
        response = await call_next(request)
        duration = (time.perf_counter() - start) * 1000
        if duration > SLOW_REQUEST_MS:
            logger.warning(
                "Slow request: %s %s took %.0fms", request.method, request.url.path, duration
            )
        return response


def _error_response(settings: Settings, status_code: int, message: str) -> JSONResponse:
    # 5xx details stay in the server log in production
    if status_code >= 500 and settings.is_production:
        message = GENERIC_ERROR_MESSAGE
    return JSONResponse(status_code=status_code, content={"error": message})


def _describe_request_error(error: dict) -> str:
    location = [str(part) for part in error.get("loc", ()) if part not in ("body", "query")]
    field = ".".join(location)
    return f"{field}: {error.get('msg')}" if field else str(error.get("msg"))


def register_exception_handlers(app: FastAPI, settings: Settings) -> None:
    """Map every error to {"error": message} with its status code."""

    @app.exception_handler(AppError)
    async def app_error_handler(request: Request, exc: AppError):
        if exc.status_code >= 500:
            logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
        return _error_response(settings, exc.status_code, exc.message)

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException):
        if exc.status_code in (404, 405):
            error = RouteNotFoundError(request.method, request.url.path)
            return _error_response(settings, error.status_code, error.message)
        return _error_response(settings, exc.status_code, str(exc.detail))

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        messages = [_describe_request_error(error) for error in exc.errors()]
        return _error_response(settings, 400, "; ".join(messages) or "Invalid request.")

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        """Handle uncaught exceptions."""
        logger.exception("Unhandled exception on %s %s", request.method, request.url.path)
        return _error_response(settings, 500, str(exc))


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = settings or get_settings()

    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    app = FastAPI(
        title=settings.app_name,
        version=__version__,
        description="Vacation browsing, likes and administration API",
        lifespan=lifespan,
        docs_url="/api/docs" if settings.debug else None,
        redoc_url="/api/redoc" if settings.debug else None,
        openapi_url="/api/openapi.json" if settings.debug else None,
    )

    # Collaborators are built once per app and read by request dependencies
    app.state.settings = settings
    app.state.database = Database(settings)
    app.state.token_service = TokenService(settings)
    app.state.image_store = build_image_store(settings)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(TimingMiddleware)

    register_exception_handlers(app, settings)

    from skyline.routers import auth, health, vacations

    app.include_router(health.router, tags=["Health"])
    app.include_router(auth.router, tags=["Authentication"])
    app.include_router(vacations.router, tags=["Vacations"])

    image_store = app.state.image_store
    if isinstance(image_store, LocalImageStore):
        app.mount(
            LOCAL_IMAGES_PATH,
            StaticFiles(directory=image_store.directory, check_dir=False),
            name="vacation-images",
        )

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "skyline.main:app",
        host="0.0.0.0",
        port=settings.port,
        reload=settings.debug,
    )

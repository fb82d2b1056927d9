"""Application factory and module-level ASGI app."""

import logging
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from sqlalchemy.engine import Engine
from starlette.exceptions import HTTPException as StarletteHTTPException

from umutisafe.api.v1.api import api_router
from umutisafe.config import Settings, settings as default_settings
from umutisafe.database import Base, create_db_engine, create_session_factory, wait_for_database
import umutisafe.models  # noqa: F401  registers every table on Base.metadata

logger = logging.getLogger(__name__)


def _configure_logging(app_settings: Settings) -> None:
    logging.basicConfig(
        level=logging.DEBUG if app_settings.DEBUG else logging.INFO,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


def _validation_message(exc: RequestValidationError) -> str:
    parts = []
    for error in exc.errors():
        location = ".".join(str(p) for p in error.get("loc", ()) if p != "body")
        message = error.get("msg", "Invalid value")
        parts.append(f"{location}: {message}" if location else message)
    return "; ".join(parts) or "Invalid request"


def _register_exception_handlers(app: FastAPI, app_settings: Settings) -> None:
    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        return JSONResponse(
            status_code=exc.status_code,
            content={"success": False, "message": str(exc.detail)},
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"success": False, "message": _validation_message(exc)},
        )

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.exception(f"Unhandled error on {request.method} {request.url.path}")
        content = {"success": False, "message": str(exc) or "Server Error"}
        if not app_settings.is_production:
            content["stack"] = f"{type(exc).__name__}: {exc}"
        return JSONResponse(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content=content)


def create_app(app_settings: Optional[Settings] = None, engine: Optional[Engine] = None) -> FastAPI:
    """
    Build the FastAPI application.

    The engine and session factory are created here and stored on
    ``app.state``; pass ``engine`` to reuse an existing one (tests do).
    """
    app_settings = app_settings or default_settings
    _configure_logging(app_settings)

    if engine is None:
        engine = create_db_engine(
            app_settings.DATABASE_URL,
            pool_size=app_settings.DB_POOL_SIZE,
            echo=app_settings.DEBUG,
        )

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        wait_for_database(
            engine,
            retries=app_settings.DB_CONNECT_RETRIES,
            backoff_seconds=app_settings.DB_CONNECT_BACKOFF_SECONDS,
        )
        if app_settings.DB_AUTO_CREATE:
            Base.metadata.create_all(bind=engine)
            logger.info("Database tables ensured")
        yield
        engine.dispose()

    app = FastAPI(
        title=app_settings.API_TITLE,
        version=app_settings.API_VERSION,
        debug=app_settings.DEBUG,
        lifespan=lifespan,
    )
    app.state.settings = app_settings
    app.state.engine = engine
    app.state.session_factory = create_session_factory(engine)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=app_settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    upload_dir = Path(app_settings.UPLOAD_DIR)
    upload_dir.mkdir(parents=True, exist_ok=True)
    app.mount("/uploads", StaticFiles(directory=str(upload_dir)), name="uploads")

    _register_exception_handlers(app, app_settings)
    app.include_router(api_router)

    @app.get("/")
    def read_root():
        return {
            "message": "Welcome to UmutiSafe API",
            "version": app_settings.API_VERSION,
            "status": "running",
        }

    @app.get("/health")
    def health_check():
        return {"success": True, "status": "healthy", "environment": app_settings.ENVIRONMENT}

    return app


app = create_app()

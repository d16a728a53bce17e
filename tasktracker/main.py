"""FastAPI application entry point."""

import logging
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse, JSONResponse
from fastapi.staticfiles import StaticFiles
from sqlmodel import SQLModel
from starlette.exceptions import HTTPException as StarletteHTTPException

from tasktracker import __version__
from tasktracker.api.tasks import router as tasks_router
from tasktracker.api.users import router as users_router
from tasktracker.config import Settings, get_settings
from tasktracker.db.session import engine
from tasktracker.errors import AppError
from tasktracker.logging_setup import configure_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Create database tables on startup and release the engine on shutdown."""
    settings: Settings = app.state.settings
    if settings.uses_default_secret:
        logger.warning("JWT_SECRET is not set; tokens are signed with an insecure default key")

    # Import models to register them with SQLModel
    from tasktracker.models import Task, User  # noqa: F401
    SQLModel.metadata.create_all(engine)
    yield
    engine.dispose()


def error_body(message: str) -> dict[str, bool | str]:
    return {"success": False, "message": message}


async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content=error_body(exc.message))


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    logger.debug("Rejected request body", extra={"path": request.url.path, "errors": exc.errors()})
    return JSONResponse(status_code=400, content=error_body("Invalid request data"))


async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content=error_body(str(exc.detail)),
        headers=getattr(exc, "headers", None),
    )


def mount_frontend(app: FastAPI, static_dir: Path) -> None:
    """Serve the prebuilt frontend bundle and fall back to its entry document."""
    index_file = static_dir / "index.html"
    assets_dir = static_dir / "assets"
    if assets_dir.is_dir():
        app.mount("/assets", StaticFiles(directory=assets_dir), name="assets")

    @app.get("/{full_path:path}", include_in_schema=False)
    def serve_frontend(full_path: str):
        if full_path.startswith("api/") or full_path == "api":
            return JSONResponse(status_code=404, content=error_body("API route not found"))
        candidate = static_dir / full_path
        if full_path and candidate.is_file() and static_dir.resolve() in candidate.resolve().parents:
            return FileResponse(candidate)
        return FileResponse(index_file)


def create_app(settings: Settings | None = None) -> FastAPI:
    """Build the application with routers, error handlers and optional frontend."""
    settings = settings or get_settings()
    configure_logging(settings.LOG_LEVEL)

    app = FastAPI(
        title="Task Tracker API",
        description="Multi-user task tracking with per-user isolation",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.settings = settings

    cors_origins = [origin for origin in {settings.FRONTEND_URL, "http://localhost:5173"} if origin]
    app.add_middleware(
        CORSMiddleware,
        allow_origins=cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(AppError, app_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(StarletteHTTPException, http_error_handler)

    app.include_router(users_router)
    app.include_router(tasks_router)

    @app.get("/health")
    def health_check() -> dict[str, str]:
        """Health check endpoint."""
        return {"status": "healthy"}

    if settings.is_production:
        static_dir = Path(settings.STATIC_DIR)
        if (static_dir / "index.html").is_file():
            mount_frontend(app, static_dir)
        else:
            logger.warning("Frontend bundle not found", extra={"static_dir": str(static_dir)})

    return app


app = create_app()

"""FastAPI application entry point."""
import logging
from contextlib import asynccontextmanager
from datetime import datetime
from pathlib import Path
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse, JSONResponse
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException

from volley_stats.api import api_router
from volley_stats.config import Settings, get_settings
from volley_stats.database import create_engine, create_sessionmaker, init_db

# Reduce SQLAlchemy logging noise
logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
logging.getLogger("sqlalchemy.pool").setLevel(logging.WARNING)
logging.getLogger("sqlalchemy.dialects").setLevel(logging.WARNING)

logger = logging.getLogger(__name__)

DEFAULT_PUBLIC_DIR = Path(__file__).parent / "public"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    settings: Settings = app.state.settings

    # Startup
    logger.info("🏐 Starting Volleyball Club Stats (%s)...", settings.environment)
    engine = create_engine(settings)
    app.state.engine = engine
    app.state.sessionmaker = create_sessionmaker(engine)
    await init_db(engine)

    yield

    # Shutdown
    logger.info("🛑 Shutting down...")
    await engine.dispose()
    logger.info("✅ Database connection closed")


def validation_message(exc: RequestValidationError) -> str:
    """One readable line naming the first offending field."""
    error = exc.errors()[0]
    loc = [str(part) for part in error.get("loc", ()) if part != "body"]
    field = loc[-1] if loc else None
    message = error.get("msg", "Invalid request")
    if message.startswith("Value error, "):
        message = message[len("Value error, "):]

    if field is None:
        return message
    if error.get("type") in ("missing", "string_too_short"):
        return f"{field} is required"
    if error.get("type") == "extra_forbidden":
        return f"Unexpected field: {field}"
    return f"Invalid {field}: {message}"


def _error(status_code: int, message: str, headers: Optional[dict] = None) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message}, headers=headers)


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or get_settings()
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    app = FastAPI(
        title="Volleyball Club Stats",
        description="Roster, session and performance tracking API for a volleyball club",
        version="1.0.0",
        lifespan=lifespan,
    )
    app.state.settings = settings

    public_dir = Path(settings.public_dir) if settings.public_dir else DEFAULT_PUBLIC_DIR

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(StarletteHTTPException)
    async def http_error(request: Request, exc: StarletteHTTPException):
        return _error(exc.status_code, str(exc.detail), getattr(exc, "headers", None))

    @app.exception_handler(RequestValidationError)
    async def validation_error(request: Request, exc: RequestValidationError):
        return _error(400, validation_message(exc))

    @app.exception_handler(Exception)
    async def unhandled_error(request: Request, exc: Exception):
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return _error(500, "Internal server error")

    # Include API routes
    app.include_router(api_router, prefix="/api")

    @app.get("/api/health")
    async def health():
        """Health check endpoint."""
        return {
            "status": "OK",
            "timestamp": datetime.utcnow().isoformat() + "Z",
            "environment": settings.environment,
        }

    @app.api_route(
        "/api/{path:path}",
        methods=["GET", "POST", "PUT", "PATCH", "DELETE"],
        include_in_schema=False,
    )
    async def api_not_found(path: str):
        return _error(404, "API endpoint not found")

    # Mount static files
    if public_dir.exists():
        app.mount("/static", StaticFiles(directory=public_dir), name="static")

    @app.get("/{path:path}", include_in_schema=False)
    async def page(path: str):
        """Serve a named page (e.g. /add-player), falling back to index.html."""
        root = public_dir.resolve()
        name = path.strip("/")
        if name:
            candidate = (root / f"{name}.html").resolve()
            if candidate.parent == root and candidate.is_file():
                return FileResponse(candidate)

        index = root / "index.html"
        if not index.is_file():
            return _error(404, "Not found")
        return FileResponse(index)

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "volley_stats.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
        timeout_graceful_shutdown=settings.shutdown_timeout,
    )

"""
FastAPI application entry point.

This module creates and configures the FastAPI application.
Using an application factory pattern (create_app function) because:
- Easier to test with different configurations
- Explicit about initialization order

For local development:
    uvicorn rowcoach.main:app --reload

Run with a single worker: the timing session lives in process memory,
and several workers would each keep their own stopwatch.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from . import __version__
from .api.routes import analysis, benchmarks, health, sessions
from .config.settings import get_settings

# Configure logging
logging.basicConfig(
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    level=logging.INFO,
)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan manager.

    Applies the configured log level and reports configuration problems
    on startup. Missing settings are logged, not fatal: timing works
    without the AI summary.
    """
    settings = get_settings()
    logging.getLogger("rowcoach").setLevel(settings.log_level.upper())

    logger.info(
        "RowCoach API starting",
        extra={
            "version": __version__,
            "analysis_enabled": settings.analysis_enabled,
        }
    )

    missing_fields = settings.validate_required_fields()
    if missing_fields:
        logger.warning(
            "Incomplete configuration",
            extra={"missing_fields": missing_fields}
        )

    yield

    logger.info("RowCoach API shutting down")


def create_app() -> FastAPI:
    """
    Application factory.

    Called once at import for the server, and again by tests that need
    a fresh app.
    """
    settings = get_settings()

    app = FastAPI(
        title=settings.api_title,
        version=__version__,
        description="""
        Rowing session stopwatch and split timing.

        ## Workflow

        1. **Configure**: `PUT /api/v1/session/config`
           - Number of boats, session distance, split distance
        2. **Label boats**: `PATCH /api/v1/session/boats/{boat_id}`
        3. **Start**: `POST /api/v1/session/start`
        4. **Split**: `POST /api/v1/session/boats/{boat_id}/splits`
           - One call each time a boat passes a split marker
        5. **Stop and export**: `POST /api/v1/session/stop`, `GET /api/v1/session/export.csv`
        6. **Coaching summary**: `POST /api/v1/analysis/boats/{boat_id}`
        """,
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Include routers
    app.include_router(
        health.router,
        prefix="/health",
        tags=["Health"],
    )

    app.include_router(
        sessions.router,
        prefix="/api/v1/session",
        tags=["Session"],
    )

    app.include_router(
        benchmarks.router,
        prefix="/api/v1/benchmarks",
        tags=["Benchmarks"],
    )

    app.include_router(
        analysis.router,
        prefix="/api/v1/analysis",
        tags=["Analysis"],
    )

    @app.get("/", include_in_schema=False)
    async def root():
        return {
            "message": "RowCoach API",
            "version": __version__,
            "docs": "/docs",
            "health": "/health",
        }

    @app.exception_handler(Exception)
    async def global_exception_handler(request, exc):
        """
        Catch-all exception handler.

        Logs the full error server-side and returns a generic message.
        """
        logger.error(
            "Unhandled exception",
            extra={
                "path": request.url.path,
                "method": request.method,
                "error": str(exc),
            },
            exc_info=exc,
        )

        return JSONResponse(
            status_code=500,
            content={"detail": "Internal server error."}
        )

    logger.info(
        "FastAPI application created",
        extra={"title": settings.api_title, "version": __version__}
    )

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()

    uvicorn.run(
        "rowcoach.main:app",
        host="0.0.0.0",
        port=8000,
        reload=True,
        log_level=settings.log_level.lower(),
    )

"""
Residency Board FastAPI application entry point.

Pipeline: source endpoints → normalize → resolve company → upsert residencies
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.staticfiles import StaticFiles

from residency_board import __version__
from residency_board.config import get_settings
from residency_board.db.session import check_db_connection, engine
from residency_board.services.catalog import MEDIA_URL_PREFIX
from residency_board.services.media import media_root

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan: startup and shutdown."""
    logger.info("Residency Board starting")
    try:
        try:
            check_db_connection()
            logger.info("Database connection verified")
        except Exception as e:
            logger.critical("Database unreachable: %s", e)
            raise

        if not get_settings().softr_jwt_token:
            logger.warning("SOFTR_JWT_TOKEN is not set; sync runs will fail until it is")

        yield
    finally:
        logger.info("Residency Board shutting down")
        engine.dispose()
        logger.info("Database connection pool closed")


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = get_settings()
    app = FastAPI(
        title=settings.app_name,
        version=__version__,
        lifespan=lifespan,
        docs_url="/docs" if settings.debug else None,
        redoc_url="/redoc" if settings.debug else None,
    )

    # Mount API routes
    from residency_board.api.admin import router as admin_router
    from residency_board.api.residencies import router as residencies_router

    app.include_router(residencies_router, prefix="/api", tags=["residencies"])
    app.include_router(admin_router, prefix="/api/admin", tags=["admin"])

    # Internal job endpoints (cron/scripts, token-authenticated)
    from residency_board.api.internal import router as internal_router

    app.include_router(internal_router, tags=["internal"])

    # Uploaded company logos
    app.mount(MEDIA_URL_PREFIX, StaticFiles(directory=str(media_root())), name="media")

    @app.get("/health")
    def health() -> dict:
        """Health check endpoint. Confirms DB connectivity."""
        from sqlalchemy import text

        try:
            with engine.connect() as conn:
                conn.execute(text("SELECT 1"))
            return {
                "status": "ok",
                "version": __version__,
                "database": "connected",
            }
        except Exception:
            from fastapi.responses import JSONResponse

            return JSONResponse(
                status_code=503,
                content={
                    "status": "unhealthy",
                    "version": __version__,
                    "database": "disconnected",
                },
            )

    return app


app = create_app()

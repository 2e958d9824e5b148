"""
FastAPI application entry point
Main application factory and configuration
Reference: https://fastapi.tiangolo.com/tutorial/bigger-applications/
"""
import logging
from contextlib import asynccontextmanager

import httpx
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy import text

from app.api.v1.api import api_router
from app.core.config import settings
from app.core.database import create_engine, create_session_maker
from app.services.storage import StorageService
from app.services.upload_client import UploadClient

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Lifespan context manager for startup and shutdown events
    Builds the process-wide clients, keeps them on ``app.state`` and
    validates the database connection on startup
    Reference: https://fastapi.tiangolo.com/advanced/events/
    """
    engine = create_engine(settings.DATABASE_URL)
    http_client = httpx.AsyncClient(timeout=settings.UPLOAD_TIMEOUT_SECONDS)

    app.state.engine = engine
    app.state.session_maker = create_session_maker(engine)
    app.state.storage_service = StorageService.from_settings(settings)
    app.state.upload_client = UploadClient(
        http_client,
        settings.STORAGE_GATEWAY_URL,
        key_prefix=settings.UPLOAD_KEY_PREFIX,
    )

    # Startup: Test database connection
    try:
        async with engine.begin() as conn:
            await conn.execute(text("SELECT 1"))
        logger.info("Database connection successful")
    except Exception as e:
        logger.error(f"Database connection failed: {e}")
        logger.error(
            "Please check:\n"
            "1. DATABASE_URL is set correctly in the environment\n"
            "2. The database host accepts connections from this service\n"
            "3. Database is accessible and credentials are correct"
        )
        # Don't raise - let the app start so health checks can report it

    if not settings.AWS_S3_BUCKET_NAME:
        logger.warning("AWS_S3_BUCKET_NAME is not set; uploads will fail until it is configured")

    yield

    # Shutdown: close the upload client and dispose of database connections
    await http_client.aclose()
    await engine.dispose()
    logger.info("Database connections closed")


def create_app() -> FastAPI:
    """
    Build the FastAPI application.
    Reference: https://fastapi.tiangolo.com/reference/fastapi/
    """
    app = FastAPI(
        title=settings.PROJECT_NAME,
        version=settings.VERSION,
        description="Back office API for a storefront: catalog, customers, orders and image uploads",
        docs_url="/docs",  # Swagger UI documentation
        redoc_url="/redoc",  # ReDoc documentation
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Include API routers
    # All routes from api_router will be included in the main app
    app.include_router(api_router)

    @app.get("/")
    async def root():
        """
        Root endpoint
        Provides basic information about the API
        """
        return {
            "message": f"Welcome to {settings.PROJECT_NAME}",
            "version": settings.VERSION,
            "docs": "/docs",
        }

    return app


app = create_app()

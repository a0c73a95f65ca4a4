"""FastAPI application factory and entry point."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from notifier.config import settings
from notifier.database import close_db
from notifier.exceptions import create_exception_handlers
from notifier.services.crypto_client import close_crypto_client

log_level = logging.DEBUG if settings.is_development else getattr(logging, settings.app_log_level)
logging.basicConfig(
    level=log_level,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    force=True,
)
logger = logging.getLogger(__name__)
logger.info(f"Logging configured at level: {logging.getLevelName(log_level)}")


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Application lifespan events."""
        logger.info(f"Starting {settings.app_name} in {settings.app_env} mode")
        logger.info(f"Cryptography service at {settings.cryptography_service_url}")
        yield
        logger.info(f"Shutting down {settings.app_name}")
        await close_crypto_client()
        await close_db()

    app = FastAPI(
        title=settings.app_name,
        description="Transactional email service for account verification, password reset and MFA",
        version="1.0.0",
        docs_url="/api/docs" if settings.app_debug else None,
        redoc_url="/api/redoc" if settings.app_debug else None,
        openapi_url="/api/openapi.json" if settings.app_debug else None,
        lifespan=lifespan,
    )

    # Register exception handlers
    for exc_class, handler in create_exception_handlers().items():
        app.add_exception_handler(exc_class, handler)

    register_routers(app)

    return app


def register_routers(app: FastAPI):
    """Register the API router and the health check."""
    from notifier.api.v1 import api_router

    app.include_router(api_router, prefix="/api/v1")

    @app.get("/health", tags=["Health"])
    async def health_check():
        """Health check endpoint for load balancers and monitoring."""
        return {"status": "healthy", "app": settings.app_name, "env": settings.app_env}


# Create the app instance
app = create_app()


def main():
    """Entry point for running the application."""
    import uvicorn

    uvicorn.run(
        "notifier.main:app",
        host=settings.app_host,
        port=settings.app_port,
        reload=settings.is_development,
        log_level=settings.app_log_level.lower(),
    )


if __name__ == "__main__":
    main()

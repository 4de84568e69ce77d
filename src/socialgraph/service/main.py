"""
Main FastAPI application entry point for the socialgraph GraphQL service.
"""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from datetime import UTC, datetime
from typing import Any

from fastapi import FastAPI

from socialgraph.service.db import check_database_health, dispose_engine, init_db
from socialgraph.service.graphql import mount_graphql
from socialgraph.service.logging import get_logger, setup_logging
from socialgraph.service.settings import settings


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Manage application lifecycle events."""
    logger = get_logger(__name__)
    logger.info(
        "service.startup.begin",
        service=settings.app_name,
        version=settings.app_version,
        environment=settings.environment.value,
    )

    await init_db()
    logger.info("service.startup.complete")

    yield

    await dispose_engine()
    logger.info("service.shutdown.complete")


def create_application() -> FastAPI:
    """Create and configure the FastAPI application."""
    setup_logging()

    app = FastAPI(
        title="Socialgraph GraphQL Service",
        description="GraphQL API over users, posts, profiles and member types",
        version=settings.app_version,
        lifespan=lifespan,
        docs_url="/docs" if not settings.is_production else None,
        redoc_url=None,
    )

    mount_graphql(app, path=settings.graphql.path)

    # Health check endpoint (public - no auth required)
    @app.get("/health")
    async def health_check() -> dict[str, Any]:
        """Health check endpoint for monitoring."""
        database_ok = await check_database_health()
        return {
            "status": "healthy" if database_ok else "degraded",
            "version": settings.app_version,
            "environment": settings.environment.value,
            "database": database_ok,
            "timestamp": datetime.now(UTC).isoformat(),
        }

    return app


# Create application instance
app = create_application()


# For development server
if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "socialgraph.service.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.reload,
        log_level=settings.observability.log_level.value.lower(),
    )

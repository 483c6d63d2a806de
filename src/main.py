"""
Main FastAPI application entry point.

``create_app()`` builds the application: lifespan (schema creation for the
postgres backend, connection cleanup), trace middleware, RFC 9457
exception handlers and the v1 routers.

Identity is expected on ``request.state`` (``user_id``, ``org_id``), placed
there by an authenticator middleware added by the embedding service.
"""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from src.core.config import get_settings
from src.core.container import get_database, get_logger, get_redis
from src.presentation.routers.api.middleware.trace_middleware import TraceMiddleware
from src.presentation.routers.api.v1 import v1_router
from src.presentation.routers.api.v1.errors import register_exception_handlers


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan context manager.

    Startup creates the authorization tables when the postgres backend is
    configured. Shutdown closes the database engine and the Redis pool.
    """
    settings = get_settings()
    logger = get_logger()

    if settings.uses_postgres_backend:
        await get_database().create_all()

    logger.info(
        "application_started",
        environment=settings.environment.value,
        authz_backend=settings.authz_backend,
        permission_cache="redis" if settings.redis_url else "memory",
    )

    yield

    if settings.uses_postgres_backend:
        await get_database().close()
    redis = get_redis()
    if redis is not None:
        await redis.aclose()
    logger.info("application_stopped")


def create_app() -> FastAPI:
    """Build the FastAPI application."""
    settings = get_settings()
    app = FastAPI(
        title=settings.app_name,
        description="Relationship-based access control for orgs, apps and keys",
        version=settings.app_version,
        docs_url="/docs",
        redoc_url="/redoc",
        debug=settings.debug,
        lifespan=lifespan,
    )

    app.add_middleware(TraceMiddleware)
    register_exception_handlers(app)
    app.include_router(v1_router)

    @app.get("/health", tags=["System"])
    async def health() -> dict[str, str]:
        """Liveness plus, for the postgres backend, database reachability."""
        if settings.uses_postgres_backend and not await get_database().ping():
            return {"status": "degraded", "database": "unreachable"}
        return {"status": "healthy"}

    return app


app = create_app()

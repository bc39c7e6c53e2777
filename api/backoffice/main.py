"""
FastAPI application for the Backoffice.
This module sets up the API server with routes, middleware, and error handling.
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Response
from fastapi.middleware.cors import CORSMiddleware
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest
from prometheus_fastapi_instrumentator import Instrumentator
from prometheus_fastapi_instrumentator import metrics as instrumentator_metrics

from backoffice.bootstrap import build_services
from backoffice.core.config import Settings, get_settings
from backoffice.core.error_handlers import (
    access_denied_handler,
    base_exception_handler,
    unhandled_exception_handler,
)
from backoffice.core.exceptions import (
    AccessDeniedError,
    BaseAppException,
    HandlerNotFoundError,
)
from backoffice.middleware import (
    CacheControlMiddleware,
    SessionMiddleware,
    TrailingSlashMiddleware,
)
from backoffice.routes import auth, common, health

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    handlers=[logging.StreamHandler(sys.stdout)],
)

logger = logging.getLogger("backoffice.main")


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup
    services = app.state.services
    logger.info(
        f"Application startup ({services.settings.ENVIRONMENT}), "
        f"{len(services.registry)} handlers registered"
    )

    yield

    # Shutdown
    purged = services.session_store.purge_expired()
    logger.info(f"Application shutdown, {purged} expired sessions purged")


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """Build a fully wired application.

    Args:
        settings: Settings to use; defaults to the cached environment settings

    Returns:
        FastAPI application with services attached to ``app.state.services``
    """
    settings = settings or get_settings()

    app = FastAPI(
        title=settings.PROJECT_NAME,
        docs_url="/api/docs",
        lifespan=lifespan,
        redirect_slashes=False,
    )

    # Configure CORS
    # Toggle credentials off when wildcard is used (Starlette forbids wildcard + credentials)
    origins = settings.CORS_ORIGINS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_credentials=False if origins == ["*"] else True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Middleware added last runs first
    app.add_middleware(CacheControlMiddleware)
    app.add_middleware(SessionMiddleware)
    app.add_middleware(TrailingSlashMiddleware)

    if settings.ENABLE_HTTP_METRICS:
        instrumentator = Instrumentator(
            should_group_status_codes=False,
            should_ignore_untemplated=True,
            should_respect_env_var=False,
            excluded_handlers=["/health", "/metrics"],
        )
        instrumentator.add(instrumentator_metrics.default())
        instrumentator.instrument(app)
        logger.info("Prometheus HTTP instrumentation initialized")

    @app.get("/metrics", include_in_schema=False)
    async def metrics():
        """Prometheus metrics endpoint."""
        return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)

    # Include routers
    app.include_router(health.router, tags=["Health"])
    app.include_router(auth.router, tags=["Auth"])
    app.include_router(common.router, tags=["Common"])

    # Register specific application exceptions first
    app.add_exception_handler(AccessDeniedError, access_denied_handler)  # type: ignore[arg-type]
    app.add_exception_handler(HandlerNotFoundError, access_denied_handler)  # type: ignore[arg-type]
    app.add_exception_handler(BaseAppException, base_exception_handler)  # type: ignore[arg-type]
    # Then register generic exception handler as fallback
    app.add_exception_handler(Exception, unhandled_exception_handler)

    # Routes must be in place before services resolve the index URL
    app.state.services = build_services(app, settings)
    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()
    # Bind to 0.0.0.0 only in DEBUG mode (container/development)
    host = "0.0.0.0" if settings.DEBUG else "127.0.0.1"

    uvicorn.run(
        "backoffice.main:app",
        host=host,
        port=8000,
        reload=settings.DEBUG,
    )

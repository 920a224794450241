"""
FastAPI application initialization and configuration.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from core.config import settings
from database.engine import AsyncSessionLocal, close_db, init_db
from database.seed import run_seeders
from api.routes import health
from api.routes.v1 import (
    applications,
    auth,
    candidates,
    interview_questions,
    interviews,
    jobs,
    questions,
    uploads,
    users,
)

from core.middleware import (
    AuthenticationMiddleware,
    ErrorHandlingMiddleware,
    StructuredLoggingMiddleware,
    setup_error_handlers,
    setup_logging,
)

# Setup structured logging (do this first, before anything else)
setup_logging(
    log_level=settings.log_level,
    json_logs=settings.json_logs,
)

logger = logging.getLogger(__name__)

V1_ROUTERS = (
    auth.router,
    users.router,
    questions.router,
    candidates.router,
    interviews.router,
    interview_questions.router,
    jobs.router,
    applications.router,
    uploads.router,
)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Create tables and seed defaults on startup; release the engine on shutdown."""
    logger.info(f"Starting {settings.app_name} in {settings.app_env} environment")
    await init_db()

    async with AsyncSessionLocal() as db:
        await run_seeders(db, settings)

    yield

    logger.info(f"Shutting down {settings.app_name}")
    await close_db()


def create_app() -> FastAPI:
    app = FastAPI(
        title=settings.app_name,
        description="Interview management and applicant tracking API",
        version="0.1.0",
        docs_url="/docs" if settings.debug else None,
        redoc_url="/redoc" if settings.debug else None,
        lifespan=lifespan,
    )

    # Setup error handlers (before middleware)
    setup_error_handlers(app)

    # Middleware added last runs first, so this reads inner -> outer:
    # CORS, Authentication, StructuredLogging, ErrorHandling
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(
        AuthenticationMiddleware,
        jwt_secret=settings.jwt_secret_key,
        jwt_algorithm=settings.jwt_algorithm,
        api_prefix=settings.api_v1_prefix,
    )
    app.add_middleware(
        StructuredLoggingMiddleware,
        log_request_body=settings.log_request_body,
        max_body_size=settings.log_max_body_size,
    )
    app.add_middleware(
        ErrorHandlingMiddleware,
        debug=settings.debug,
    )

    # Health check routes
    app.include_router(health.router, tags=["Health"])

    # API v1 routes
    for router in V1_ROUTERS:
        app.include_router(router, prefix=settings.api_v1_prefix)

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "api.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.debug,
        log_level=settings.log_level.lower(),
    )

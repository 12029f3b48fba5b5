"""
Main Application Entry Point.

This module initializes the FastAPI application, configures middleware
(CORS, request tracing), registers the exception handlers and includes all
API routers. It serves as the root of the web server.
"""

import asyncio
from contextlib import asynccontextmanager, suppress

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from telloom import __version__
from telloom.core.database import init_db
from telloom.core.logging_config import get_logger, setup_logging
from telloom.core.monitoring import initialize_logfire
from telloom.core.url_cache import sweep_expired

from .api.v1 import (
    attachments,
    auth,
    connections,
    follow_requests,
    health,
    invitations,
    notifications,
    profiles,
    prompt_responses,
    prompts,
    roles,
    topics,
    videos,
    webhooks,
)
from .core import constant
from .core.config import settings
from .exception_handlers import setup_exception_handlers
from .middleware import LogfireMiddleware

# Initialize logging
setup_logging()
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Manage application lifespan events.

    Creates the schema on SQLite development databases; on PostgreSQL the
    schema is owned by Alembic migrations. A background task evicts expired
    signed URLs from the in-process cache while the server runs.
    """
    try:
        logger.info("Starting up Telloom Server...")
        await init_db()
        logger.info("Database initialized successfully")
    except Exception as e:
        logger.error(f"Database initialization failed: {e}", exc_info=True)

    sweeper = asyncio.create_task(sweep_expired())

    yield

    logger.info("Shutting down Telloom Server...")
    sweeper.cancel()
    with suppress(asyncio.CancelledError):
        await sweeper


app = FastAPI(
    title=constant.PROJECT_NAME,
    description="""
    Telloom Server API

    Backend for guided video storytelling: sharers answer prompts on video,
    invite listeners and executors, and manage who can watch their stories.
    """,
    version=__version__,
    openapi_url=f"{constant.API_V1_STR}/openapi.json",
    docs_url=f"{constant.API_V1_STR}/docs",
    redoc_url=f"{constant.API_V1_STR}/redoc",
    lifespan=lifespan,
)

cors = settings.cors
app.add_middleware(
    CORSMiddleware,
    allow_origins=cors.origins,
    allow_credentials=cors.allow_credentials,
    allow_methods=cors.allow_methods,
    allow_headers=cors.allow_headers,
)
app.add_middleware(LogfireMiddleware)

setup_exception_handlers(app)
initialize_logfire(app)


app.include_router(health.router, tags=["health"])
app.include_router(auth.router, prefix=f"{constant.API_V1_STR}/auth", tags=["auth"])
app.include_router(profiles.router, prefix=f"{constant.API_V1_STR}/profiles", tags=["profiles"])
app.include_router(roles.router, prefix=f"{constant.API_V1_STR}/roles", tags=["roles"])
app.include_router(invitations.router, prefix=f"{constant.API_V1_STR}/invitations", tags=["invitations"])
app.include_router(follow_requests.router, prefix=f"{constant.API_V1_STR}/follow-requests", tags=["follow-requests"])
app.include_router(connections.router, prefix=f"{constant.API_V1_STR}/connections", tags=["connections"])
app.include_router(notifications.router, prefix=f"{constant.API_V1_STR}/notifications", tags=["notifications"])
app.include_router(topics.router, prefix=f"{constant.API_V1_STR}/topics", tags=["topics"])
app.include_router(prompts.router, prefix=f"{constant.API_V1_STR}/prompts", tags=["prompts"])
app.include_router(prompt_responses.router, prefix=f"{constant.API_V1_STR}/prompt-responses", tags=["prompt-responses"])
app.include_router(attachments.router, prefix=f"{constant.API_V1_STR}/attachments", tags=["attachments"])
app.include_router(videos.router, prefix=f"{constant.API_V1_STR}/videos", tags=["videos"])
app.include_router(webhooks.router, prefix=f"{constant.API_V1_STR}/webhooks", tags=["webhooks"])

"""
Main FastAPI application.

This is the entry point for the API server.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from recruitment.core.config import settings
from recruitment.core.logging_config import configure_logging
from recruitment.errors import AppError, app_error_handler
from recruitment.routers import (
    candidatures,
    health,
    job_applications,
    languages,
    logical_tests,
    translations,
)
from recruitment.services.cache_service import close_cache

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Lifespan context manager for the FastAPI app.

    - On startup: configure logging.
    - On shutdown: release the cache connection pool.
    """
    configure_logging()
    logger.info("Starting %s...", settings.APP_NAME)

    yield

    await close_cache()
    logger.info("Shutting down %s...", settings.APP_NAME)


app = FastAPI(
    title=settings.APP_NAME,
    description="Recruitment evaluation API: candidatures, psychometric tests and translations",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_exception_handler(AppError, app_error_handler)

app.include_router(health.router, tags=["Health"])
app.include_router(job_applications.router)
app.include_router(candidatures.router)
app.include_router(logical_tests.router)
app.include_router(languages.router)
app.include_router(translations.router)

"""
Forum JSON API Application.

FastAPI application exposing a forum board's forums, topics and posts as
permission-filtered JSON.
"""

from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import ORJSONResponse
from loguru import logger

from forumapi.api.v1 import router as api_v1_router
from forumapi.core.config import settings
from forumapi.core.database import close_db, init_db
from forumapi.core.exceptions import BadFormat, ForumAPIError
from forumapi.core.logging import setup_logging


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager."""
    setup_logging(settings.log_level)
    logger.info("Starting Forum JSON API...")

    await init_db()
    logger.info("Database initialized")

    yield

    logger.info("Shutting down Forum JSON API...")
    await close_db()
    logger.info("Shutdown complete")


# Create FastAPI application
app = FastAPI(
    title=settings.app_name,
    version=settings.app_version,
    description="""
    Forum JSON API

    ## Features

    - **Board**: Forum tree filtered by the caller's permissions
    - **Forums**: Statistics, permissions, subforums and paginated topics
    - **Topics**: Statistics, permissions and posts
    - **Users**: Profile of the signed-in caller and username search

    Pass `secret` in the query string to act as a registered user.
    """,
    openapi_url=f"{settings.api_v1_prefix}/openapi.json",
    docs_url="/docs",
    redoc_url="/redoc",
    default_response_class=ORJSONResponse,
    lifespan=lifespan,
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(ForumAPIError)
async def forum_api_error_handler(request: Request, exc: ForumAPIError) -> ORJSONResponse:
    """Report known errors as {"error": message}."""
    return ORJSONResponse({"error": exc.message}, status_code=exc.status_code)


@app.exception_handler(RequestValidationError)
async def validation_error_handler(
    request: Request, exc: RequestValidationError
) -> ORJSONResponse:
    """Report malformed requests like any other bad input."""
    return ORJSONResponse(
        {"error": "The request could not be understood."},
        status_code=BadFormat.status_code,
    )


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception) -> ORJSONResponse:
    """Hide unexpected failures behind a generic message."""
    logger.exception(f"Unhandled error on {request.method} {request.url.path}")
    return ORJSONResponse({"error": "Something went wrong!"}, status_code=500)


# Include API router
app.include_router(api_v1_router, prefix=settings.api_v1_prefix)


@app.get("/health", tags=["System"])
async def health_check() -> dict:
    """Health check endpoint for monitoring."""
    return {
        "status": "healthy",
        "version": settings.app_version,
    }


@app.get("/", tags=["System"])
async def root() -> dict:
    """Root endpoint with API information."""
    return {
        "name": settings.app_name,
        "version": settings.app_version,
        "docs": "/docs",
        "api": settings.api_v1_prefix,
    }

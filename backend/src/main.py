"""
FastAPI application entry point for the Muay Thai events backend.

This module initializes the FastAPI application with:
- CORS middleware for the admin frontend
- Exception handlers for consistent error responses
- Event template and scheduled generation routers
- Logging configuration

Environment Variables:
    MUAYTHAI_DB_URL: Database URL (PostgreSQL; SQLite for local runs)
    MUAYTHAI_ENV: Environment (production/development, default: development)
    MUAYTHAI_LOG_LEVEL: Log level (DEBUG/INFO/WARNING/ERROR/CRITICAL, default: INFO)
    MUAYTHAI_CORS_ORIGINS: Comma-separated allowed origins (default: localhost:3000)
    CRON_SECRET: Bearer secret for /api/cron/generate-events
"""

import os
from contextlib import asynccontextmanager
from typing import Dict, Any

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware
from pydantic import ValidationError
from sqlalchemy.exc import SQLAlchemyError

from backend.src.config.settings import get_settings
from backend.src.utils.logging_config import init_logging, get_logger


APP_VERSION = "1.0.0"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan context manager.

    Startup logs the configuration state relevant to scheduled generation;
    there are no long-lived resources to release on shutdown.
    """
    logger = get_logger("api")
    logger.info("Starting Muay Thai events backend")

    settings = get_settings()
    if not settings.cron_configured:
        logger.warning("CRON_SECRET is not set; scheduled generation route is disabled")

    yield

    logger.info("Shutting down Muay Thai events backend")


def _cors_origins() -> list:
    raw = os.environ.get(
        "MUAYTHAI_CORS_ORIGINS",
        "http://localhost:3000,http://127.0.0.1:3000"
    )
    return [origin.strip() for origin in raw.split(",") if origin.strip()]


# Initialize logging before creating app
init_logging()

app = FastAPI(
    title="Muay Thai Events API",
    description="Admin backend for Muay Thai fight-night events. "
                "Manages recurring event templates and generates events "
                "with ticket inventory from them.",
    version=APP_VERSION,
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json",
)


app.add_middleware(
    CORSMiddleware,
    allow_origins=_cors_origins(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Exception handlers


@app.exception_handler(ValidationError)
async def validation_exception_handler(
    request: Request, exc: ValidationError
) -> JSONResponse:
    """
    Handle Pydantic validation errors raised outside request parsing.

    Returns:
        422 JSON response with validation error details
    """
    errors = exc.errors(include_url=False, include_context=False)
    logger = get_logger("api")
    logger.warning(
        "Validation error",
        extra={
            "path": request.url.path,
            "method": request.method,
            "errors": errors,
        }
    )

    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={
            "error": "Validation Error",
            "message": "Request validation failed",
            "details": errors,
        }
    )


@app.exception_handler(SQLAlchemyError)
async def database_exception_handler(
    request: Request, exc: SQLAlchemyError
) -> JSONResponse:
    """
    Handle SQLAlchemy database errors.

    Returns:
        500 JSON response with a generic database error message
    """
    logger = get_logger("db")
    logger.error(
        "Database error",
        extra={
            "path": request.url.path,
            "method": request.method,
            "error": str(exc),
        }
    )

    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "error": "Database Error",
            "message": "An error occurred while accessing the database. "
                      "Please try again later.",
        }
    )


@app.exception_handler(Exception)
async def generic_exception_handler(
    request: Request, exc: Exception
) -> JSONResponse:
    """
    Handle all other unhandled exceptions.

    Returns:
        500 JSON response with a generic error message
    """
    logger = get_logger("api")
    logger.error(
        "Unhandled exception",
        extra={
            "path": request.url.path,
            "method": request.method,
            "error_type": type(exc).__name__,
            "error": str(exc),
        },
        exc_info=True,
    )

    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "error": "Internal Server Error",
            "message": "An unexpected error occurred. Please try again later.",
        }
    )


# Health check endpoint


@app.get("/health", tags=["Health"])
async def health_check() -> Dict[str, Any]:
    """
    Health check endpoint.

    Returns:
        Health status and application information
    """
    return {
        "status": "healthy",
        "service": "muaythai-events-backend",
        "version": APP_VERSION,
    }


# API routers
from backend.src.api import cron, event_templates  # noqa: E402

app.include_router(event_templates.router, prefix="/api")
app.include_router(cron.router, prefix="/api")


@app.get("/", tags=["Root"])
async def root() -> Dict[str, str]:
    """
    Root endpoint with API information.

    Returns:
        API metadata and documentation links
    """
    return {
        "message": "Muay Thai Events API",
        "version": APP_VERSION,
        "docs": "/docs",
        "redoc": "/redoc",
        "openapi": "/openapi.json",
    }

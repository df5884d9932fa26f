"""API middleware package."""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from ..config import settings
from .error_handlers import setup_exception_handlers
from .logging_middleware import LoggingMiddleware


def setup_middleware(app: FastAPI) -> None:
    """Set up all middleware and exception handlers for the application."""
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["*"],
    )

    app.add_middleware(LoggingMiddleware)

    setup_exception_handlers(app)


__all__ = ["setup_middleware"]

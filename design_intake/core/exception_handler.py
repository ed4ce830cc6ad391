"""
Global exception handler for the Design Intake API.
Provides centralized error handling for all API exceptions.
"""
import logging
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from .exceptions import (
    BatchNotFoundException,
    CapacityExceededException,
    FileEntryNotFoundException,
    ValidationException,
    WebhookException
)

logger = logging.getLogger(__name__)


def register_exception_handlers(app: FastAPI) -> None:
    """Register all exception handlers with the FastAPI application."""

    @app.exception_handler(BatchNotFoundException)
    async def handle_batch_not_found(request: Request, exc: BatchNotFoundException):
        return JSONResponse(
            status_code=404,
            content={"error": "Not Found", "message": exc.message}
        )

    @app.exception_handler(FileEntryNotFoundException)
    async def handle_entry_not_found(request: Request, exc: FileEntryNotFoundException):
        return JSONResponse(
            status_code=404,
            content={"error": "Not Found", "message": exc.message}
        )

    @app.exception_handler(ValidationException)
    async def handle_validation_error(request: Request, exc: ValidationException):
        return JSONResponse(
            status_code=400,
            content={"error": "Validation Error", "message": exc.message}
        )

    @app.exception_handler(CapacityExceededException)
    async def handle_capacity_error(request: Request, exc: CapacityExceededException):
        return JSONResponse(
            status_code=409,
            content={"error": "Cannot add files", "message": exc.message}
        )

    @app.exception_handler(WebhookException)
    async def handle_webhook_error(request: Request, exc: WebhookException):
        return JSONResponse(
            status_code=502,
            content={"error": "Webhook Failed", "message": exc.message}
        )

    @app.exception_handler(Exception)
    async def handle_generic_error(request: Request, exc: Exception):
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return JSONResponse(
            status_code=500,
            content={"error": "Internal Server Error", "message": "An unexpected error occurred"}
        )

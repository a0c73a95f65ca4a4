"""Custom exception classes and global exception handlers."""

import logging
import traceback

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class EmailServiceException(Exception):
    """Base exception for all email-service errors."""

    code = "UNKNOWN"

    def __init__(self, message: str, status_code: int = 400):
        self.message = message
        self.status_code = status_code
        super().__init__(self.message)


class InternalException(EmailServiceException):
    """Storage, cryptography-service, template or transport failure."""

    code = "INTERNAL"

    def __init__(self, message: str = "Internal error"):
        super().__init__(message, 500)


class FailedPreconditionException(EmailServiceException):
    """The service is not configured for the requested operation."""

    code = "FAILED_PRECONDITION"

    def __init__(self, message: str = "Precondition failed"):
        super().__init__(message, 412)


class InvalidArgumentException(EmailServiceException):
    """The caller supplied a value outside the accepted set."""

    code = "INVALID_ARGUMENT"

    def __init__(self, message: str = "Invalid argument"):
        super().__init__(message, 400)


def create_exception_handlers():
    """Create the exception handlers registered on the application."""

    async def email_service_exception_handler(request: Request, exc: EmailServiceException):
        """Handle email-service exceptions."""
        log = logger.error if exc.status_code >= 500 else logger.warning
        log(f"{type(exc).__name__} on {request.method} {request.url.path}: {exc.message} (status={exc.status_code})")

        return JSONResponse(
            status_code=exc.status_code,
            content={
                "status": "error",
                "code": exc.code,
                "data": None,
                "message": exc.message,
                "errors": None,
            },
        )

    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        """Handle request body validation errors with field-level errors."""
        logger.warning(f"Validation failed on {request.method} {request.url.path}: {exc.errors()}")

        errors = [
            {
                "field": ".".join(str(part) for part in error["loc"] if part != "body"),
                "message": error["msg"],
            }
            for error in exc.errors()
        ]
        return JSONResponse(
            status_code=422,
            content={
                "status": "error",
                "code": "INVALID_ARGUMENT",
                "data": None,
                "message": "Validation failed",
                "errors": errors,
            },
        )

    async def generic_exception_handler(request: Request, exc: Exception):
        """Handle unexpected exceptions."""
        logger.error(f"Unhandled exception on {request.method} {request.url.path}")
        logger.error(f"Exception: {type(exc).__name__}: {exc}")
        tb_lines = traceback.format_exception(type(exc), exc, exc.__traceback__)
        logger.error("".join(tb_lines))

        return JSONResponse(
            status_code=500,
            content={
                "status": "error",
                "code": "INTERNAL",
                "data": None,
                "message": "An unexpected error occurred",
                "errors": None,
            },
        )

    return {
        EmailServiceException: email_service_exception_handler,
        RequestValidationError: validation_exception_handler,
        Exception: generic_exception_handler,
    }

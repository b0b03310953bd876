"""Global error handling middleware."""

import structlog
from fastapi import FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from redline.pipeline.exceptions import (
    ColumnExistsError,
    IngestionError,
    TableError,
)

logger = structlog.get_logger()


def _error_response(status_code: int, message: str, details=None, headers=None) -> JSONResponse:
    error = {"code": _status_to_code(status_code), "message": message}
    if details is not None:
        error["details"] = details
    return JSONResponse(status_code=status_code, content={"error": error}, headers=headers)


def _exception_response(status_code: int, error: dict) -> JSONResponse:
    """Wrap a domain exception's ``to_dict()`` in the error envelope."""
    if "details" in error:
        error = {**error, "details": jsonable_errors(error["details"])}
    return JSONResponse(status_code=status_code, content={"error": error})


def setup_exception_handlers(app: FastAPI) -> None:
    """Configure exception handlers for the FastAPI app."""

    @app.exception_handler(HTTPException)
    async def http_exception_handler(request: Request, exc: HTTPException):
        """Handle HTTP exceptions with standard error format."""
        return _error_response(
            exc.status_code, exc.detail, headers=getattr(exc, "headers", None)
        )

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        """Handle request body/query validation errors."""
        return _error_response(
            400, "Validation error", details=jsonable_errors(exc.errors())
        )

    @app.exception_handler(ValidationError)
    async def validation_exception_handler(request: Request, exc: ValidationError):
        """Handle Pydantic validation errors."""
        return _error_response(
            400,
            "Validation error",
            details=jsonable_errors(exc.errors(include_url=False)),
        )

    @app.exception_handler(IngestionError)
    async def ingestion_exception_handler(request: Request, exc: IngestionError):
        """Handle structurally invalid transcription payloads."""
        logger.info("transcription_rejected", error=str(exc))
        return _exception_response(400, exc.to_dict())

    @app.exception_handler(TableError)
    async def table_exception_handler(request: Request, exc: TableError):
        """Map table store errors to 404 / 409."""
        status_code = 409 if isinstance(exc, ColumnExistsError) else 404
        return _exception_response(status_code, exc.to_dict())

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception):
        """Handle unexpected exceptions."""
        logger.exception("unhandled_exception", error=str(exc), path=str(request.url.path))
        return _error_response(500, "An internal error occurred")


def jsonable_errors(errors) -> list[dict]:
    """Strip non-serializable context from pydantic error entries."""
    cleaned = []
    for error in errors or []:
        cleaned.append(
            {
                "loc": [str(part) for part in error.get("loc", ())],
                "msg": str(error.get("msg", "")),
                "type": str(error.get("type", "")),
            }
        )
    return cleaned


def _status_to_code(status_code: int) -> str:
    """Map HTTP status codes to error codes."""
    codes = {
        400: "invalid_request",
        404: "not_found",
        409: "conflict",
        422: "invalid_request",
        500: "internal_error",
        503: "service_unavailable",
    }
    return codes.get(status_code, "error")

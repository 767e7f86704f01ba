"""
Centralized error handlers for FastAPI.

Maps domain-specific errors to HTTP responses.
No stack traces or internal details are exposed to clients.
All error responses use the ErrorResponse schema.
"""

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from app.domain.marketplace.errors import (
    CapacityExceededError,
    ConcurrentUpdateError,
    DuplicateEntityError,
    EntityNotFoundError,
    InvalidInputError,
    MarketplaceDomainError,
    StorageError,
)

logger = logging.getLogger(__name__)

HTTP_400 = 400
HTTP_404 = 404
HTTP_409 = 409
HTTP_500 = 500


def _error_response(status_code: int, error: str, detail: str | None = None) -> JSONResponse:
    """Build a consistent JSON error response."""
    body: dict[str, str | None] = {"error": error}
    if detail:
        body["detail"] = detail
    return JSONResponse(status_code=status_code, content=body)


def _describe_validation(exc: RequestValidationError) -> str:
    parts = []
    for err in exc.errors():
        location = ".".join(str(p) for p in err.get("loc", ()) if p != "body")
        parts.append(f"{location}: {err.get('msg', 'invalid value')}")
    return "; ".join(parts)


def register_error_handlers(app: FastAPI) -> None:
    """Register all domain error handlers on the FastAPI application.

    Args:
        app: The FastAPI application instance.
    """

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation(
        _request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        """Handle malformed request bodies, paths and query strings."""
        detail = _describe_validation(exc)
        logger.warning("Request validation failed: %s", detail)
        return _error_response(HTTP_400, "Invalid request", detail)

    @app.exception_handler(InvalidInputError)
    async def handle_invalid_input(
        _request: Request, exc: InvalidInputError
    ) -> JSONResponse:
        """Handle field-level validation errors raised by use cases."""
        logger.warning("Invalid input: %s", exc.field)
        return _error_response(HTTP_400, exc.message)

    @app.exception_handler(CapacityExceededError)
    async def handle_capacity_exceeded(
        _request: Request, exc: CapacityExceededError
    ) -> JSONResponse:
        """Handle allocations that do not fit on their land."""
        logger.warning(
            "Capacity exceeded: requested=%s capacity=%s",
            exc.requested_total,
            exc.capacity,
        )
        return _error_response(HTTP_400, exc.message)

    @app.exception_handler(EntityNotFoundError)
    async def handle_not_found(
        _request: Request, exc: EntityNotFoundError
    ) -> JSONResponse:
        """Handle missing entity errors."""
        logger.warning("Not found: %s %s", exc.entity, exc.identifier)
        return _error_response(HTTP_404, exc.message)

    @app.exception_handler(DuplicateEntityError)
    async def handle_duplicate(
        _request: Request, exc: DuplicateEntityError
    ) -> JSONResponse:
        """Handle uniqueness violations."""
        logger.warning("Duplicate %s", exc.entity)
        return _error_response(HTTP_409, exc.message)

    @app.exception_handler(ConcurrentUpdateError)
    async def handle_concurrent_update(
        _request: Request, exc: ConcurrentUpdateError
    ) -> JSONResponse:
        """Handle writes based on a record that changed since it was read."""
        logger.warning("Concurrent update of %s", exc.entity)
        return _error_response(HTTP_409, exc.message)

    @app.exception_handler(StorageError)
    async def handle_storage(
        _request: Request, exc: StorageError
    ) -> JSONResponse:
        """Handle storage failures. The underlying reason stays in the logs."""
        logger.error("Storage error during %s: %s", exc.operation, exc.reason)
        return _error_response(HTTP_500, "Internal server error")

    @app.exception_handler(MarketplaceDomainError)
    async def handle_marketplace_domain(
        _request: Request, exc: MarketplaceDomainError
    ) -> JSONResponse:
        """Catch-all for unhandled marketplace domain errors."""
        logger.error("Unhandled marketplace domain error: %s", exc.message)
        return _error_response(HTTP_500, "Internal server error")

    @app.exception_handler(Exception)
    async def handle_unexpected(
        _request: Request, exc: Exception
    ) -> JSONResponse:
        """Catch-all for unexpected errors. Never exposes internals."""
        logger.exception("Unexpected error: %s", type(exc).__name__)
        return _error_response(HTTP_500, "Internal server error")

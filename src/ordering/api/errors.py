"""Map domain error kinds to HTTP responses.

Every error body has the shape ``{"success": false, "error": <message>}``.
Unexpected failures are logged in full and answered with a generic message.
"""

import structlog
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from protean.exceptions import ObjectNotFoundError, ValidationError
from protean.integrations.fastapi import register_exception_handlers

from ordering.errors import ConcurrentModification, PersistenceFailure, error_message

logger = structlog.get_logger(__name__)


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"success": False, "error": message})


async def _not_found(_request: Request, exc: ObjectNotFoundError) -> JSONResponse:
    return _error(404, error_message(exc))


async def _validation_failed(_request: Request, exc: ValidationError) -> JSONResponse:
    return _error(400, error_message(exc))


async def _request_invalid(_request: Request, exc: RequestValidationError) -> JSONResponse:
    messages = []
    for err in exc.errors():
        field = ".".join(str(part) for part in err.get("loc", ()) if part != "body")
        messages.append(f"{field}: {err.get('msg')}" if field else str(err.get("msg")))
    return _error(400, "; ".join(messages) or "Invalid request")


async def _conflict(_request: Request, exc: ConcurrentModification) -> JSONResponse:
    return _error(409, error_message(exc))


async def _server_error(request: Request, exc: PersistenceFailure) -> JSONResponse:
    logger.error("request_failed", path=request.url.path, error=type(exc).__name__)
    return _error(500, error_message(exc))


def register_error_handlers(app: FastAPI) -> None:
    """Install protean's default handlers, then the ordering-specific ones."""
    register_exception_handlers(app)
    app.add_exception_handler(ObjectNotFoundError, _not_found)
    app.add_exception_handler(ValidationError, _validation_failed)
    app.add_exception_handler(RequestValidationError, _request_invalid)
    app.add_exception_handler(ConcurrentModification, _conflict)
    app.add_exception_handler(PersistenceFailure, _server_error)

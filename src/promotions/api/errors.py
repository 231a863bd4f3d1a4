"""Exception handlers that render domain errors as API error envelopes.

Protean ``ValidationError`` becomes 400 and ``ObjectNotFoundError`` 404.
Anything unexpected is treated as a store failure and reported as 500.
"""

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from protean.exceptions import ObjectNotFoundError, ValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from promotions.api.schemas import ApiError
from promotions.utils.logging import get_logger

logger = get_logger(__name__)

_HTTP_ERROR_KINDS = {
    400: "validation_error",
    401: "unauthorized",
    403: "forbidden",
    404: "not_found",
    405: "method_not_allowed",
}


def _first_message(messages, default: str) -> str:
    if isinstance(messages, dict):
        for value in messages.values():
            if isinstance(value, list | tuple) and value:
                return str(value[0])
            if value:
                return str(value)
        return default
    if isinstance(messages, list | tuple) and messages:
        return str(messages[0])
    return str(messages) if messages else default


def _error_response(status_code: int, error: str, message: str, errors=None) -> JSONResponse:
    body = ApiError(
        status_code=status_code,
        error=error,
        message=message,
        errors=jsonable_encoder(errors) if isinstance(errors, dict) else {},
    )
    return JSONResponse(status_code=status_code, content=body.model_dump())


async def handle_validation_error(request: Request, exc: ValidationError) -> JSONResponse:
    return _error_response(400, "validation_error", _first_message(exc.messages, "Invalid request"), exc.messages)


async def handle_not_found(request: Request, exc: ObjectNotFoundError) -> JSONResponse:
    # ObjectNotFoundError carries its payload positionally, not as .messages
    payload = exc.args[0] if exc.args else {}
    return _error_response(404, "not_found", _first_message(payload, "Resource not found"), payload)


async def handle_request_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = {}
    for error in exc.errors():
        field = ".".join(str(part) for part in error["loc"] if part not in ("body", "query", "path"))
        errors.setdefault(field or "request", []).append(error["msg"])
    return _error_response(400, "validation_error", "All fields are required and must be well formed", errors)


async def handle_http_exception(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    error = _HTTP_ERROR_KINDS.get(exc.status_code, "http_error")
    return _error_response(exc.status_code, error, str(exc.detail))


async def handle_store_error(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error while serving request", path=request.url.path, error=str(exc))
    return _error_response(500, "internal_error", str(exc) or "Internal server error")


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ValidationError, handle_validation_error)
    app.add_exception_handler(ObjectNotFoundError, handle_not_found)
    app.add_exception_handler(RequestValidationError, handle_request_validation_error)
    app.add_exception_handler(StarletteHTTPException, handle_http_exception)
    app.add_exception_handler(Exception, handle_store_error)

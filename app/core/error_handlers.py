"""JSON error responses: every error body is {"message": ...}, validation errors add "errors"."""
import logging

from fastapi import FastAPI, HTTPException, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import ValidationError

logger = logging.getLogger(__name__)


def _serializable_validation_errors(errors: list) -> list:
    """Validation error dicts with ctx values stringified (ctx may hold the raised ValueError)."""
    out = []
    for e in errors:
        item = {"type": e.get("type"), "loc": e.get("loc"), "msg": e.get("msg")}
        if e.get("ctx"):
            item["ctx"] = {k: str(v) for k, v in e["ctx"].items()}
        out.append(item)
    return out


def _validation_response(errors: list) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={"message": "Validation error", "errors": errors},
    )


async def http_exception_handler(request: Request, exc: HTTPException):
    if exc.status_code >= 500:
        logger.error("HTTP %s on %s %s: %s", exc.status_code, request.method, request.url.path, exc.detail)
    return JSONResponse(status_code=exc.status_code, content={"message": exc.detail})


async def request_validation_exception_handler(request: Request, exc: RequestValidationError):
    errors = _serializable_validation_errors(exc.errors())
    logger.info("Validation error 422: method=%s path=%s errors=%s", request.method, request.url.path, errors)
    return _validation_response(errors)


async def pydantic_validation_exception_handler(request: Request, exc: ValidationError):
    # Raised by model_validate() inside a handler, i.e. a row that does not fit its response schema
    errors = _serializable_validation_errors(exc.errors())
    logger.warning("Response validation failed: method=%s path=%s errors=%s", request.method, request.url.path, errors)
    return _validation_response(errors)


async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error: method=%s path=%s", request.method, request.url.path)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"message": "Internal server error"},
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(HTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, request_validation_exception_handler)
    app.add_exception_handler(ValidationError, pydantic_validation_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)

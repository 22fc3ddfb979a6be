# Response envelope helpers and exception handlers
# Every response body is {success, message, data?} or {success, message, error?, errors?}

import logging
from typing import Any, Dict, List, Optional

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from config.app_config import is_development
from core.errors import AppError, ErrorCode, InternalError, Messages

logger = logging.getLogger(__name__)


def success_response(message: str, data: Any = None, status_code: int = status.HTTP_200_OK) -> JSONResponse:
    body = {"success": True, "message": message}
    if data is not None:
        body["data"] = data
    return JSONResponse(status_code=status_code, content=jsonable_encoder(body))


def error_response(
    message: str,
    status_code: int = status.HTTP_400_BAD_REQUEST,
    error: Optional[str] = None,
    errors: Optional[Dict[str, List[str]]] = None,
    headers: Optional[Dict[str, str]] = None,
) -> JSONResponse:
    body = {"success": False, "message": message}
    if error is not None:
        body["error"] = error
    if errors is not None:
        body["errors"] = errors
    return JSONResponse(status_code=status_code, content=jsonable_encoder(body), headers=headers)


def validation_errors_by_field(exc: RequestValidationError) -> Dict[str, List[str]]:
    """Collapse pydantic error entries into {field: [messages]}."""
    errors: Dict[str, List[str]] = {}
    for err in exc.errors():
        # Drop the leading "body"/"query"/"path" location segment
        loc = [str(p) for p in err.get("loc", ()) if p not in ("body", "query", "path")]
        field = ".".join(loc) or "body"
        message = err.get("msg", "Invalid value")
        if message.startswith("Value error, "):
            message = message[len("Value error, "):]
        errors.setdefault(field, []).append(message)
    return errors


async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc!r}")
    errors = exc.details if exc.code == ErrorCode.VALIDATION_ERROR else None
    headers = {"WWW-Authenticate": "Bearer"} if exc.status_code == status.HTTP_401_UNAUTHORIZED else None
    return error_response(exc.message, exc.status_code, error=exc.code, errors=errors, headers=headers)


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    return error_response(
        Messages.VALIDATION_ERROR,
        status.HTTP_400_BAD_REQUEST,
        errors=validation_errors_by_field(exc),
    )


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    message = exc.detail if isinstance(exc.detail, str) else Messages.INTERNAL_ERROR
    return error_response(message, exc.status_code, headers=getattr(exc, "headers", None))


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(f"Unhandled error on {request.method} {request.url.path}")
    internal = InternalError(Messages.INTERNAL_ERROR, details=str(exc) if is_development() else None)
    return error_response(internal.message, internal.status_code, error=internal.details or internal.code)


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(AppError, app_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)

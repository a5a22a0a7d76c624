# devcamper/core/errors.py
"""
Exception hierarchy and global exception handlers.

Routers and services raise ApiError subclasses; the handlers registered by
register_exception_handlers() turn every error into the failure envelope:

    {"success": false, "error": "<message>"}

Hierarchy:
    ApiError (base)
    ├── BadRequest    → 400 (missing/invalid input, duplicate key, validation)
    ├── Unauthorized  → 401 (missing/invalid credentials or token)
    ├── Forbidden     → 403 (role or ownership check failed)
    ├── NotFound      → 404 (resource id not resolvable)
    └── ServerError   → 500 (unexpected failure, e.g. email dispatch)
"""
import logging
import re

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from tortoise.exceptions import IntegrityError

logger = logging.getLogger("uvicorn.error")


class ApiError(Exception):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = "Server Error"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class BadRequest(ApiError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Bad Request"


class Unauthorized(ApiError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Not authorized to access this route"


class Forbidden(ApiError):
    status_code = status.HTTP_403_FORBIDDEN
    default_message = "Forbidden"


class NotFound(ApiError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Resource not found"


class ServerError(ApiError):
    pass


def error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"success": False, "error": message})


def _duplicate_fields(exc: Exception) -> str:
    """
    Best-effort extraction of the offending column(s) from a driver message.

    sqlite:   UNIQUE constraint failed: bootcamps.name
    postgres: ... Key (name)=(Devworks) already exists.
    """
    text = str(exc)
    m = re.search(r"Key \(([^)]+)\)=", text)
    if m:
        return m.group(1)
    cols = re.findall(r"\w+\.(\w+)", text.split("failed:", 1)[-1])
    if cols:
        return ", ".join(c.removesuffix("_id") for c in cols)
    return "unique"


def _validation_message(exc: RequestValidationError) -> str:
    parts = []
    for err in exc.errors():
        loc = [str(p) for p in err.get("loc", ()) if p not in ("body", "query", "path")]
        field = ".".join(loc)
        msg = err.get("msg", "Invalid value")
        parts.append(f"{field}: {msg}" if field else msg)
    return ", ".join(parts) or "Invalid request"


def register_exception_handlers(app: FastAPI) -> None:
    """Install the handlers that produce the failure envelope."""

    @app.exception_handler(ApiError)
    async def handle_api_error(request: Request, exc: ApiError):
        if exc.status_code >= 500:
            logger.error("[%s %s] %s", request.method, request.url.path, exc.message)
        return error_response(exc.status_code, exc.message)

    @app.exception_handler(RequestValidationError)
    async def handle_validation_error(request: Request, exc: RequestValidationError):
        return error_response(status.HTTP_400_BAD_REQUEST, _validation_message(exc))

    @app.exception_handler(IntegrityError)
    async def handle_integrity_error(request: Request, exc: IntegrityError):
        logger.warning("[%s %s] integrity error: %s", request.method, request.url.path, exc)
        field = _duplicate_fields(exc)
        return error_response(
            status.HTTP_400_BAD_REQUEST,
            f"Duplicate value entered for {field} field, please choose another value",
        )

    @app.exception_handler(StarletteHTTPException)
    async def handle_http_exception(request: Request, exc: StarletteHTTPException):
        message = exc.detail if isinstance(exc.detail, str) else "Request failed"
        return error_response(exc.status_code, message)

    @app.exception_handler(Exception)
    async def handle_unexpected(request: Request, exc: Exception):
        logger.exception("[%s %s] unhandled error", request.method, request.url.path)
        return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, "Server Error")

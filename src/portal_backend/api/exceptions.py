import logging
from typing import Any, Dict, Optional
from fastapi import FastAPI, HTTPException, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse, RedirectResponse
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from portal_backend.repositories.base import NotFoundError, RepositoryError, raw_message

logger = logging.getLogger(__name__)


class NotFoundException(HTTPException):
    def __init__(self, detail: Any = None, headers: Optional[Dict[str, str]] = None):
        self.headers = headers
        self.status_code = status.HTTP_404_NOT_FOUND
        self.detail = detail or "Not found"

class ForbiddenException(HTTPException):
    def __init__(self, detail: Any = None, headers: Optional[Dict[str, str]] = None):
        self.headers = headers
        self.status_code = status.HTTP_403_FORBIDDEN
        self.detail = detail or "Forbidden"

class BadRequestException(HTTPException):
    def __init__(self, detail: Any = None, headers: Optional[Dict[str, str]] = None):
        self.headers = headers
        self.status_code = status.HTTP_400_BAD_REQUEST
        self.detail = detail or "Bad request"

class UnauthorizedException(HTTPException):
    def __init__(self, detail: Any = None, headers: Optional[Dict[str, str]] = None):
        self.headers = headers
        self.status_code = status.HTTP_401_UNAUTHORIZED
        self.detail = detail or "Unauthorized"

class InternalServerException(HTTPException):
    def __init__(self, detail: Any = None, headers: Optional[Dict[str, str]] = None):
        self.headers = headers
        self.status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
        self.detail = detail or "Internal server error"

class RedirectException(Exception):
    """Raised by page guards to reroute the caller instead of failing."""

    def __init__(self, location: str):
        super().__init__(location)
        self.location = location


def response_to_http_exception(status_code: int, detail: Any) -> Optional[HTTPException]:
    if status_code == status.HTTP_404_NOT_FOUND:
        return NotFoundException(detail=detail)
    elif status_code == status.HTTP_403_FORBIDDEN:
        return ForbiddenException(detail=detail)
    elif status_code == status.HTTP_400_BAD_REQUEST:
        return BadRequestException(detail=detail)
    elif status_code == status.HTTP_401_UNAUTHORIZED:
        return UnauthorizedException(detail=detail)
    elif status_code == status.HTTP_500_INTERNAL_SERVER_ERROR:
        return InternalServerException(detail=detail)
    else:
        return None


async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.detail},
        headers=getattr(exc, "headers", None)
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    fields = [
        {"loc": [str(part) for part in error.get("loc", ())], "msg": error.get("msg")}
        for error in exc.errors()
    ]
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"error": "Invalid payload", "fields": fields}
    )


async def backend_exception_handler(request: Request, exc: Exception):
    message = raw_message(exc)
    logger.warning(f"Backend error on {request.method} {request.url.path}: {message}")
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"error": message}
    )


async def not_found_exception_handler(request: Request, exc: NotFoundError):
    return JSONResponse(
        status_code=status.HTTP_404_NOT_FOUND,
        content={"error": str(exc)}
    )


async def redirect_exception_handler(request: Request, exc: RedirectException):
    return RedirectResponse(exc.location, status_code=status.HTTP_307_TEMPORARY_REDIRECT)


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(NotFoundError, not_found_exception_handler)
    app.add_exception_handler(RepositoryError, backend_exception_handler)
    app.add_exception_handler(SQLAlchemyError, backend_exception_handler)
    app.add_exception_handler(RedirectException, redirect_exception_handler)

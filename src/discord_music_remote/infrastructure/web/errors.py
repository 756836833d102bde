"""Maps domain errors onto HTTP responses shaped ``{"error": message}``."""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from discord_music_remote.domain.shared.exceptions import (
    ChannelNotFoundError,
    ChannelNotJoinableError,
    DeliveryFailureError,
    DomainError,
    EngineFailureError,
    InvalidSessionError,
    NoActiveQueueError,
    NotConfiguredError,
)
from discord_music_remote.domain.shared.messages import ErrorMessages, LogTemplates

logger = logging.getLogger(__name__)

# First match wins; anything unlisted is a caller error.
_STATUS_BY_ERROR: tuple[tuple[type[DomainError], int], ...] = (
    (NotConfiguredError, 500),
    (ChannelNotFoundError, 404),
    (NoActiveQueueError, 404),
    (ChannelNotJoinableError, 403),
    (InvalidSessionError, 401),
    (EngineFailureError, 500),
    (DeliveryFailureError, 500),
)


def status_for(exc: DomainError) -> int:
    for error_type, status in _STATUS_BY_ERROR:
        if isinstance(exc, error_type):
            return status
    return 400


def error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


async def domain_error_handler(request: Request, exc: DomainError) -> JSONResponse:
    status_code = status_for(exc)
    if status_code >= 500:
        logger.error(LogTemplates.API_REQUEST_FAILED, request.method, request.url.path, exc.message)
    else:
        logger.info(LogTemplates.API_REQUEST_FAILED, request.method, request.url.path, exc.message)
    return error_response(status_code, exc.message)


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    logger.info(LogTemplates.API_REQUEST_FAILED, request.method, request.url.path, exc.errors())
    return error_response(400, ErrorMessages.INVALID_REQUEST)


async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return error_response(exc.status_code, str(exc.detail))


async def unexpected_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(LogTemplates.API_UNEXPECTED_ERROR, request.method, request.url.path)
    return error_response(500, ErrorMessages.INTERNAL_ERROR)


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(DomainError, domain_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_error_handler)
    app.add_exception_handler(Exception, unexpected_error_handler)

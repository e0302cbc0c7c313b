"""
Global exception handlers.

Every error response has the same shape: {"error": "<message>"}.
"""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from .db import DatabaseError

logger = logging.getLogger(__name__)

INVALID_PAYLOAD_MESSAGE = "invalid request payload"


def error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("http_error status=%s path=%s detail=%s", exc.status_code, request.url.path, exc.detail)
    else:
        logger.info("http_error status=%s path=%s detail=%s", exc.status_code, request.url.path, exc.detail)
    response = error_response(exc.status_code, str(exc.detail))
    if exc.headers:
        response.headers.update(exc.headers)
    return response


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    # Malformed JSON and wrongly typed fields both land here.
    logger.warning("invalid_payload path=%s errors=%s", request.url.path, exc.errors())
    return error_response(status.HTTP_400_BAD_REQUEST, INVALID_PAYLOAD_MESSAGE)


async def database_error_handler(request: Request, exc: DatabaseError) -> JSONResponse:
    # The driver message is returned verbatim.
    logger.error("data_access_failed path=%s error=%s", request.url.path, exc)
    return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, str(exc))


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(StarletteHTTPException, http_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(DatabaseError, database_error_handler)

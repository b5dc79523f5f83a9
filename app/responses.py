"""
Response and error envelopes shared by every route.

success: {statusCode, data, message, success: true}
failure: {statusCode, message, success: false, errors: []}
"""
from __future__ import annotations

import logging
from typing import Any, List

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from core.errors import AppError

log = logging.getLogger("api")


def api_response(status_code: int, data: Any = None, message: str = "Success") -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=jsonable_encoder(
            {"statusCode": status_code, "data": data, "message": message, "success": status_code < 400}
        ),
    )


def error_response(status_code: int, message: str, errors: List | None = None) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=jsonable_encoder(
            {"statusCode": status_code, "message": message, "success": False, "errors": errors or []}
        ),
    )


def register_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(AppError)
    async def _app_error(request: Request, exc: AppError):
        if exc.status_code >= 500:
            log.error("%s %s failed: %s", request.method, request.url.path, exc.message)
        return error_response(exc.status_code, exc.message, exc.errors)

    @app.exception_handler(RequestValidationError)
    async def _invalid_request(request: Request, exc: RequestValidationError):
        errors = [
            {"field": ".".join(str(p) for p in e.get("loc", ())[1:]), "message": e.get("msg", "")}
            for e in exc.errors()
        ]
        return error_response(400, "Invalid request", errors)

    @app.exception_handler(StarletteHTTPException)
    async def _http_error(request: Request, exc: StarletteHTTPException):
        return error_response(exc.status_code, str(exc.detail))

    @app.exception_handler(Exception)
    async def _unexpected(request: Request, exc: Exception):
        # Never leak storage/driver detail to the client.
        log.exception("unhandled error on %s %s", request.method, request.url.path)
        return error_response(500, "Something went wrong")


__all__ = ["api_response", "error_response", "register_error_handlers"]

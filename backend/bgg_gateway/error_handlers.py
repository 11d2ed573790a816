from __future__ import annotations

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from .errors import BggApiError, ErrorKind


logger = logging.getLogger(__name__)


def register_error_handlers(app: FastAPI) -> None:
    """도메인 오류, 요청 바디 검증 오류, 그 외 모든 예외에 대한 핸들러를 등록한다."""

    @app.exception_handler(BggApiError)
    async def bgg_api_error_handler(request: Request, exc: BggApiError) -> JSONResponse:
        log = logger.error if exc.status_code >= 500 else logger.warning
        log(
            "%s on %s: %s",
            exc.kind.value,
            request.url.path,
            exc.message,
            extra={"error_code": exc.kind.value, "path": request.url.path},
        )
        return JSONResponse(status_code=exc.status_code, content=exc.to_response())

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        logger.warning("validation error on %s: %s", request.url.path, exc.errors())
        kind = ErrorKind.invalid_parameters
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={
                "error": {
                    "message": "Invalid request body",
                    "type": kind.error_type,
                    "code": kind.value,
                    "details": [
                        {
                            "field": ".".join(str(loc) for loc in e["loc"]),
                            "message": e["msg"],
                            "type": e["type"],
                        }
                        for e in exc.errors()
                    ],
                }
            },
        )

    @app.exception_handler(Exception)
    async def generic_error_handler(request: Request, exc: Exception) -> JSONResponse:
        # Internal details stay in the log
        logger.error("unhandled exception on %s: %s", request.url.path, exc, exc_info=True)
        kind = ErrorKind.internal
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={
                "error": {
                    "message": "An unexpected error occurred",
                    "type": kind.error_type,
                    "code": kind.value,
                }
            },
        )

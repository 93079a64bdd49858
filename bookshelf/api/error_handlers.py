"""
Maps ServiceError to HTTP responses.

Status and body come from the error itself (http_status() / to_payload()),
so this handler only decides how loudly to log.
"""

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from bookshelf.core.errors import ErrorKind, ServiceError

logger = logging.getLogger(__name__)


async def service_error_handler(request: Request, exc: ServiceError) -> JSONResponse:
    if exc.kind is ErrorKind.EXECUTION:
        # full detail was logged where it was raised; the client only sees a generic message
        logger.error(
            "api.service_error",
            extra={"kind": exc.kind.value, "method": request.method, "path": request.url.path},
        )
    else:
        logger.info(
            "api.service_error",
            extra={
                "kind": exc.kind.value,
                "method": request.method,
                "path": request.url.path,
                "detail": str(exc),
            },
        )
    return JSONResponse(status_code=exc.http_status(), content=exc.to_payload())


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ServiceError, service_error_handler)

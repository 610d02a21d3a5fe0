"""Mapping of application errors to HTTP responses."""

from fastapi import FastAPI, Request, Response
from fastapi.responses import JSONResponse
from loguru import logger

from user_api.core.errors import NoContentError, ServiceError, UnauthorizedError
from user_api.schemas.common import ErrorResponse


async def service_error_handler(request: Request, exc: ServiceError) -> Response:
    """Render a ServiceError using its status code.

    NoContent becomes a bodiless 204; everything else carries an
    ``ErrorResponse`` body.
    """
    logger.info(f"{request.method} {request.url.path} -> {exc.code} {exc.message}")
    if isinstance(exc, NoContentError):
        return Response(status_code=exc.status_code)

    headers = {"WWW-Authenticate": "Bearer"} if isinstance(exc, UnauthorizedError) else None
    body = ErrorResponse(
        detail=exc.message,
        code=exc.code,
        errors=[exc.details] if exc.details else None,
    )
    return JSONResponse(
        status_code=exc.status_code,
        content=body.model_dump(exclude_none=True),
        headers=headers,
    )


async def value_error_handler(request: Request, exc: ValueError) -> JSONResponse:
    return JSONResponse(
        status_code=400,
        content={"detail": str(exc)},
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Attach the error handlers to ``app``."""
    app.add_exception_handler(ServiceError, service_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(ValueError, value_error_handler)  # type: ignore[arg-type]

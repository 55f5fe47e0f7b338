from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from kassa.core.exceptions import KassaError
from kassa.core.logging import get_logger
from kassa.schemas.response import ErrorResponse
from kassa.core.config import settings

logger = get_logger(__name__)


def _first_validation_message(errors: list) -> str:
    """
    Picks the message of the first validation error.
    Custom validators raise ValueError with a user-facing sentence;
    pydantic prefixes those with "Value error, ".
    """
    if not errors:
        return "Validasi gagal."
    message = str(errors[0].get("msg", "Validasi gagal."))
    return message.removeprefix("Value error, ")


def add_exception_handlers(app: FastAPI):
    """
    Registers exception handlers with the FastAPI app.
    """
    @app.exception_handler(KassaError)
    async def kassa_exception_handler(request: Request, exc: KassaError):
        if exc.status_code >= 500:
            logger.error(f"{exc.code}: {exc.message}", extra={"url": str(request.url)})
        return JSONResponse(
            status_code=exc.status_code,
            content=jsonable_encoder(ErrorResponse(
                error=exc.message,
                code=exc.code,
                details=exc.details
            )),
            headers={"WWW-Authenticate": "Bearer"} if exc.status_code == 401 else None
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        """
        Handles standard HTTP exceptions (404, 405, etc.)
        """
        return JSONResponse(
            status_code=exc.status_code,
            content=ErrorResponse(
                error=str(exc.detail),
                code="HTTP_ERROR",
                details=None
            ).model_dump()
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        """
        Handles Pydantic validation errors.
        The first error message becomes the user-facing `error`.
        """
        errors = [
            {"loc": list(err.get("loc", ())), "msg": err.get("msg"), "type": err.get("type")}
            for err in exc.errors()
        ]
        return JSONResponse(
            status_code=422,
            content=jsonable_encoder(ErrorResponse(
                error=_first_validation_message(errors),
                code="VALIDATION_ERROR",
                details=errors
            ))
        )

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        """
        Catch-all for unhandled exceptions.
        """
        logger.error(
            f"Unhandled exception: {str(exc)}",
            extra={
                "method": request.method,
                "url": str(request.url),
                "client": request.client.host if request.client else "unknown"
            },
            exc_info=True
        )

        message = "Terjadi kesalahan internal. Silakan coba lagi nanti." if settings.is_production else str(exc)

        return JSONResponse(
            status_code=500,
            content=ErrorResponse(
                error=message,
                code="INTERNAL_ERROR",
                details=None
            ).model_dump()
        )

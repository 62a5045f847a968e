# recipe_catalog/errors.py
import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)


class ServiceError(Exception):
    status_code = 500
    error = "Internal Server Error"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class BadRequestError(ServiceError):
    status_code = 400
    error = "Bad Request"


class NotFoundError(ServiceError):
    status_code = 404
    error = "Not Found"


class ConflictError(ServiceError):
    status_code = 409
    error = "Conflict"


class PayloadTooLargeError(ServiceError):
    status_code = 413
    error = "Payload Too Large"


class UnprocessableEntityError(ServiceError):
    status_code = 422
    error = "Unprocessable Entity"


_STATUS_LABELS = {
    400: "Bad Request",
    404: "Not Found",
    405: "Method Not Allowed",
    409: "Conflict",
    413: "Payload Too Large",
    422: "Unprocessable Entity",
}


def error_body(status_code: int, message, error: str | None = None) -> dict:
    return {
        "statusCode": status_code,
        "message": message,
        "error": error or _STATUS_LABELS.get(status_code, "Error"),
    }


def _format_validation_error(err: dict) -> str:
    loc = ".".join(str(part) for part in err.get("loc", ()))
    return f"{loc}: {err.get('msg')}"


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(ServiceError)
    async def _service_error(request: Request, exc: ServiceError):
        return JSONResponse(status_code=exc.status_code, content=error_body(exc.status_code, exc.message, exc.error))

    @app.exception_handler(RequestValidationError)
    async def _validation_error(request: Request, exc: RequestValidationError):
        messages = [_format_validation_error(e) for e in exc.errors()]
        logger.warning("Rejected %s %s: %s", request.method, request.url.path, messages)
        return JSONResponse(status_code=400, content=error_body(400, messages))

    @app.exception_handler(StarletteHTTPException)
    async def _http_error(request: Request, exc: StarletteHTTPException):
        return JSONResponse(
            status_code=exc.status_code,
            content=error_body(exc.status_code, exc.detail),
            headers=getattr(exc, "headers", None),
        )

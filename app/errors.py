# app/errors.py
"""
Error kinds for the spots API.

Domain code raises ApiError with one of the kinds below; the handlers
registered on the app render every failure as {"message", "errors"?}.
"""
import enum
import logging
from typing import Any, Dict, Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)


class ErrorKind(str, enum.Enum):
    NOT_FOUND = "not_found"
    UNAUTHORIZED = "unauthorized"
    FORBIDDEN = "forbidden"
    BOOKING_CONFLICT = "booking_conflict"
    INVALID_INPUT = "invalid_input"
    INTERNAL_ERROR = "internal_error"

    @property
    def status_code(self) -> int:
        return _STATUS_CODES[self]


# Conflicts are reported as 403, not 409
_STATUS_CODES = {
    ErrorKind.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorKind.UNAUTHORIZED: status.HTTP_401_UNAUTHORIZED,
    ErrorKind.FORBIDDEN: status.HTTP_403_FORBIDDEN,
    ErrorKind.BOOKING_CONFLICT: status.HTTP_403_FORBIDDEN,
    ErrorKind.INVALID_INPUT: status.HTTP_400_BAD_REQUEST,
    ErrorKind.INTERNAL_ERROR: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


class ApiError(Exception):
    def __init__(
        self,
        kind: ErrorKind,
        message: str,
        errors: Optional[Dict[str, str]] = None,
    ) -> None:
        self.kind = kind
        self.message = message
        self.errors = errors
        super().__init__(message)

    @property
    def status_code(self) -> int:
        return self.kind.status_code

    def to_body(self) -> Dict[str, Any]:
        body: Dict[str, Any] = {"message": self.message}
        if self.errors:
            body["errors"] = self.errors
        return body

    @classmethod
    def not_found(cls, message: str) -> "ApiError":
        return cls(ErrorKind.NOT_FOUND, message)

    @classmethod
    def spot_not_found(cls) -> "ApiError":
        return cls.not_found("Spot couldn't be found")

    @classmethod
    def unauthorized(cls, message: str = "Authentication required") -> "ApiError":
        return cls(ErrorKind.UNAUTHORIZED, message)

    @classmethod
    def forbidden(cls, message: str = "Forbidden", errors=None) -> "ApiError":
        return cls(ErrorKind.FORBIDDEN, message, errors)

    @classmethod
    def booking_conflict(cls, errors: Dict[str, str]) -> "ApiError":
        return cls(
            ErrorKind.BOOKING_CONFLICT,
            "Sorry, this spot is already booked for the specified dates",
            errors,
        )

    @classmethod
    def invalid_input(cls, errors: Dict[str, str], message: str = "Validation error") -> "ApiError":
        return cls(ErrorKind.INVALID_INPUT, message, errors)


def _field_name(loc) -> str:
    # ("body", "startDate") -> "startDate"; ("query", "page") -> "page"
    parts = [str(part) for part in loc if part not in ("body", "query", "path")]
    return ".".join(parts) or "body"


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(ApiError)
    async def api_error_handler(request: Request, exc: ApiError) -> JSONResponse:
        return JSONResponse(status_code=exc.status_code, content=exc.to_body())

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        content = exc.detail if isinstance(exc.detail, dict) else {"message": str(exc.detail)}
        return JSONResponse(status_code=exc.status_code, content=content, headers=exc.headers)

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        errors: Dict[str, str] = {}
        for error in exc.errors():
            errors.setdefault(_field_name(error.get("loc", ())), error.get("msg", "Invalid value"))
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"message": "Validation error", "errors": errors},
        )

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"message": "Internal server error"},
        )

# recruitment_api/errors.py
import logging
from typing import Any, Dict, List, Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger("recruitment_api.errors")


class AppError(Exception):
    """Base for every failure that is reported to the client."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    message = "Server error"

    def __init__(self, message: Optional[str] = None):
        if message is not None:
            self.message = message
        super().__init__(self.message)

    def to_body(self) -> Dict[str, Any]:
        return {"success": False, "error": self.message}


class ValidationError(AppError):
    status_code = status.HTTP_400_BAD_REQUEST
    message = "Validation failed"

    def __init__(self, errors: List[Dict[str, str]]):
        self.errors = errors
        super().__init__(errors[0]["msg"] if errors else None)

    def to_body(self) -> Dict[str, Any]:
        return {"success": False, "errors": self.errors}


class DuplicateEmailError(AppError):
    status_code = status.HTTP_400_BAD_REQUEST
    message = "User already exists"


class InvalidCredentialsError(AppError):
    status_code = status.HTTP_401_UNAUTHORIZED
    message = "Invalid credentials"


class Unauthorized(AppError):
    status_code = status.HTTP_401_UNAUTHORIZED
    message = "Not authorized to access this route"


class InvalidTokenError(Unauthorized):
    """Malformed, badly signed or expired token. Indistinguishable to the client."""


class NotFoundError(AppError):
    status_code = status.HTTP_404_NOT_FOUND
    message = "User not found"


class ServerError(AppError):
    pass


def field_error(param: str, msg: str) -> Dict[str, str]:
    return {"msg": msg, "param": param, "location": "body"}


def errors_from_pydantic(raw_errors) -> List[Dict[str, str]]:
    """Convert pydantic error dicts into [{msg, param, location}] entries."""
    errors = []
    for err in raw_errors:
        loc = [str(part) for part in err.get("loc", ()) if part != "body"]
        ctx = err.get("ctx") or {}
        if err.get("type") == "value_error" and "error" in ctx:
            msg = str(ctx["error"])
        else:
            msg = err.get("msg", "Invalid value")
            if msg.startswith("Value error, "):
                msg = msg[len("Value error, "):]
        errors.append(field_error(".".join(loc), msg))
    return errors


async def app_error_handler(request: Request, exc: AppError):
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.__cause__ or exc}")
    return JSONResponse(status_code=exc.status_code, content=exc.to_body())


async def request_validation_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"success": False, "errors": errors_from_pydantic(exc.errors())},
    )


async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content={"success": False, "error": str(exc.detail)},
        headers=getattr(exc, "headers", None),
    )


async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception(f"Unhandled error in {request.method} {request.url.path}")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"success": False, "error": ServerError.message},
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(AppError, app_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)

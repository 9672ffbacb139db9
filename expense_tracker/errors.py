"""Error taxonomy shared by the stores and the HTTP layer.

Stores raise these; ``register_exception_handlers`` maps them to JSON
responses of the form ``{"detail": "<message>"}``.
"""
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from loguru import logger
from sqlalchemy.exc import SQLAlchemyError


class AppError(Exception):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = "Internal Server Error"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(AppError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Invalid request"


class AuthError(AppError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Not authenticated"


class NotFoundError(AppError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Not found"


class ConflictError(AppError):
    status_code = status.HTTP_409_CONFLICT
    default_message = "Already exists"


class InternalError(AppError):
    pass


class SessionError(InternalError):
    default_message = "Could not start session"


# =========================
# Handlers
# =========================
async def app_error_handler(request: Request, exc: AppError):
    if isinstance(exc, InternalError):
        logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
        # Client never sees internal detail
        return JSONResponse(
            status_code=exc.status_code,
            content={"detail": InternalError.default_message},
        )
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})


async def request_validation_handler(request: Request, exc: RequestValidationError):
    messages = []
    for err in exc.errors():
        field = ".".join(str(p) for p in err.get("loc", ()) if p not in ("body", "query", "path"))
        messages.append(f"{field}: {err.get('msg')}" if field else err.get("msg"))
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"detail": "; ".join(messages) or ValidationError.default_message},
    )


async def database_error_handler(request: Request, exc: SQLAlchemyError):
    logger.opt(exception=exc).error(f"Database error on {request.method} {request.url.path}")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": InternalError.default_message},
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(AppError, app_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(SQLAlchemyError, database_error_handler)

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, HTTPException, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from .config import settings
from .database import dispose_engine
from .errors import (
    AppError,
    AuthError,
    InternalError,
    PermissionError,
    ValidationError,
    error_payload,
    resolve_error_code,
)
from .routers import auth


def _resolve_log_level(value: str) -> int:
    level = logging.getLevelName(value)
    return level if isinstance(level, int) else logging.INFO


log_level = _resolve_log_level(settings.log_level)

if not logging.getLogger().handlers:
    logging.basicConfig(
        level=log_level,
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )
logger = logging.getLogger("timetrack")
logger.setLevel(log_level)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Starting application")
    if settings.debug:
        logger.warning("DEBUG=true, do not use in production")
    if not settings.admin_users:
        logger.info("ADMIN_USERS is empty; no subject is promoted to admin")

    yield

    await dispose_engine()


app = FastAPI(title=settings.app_name, debug=settings.debug, lifespan=lifespan)
app.include_router(auth.router)

SAFE_HTTP_MESSAGES: dict[int, str] = {
    status.HTTP_400_BAD_REQUEST: ValidationError.message,
    status.HTTP_401_UNAUTHORIZED: AuthError.message,
    status.HTTP_403_FORBIDDEN: PermissionError.message,
    status.HTTP_404_NOT_FOUND: "Resource not found",
    status.HTTP_422_UNPROCESSABLE_ENTITY: ValidationError.message,
}


def _log_error(request: Request, status_code: int, code: str, message: str, exc: Exception | None = None) -> None:
    request_id = request.headers.get("x-request-id")
    log_message = f"[{code}] path={request.url.path} request_id={request_id or 'n/a'} message={message}"
    if status_code >= status.HTTP_500_INTERNAL_SERVER_ERROR:
        logger.error(log_message, exc_info=exc)
    else:
        logger.warning(log_message)


@app.exception_handler(AppError)
async def handle_app_error(request: Request, exc: AppError) -> JSONResponse:
    _log_error(request, exc.status_code, exc.code, exc.message, exc)
    return JSONResponse(
        status_code=exc.status_code,
        content=error_payload(exc.code, exc.message, exc.details),
    )


@app.exception_handler(HTTPException)
async def handle_http_exception(
    request: Request, exc: HTTPException | StarletteHTTPException
) -> JSONResponse:
    safe_message = SAFE_HTTP_MESSAGES.get(
        exc.status_code,
        InternalError.message if exc.status_code >= status.HTTP_500_INTERNAL_SERVER_ERROR else "Request failed",
    )
    detail = exc.detail
    detail_message = detail if isinstance(detail, str) else ""
    code = resolve_error_code(exc.status_code)
    _log_error(request, exc.status_code, code, detail_message.strip() or safe_message)
    return JSONResponse(
        status_code=exc.status_code,
        content=error_payload(code, safe_message, detail),
    )


@app.exception_handler(StarletteHTTPException)
async def handle_starlette_http_exception(
    request: Request, exc: StarletteHTTPException
) -> JSONResponse:
    return await handle_http_exception(request, exc)


@app.exception_handler(RequestValidationError)
async def handle_request_validation_error(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    message = "Request validation failed"
    _log_error(request, status.HTTP_422_UNPROCESSABLE_ENTITY, ValidationError.code, message, exc)
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content=error_payload(ValidationError.code, message, exc.errors()),
    )


@app.exception_handler(Exception)
async def handle_unhandled_exception(
    request: Request, exc: Exception
) -> JSONResponse:
    _log_error(
        request,
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        InternalError.code,
        InternalError.message,
        exc,
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=error_payload(InternalError.code, InternalError.message, None),
    )

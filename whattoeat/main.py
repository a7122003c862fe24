import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import DBAPIError, OperationalError
from sqlalchemy.exc import TimeoutError as SQLAlchemyTimeoutError

from whattoeat.db.connection import dispose_engine

from .api import discover, favorites
from .schemas.error import ErrorType, ValidationErrorDetail
from .services.favorites import (
    FavoriteStorageError,
    ItemNotFoundError,
    UnauthenticatedError,
)
from .settings import AppSettings, get_settings
from .utils.error_responses import (
    build_error_response,
    build_validation_error_response,
    error_json_response,
)
from .utils.request_context import (
    REQUEST_ID_HEADER,
    clear_request_id,
    get_request_id,
    resolve_request_id,
    set_request_id,
)

settings = get_settings()

# Configure logging
logging.basicConfig(
    level=settings.log_level_numeric,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


def _sanitize_database_url(url: str) -> str:
    """Hide the password portion of a database URL before logging it."""
    if "://" not in url:
        return url

    scheme, rest = url.split("://", 1)
    if "@" not in rest:
        return url

    auth, host_db = rest.split("@", 1)
    if ":" in auth:
        user, _ = auth.split(":", 1)
        return f"{scheme}://{user}:***@{host_db}"
    return f"{scheme}://{auth}@{host_db}"


def validate_environment(active_settings: AppSettings | None = None) -> None:
    """Log warnings for optional configuration that was left unset."""

    warnings = (active_settings or settings).optional_config_warnings()
    if not warnings:
        return

    logger.warning("=" * 60)
    logger.warning("Environment Configuration Warnings:")
    for warning in warnings:
        logger.warning("  • %s", warning)
    logger.warning("=" * 60)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Log configuration on startup and release the engine on shutdown."""
    validate_environment()

    logger.info("=" * 60)
    logger.info("What To Eat API - Database Preflight Check")
    logger.info("=" * 60)
    logger.info("Database Type: %s", settings.database_type.upper())
    logger.info("Database URL: %s", _sanitize_database_url(settings.resolved_database_url))
    logger.info("Ensure tables exist (run: python scripts/init_db.py)")
    logger.info("=" * 60)

    yield

    logger.info("Shutting down What To Eat API")
    await dispose_engine()


app = FastAPI(
    title="What To Eat API",
    version="0.1.0",
    description="Meals, restaurants and the favorites that connect them to users.",
    lifespan=lifespan,
    redirect_slashes=False,
)


def _default_origins() -> list[str]:
    ports = list(range(3000, 3011)) + [5173]
    origins = []
    for host in ("localhost", "127.0.0.1"):
        origins.extend([f"http://{host}:{port}" for port in ports])
    return origins


def _combine_origins(*origin_groups: list[str]) -> list[str]:
    """Merge origins preserving order and removing duplicates."""
    seen: set[str] = set()
    combined: list[str] = []
    for group in origin_groups:
        for origin in group:
            normalized = origin.rstrip("/")
            if normalized and normalized not in seen:
                seen.add(normalized)
                combined.append(normalized)
    return combined


allow_origins = _combine_origins(_default_origins(), settings.cors_allow_origins)
logger.info("Configured CORS allow_origins: %s", ", ".join(allow_origins))

app.add_middleware(
    CORSMiddleware,
    allow_origins=allow_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def add_request_id(request: Request, call_next):
    """Tag each request with an id, reusing a well-formed inbound one."""
    request_id = resolve_request_id(request.headers.get(REQUEST_ID_HEADER))
    token = set_request_id(request_id)
    try:
        response = await call_next(request)
    finally:
        clear_request_id(token)
    response.headers[REQUEST_ID_HEADER] = request_id
    return response


def _error_json(
    request: Request,
    *,
    error_type: ErrorType,
    message: str,
    detail: str,
    status_code: int,
    retry_after: int | None = None,
) -> JSONResponse:
    error_response = build_error_response(
        error_type=error_type,
        message=message,
        detail=detail,
        status_code=status_code,
        path=str(request.url.path),
        retry_after=retry_after,
    )
    return error_json_response(error_response)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Handle FastAPI request validation errors."""
    errors = [
        ValidationErrorDetail(
            field=".".join(str(loc) for loc in error["loc"]),
            message=error["msg"],
            value=error.get("input"),
        )
        for error in exc.errors()
    ]

    logger.warning(
        "Validation error for request %s to %s: %s errors",
        get_request_id(),
        request.url.path,
        len(errors),
    )

    error_response = build_validation_error_response(
        message="Request validation failed",
        detail=f"{len(errors)} validation error(s)",
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        path=str(request.url.path),
        errors=errors,
    )

    return error_json_response(error_response)


@app.exception_handler(UnauthenticatedError)
async def unauthenticated_exception_handler(request: Request, exc: UnauthenticatedError):
    """Reject favorites operations that need a viewer identity."""
    logger.info(
        "Unauthenticated request %s to %s", get_request_id(), request.url.path
    )
    return _error_json(
        request,
        error_type=ErrorType.AUTHENTICATION_ERROR,
        message="User not authenticated",
        detail=str(exc),
        status_code=status.HTTP_401_UNAUTHORIZED,
    )


@app.exception_handler(ItemNotFoundError)
async def item_not_found_exception_handler(request: Request, exc: ItemNotFoundError):
    """Report a meal or restaurant that does not exist."""
    return _error_json(
        request,
        error_type=ErrorType.NOT_FOUND,
        message=f"{exc.item_type.value.capitalize()} not found",
        detail=str(exc),
        status_code=status.HTTP_404_NOT_FOUND,
    )


@app.exception_handler(FavoriteStorageError)
async def favorite_storage_exception_handler(request: Request, exc: FavoriteStorageError):
    """Surface a toggle whose persistence could not be confirmed."""
    logger.error(
        "Favorite storage error for request %s to %s: %s",
        get_request_id(),
        request.url.path,
        exc,
    )
    return _error_json(
        request,
        error_type=ErrorType.INTERNAL_ERROR,
        message="Favorite state could not be saved",
        detail=str(exc),
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        retry_after=3,
    )


@app.exception_handler(OperationalError)
@app.exception_handler(DBAPIError)
async def database_connection_exception_handler(request: Request, exc: Exception):
    """Handle database connection errors raised outside the toggle path."""
    logger.error(
        "Database connection error for request %s to %s: %s",
        get_request_id(),
        request.url.path,
        str(exc),
    )
    return _error_json(
        request,
        error_type=ErrorType.DATABASE_ERROR,
        message="Database connection failed",
        detail="Unable to reach the database. Please try again later.",
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        retry_after=5,
    )


@app.exception_handler(SQLAlchemyTimeoutError)
async def database_timeout_exception_handler(
    request: Request, exc: SQLAlchemyTimeoutError
):
    """Handle connection pool timeouts."""
    logger.error(
        "Database timeout error for request %s to %s: %s",
        get_request_id(),
        request.url.path,
        str(exc),
    )
    return _error_json(
        request,
        error_type=ErrorType.TIMEOUT_ERROR,
        message="Database query timeout",
        detail="The database did not respond in time. Please try again.",
        status_code=status.HTTP_504_GATEWAY_TIMEOUT,
        retry_after=3,
    )


@app.exception_handler(Exception)
async def generic_exception_handler(request: Request, exc: Exception):
    """Handle all other unhandled exceptions."""
    logger.exception(
        "Unhandled exception for request %s to %s: %s",
        get_request_id(),
        request.url.path,
        type(exc).__name__,
    )
    return _error_json(
        request,
        error_type=ErrorType.INTERNAL_ERROR,
        message="Internal server error",
        detail=f"An unexpected error occurred: {type(exc).__name__}",
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        retry_after=5,
    )


@app.get("/health", tags=["system"])
async def healthcheck() -> dict[str, str]:
    """Simple health endpoint for readiness checks."""
    return {"status": "ok"}


app.include_router(favorites.router, prefix="/favorites", tags=["favorites"])
app.include_router(discover.router, prefix="/discover", tags=["discover"])

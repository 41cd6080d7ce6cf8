import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, Response, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.base import BaseHTTPMiddleware

from .api.router import router as api_router
from .config import settings
from .database import engine
from .errors import (
    AppError,
    ConflictError,
    InternalError,
    ValidationError,
    error_for_status,
    error_payload,
)
from .utils.health import check_database_connection

log_level = logging.getLevelName(settings.log_level)

if not logging.getLogger().handlers:
    logging.basicConfig(
        level=log_level,
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )
logger = logging.getLogger("warehouse")
logger.setLevel(log_level)

CORS_METHODS = ["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS", "HEAD"]
DEFAULT_PREFLIGHT_HEADERS = "authorization, content-type"


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Starting %s", settings.app_name)
    if settings.debug:
        logger.warning("DEBUG=true, do not use in production")

    try:
        await check_database_connection(engine)
    except SQLAlchemyError as exc:
        logger.error("Startup database check failed: %s", exc)
        raise

    yield

    await engine.dispose()


app = FastAPI(title=settings.app_name, debug=settings.debug, lifespan=lifespan)


class OptionsPreflightMiddleware(BaseHTTPMiddleware):
    """Answer every OPTIONS request with 204 before routing.

    Preflights never reach the permission check under ``/api``. Origins
    outside ``ALLOWED_ORIGINS`` get the 204 without CORS headers.
    """

    def __init__(self, app, allowed_origins: list[str]):
        super().__init__(app)
        self.allowed_origins = frozenset(allowed_origins)

    async def dispatch(self, request: Request, call_next):
        if request.method != "OPTIONS":
            return await call_next(request)

        response = Response(status_code=status.HTTP_204_NO_CONTENT)
        origin = request.headers.get("origin")
        if origin in self.allowed_origins:
            response.headers.update(
                {
                    "Access-Control-Allow-Origin": origin,
                    "Access-Control-Allow-Credentials": "true",
                    "Access-Control-Allow-Methods": ", ".join(CORS_METHODS),
                    "Access-Control-Allow-Headers": request.headers.get(
                        "access-control-request-headers", DEFAULT_PREFLIGHT_HEADERS
                    ),
                    "Access-Control-Max-Age": "600",
                    "Vary": "Origin",
                }
            )
        return response


# Middleware added last runs first
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins,
    allow_credentials=True,
    allow_methods=CORS_METHODS,
    allow_headers=["*"],
)
app.add_middleware(OptionsPreflightMiddleware, allowed_origins=settings.allowed_origins)

app.include_router(api_router)


def _error_response(
    request: Request,
    status_code: int,
    code: str,
    message: str,
    details: object = None,
    exc: Exception | None = None,
    headers: dict[str, str] | None = None,
) -> JSONResponse:
    request_id = request.headers.get("x-request-id") or "n/a"
    log = logger.error if status_code >= status.HTTP_500_INTERNAL_SERVER_ERROR else logger.warning
    log(
        "[%s] %s %s request_id=%s message=%s",
        code,
        request.method,
        request.url.path,
        request_id,
        message,
        exc_info=exc,
    )
    return JSONResponse(
        status_code=status_code,
        content=error_payload(code, message, details),
        headers=headers,
    )


def _validation_details(exc: RequestValidationError) -> list[dict[str, object]]:
    # ctx may hold exception instances, which are not JSON serializable
    return [
        {"loc": list(error.get("loc", ())), "msg": error.get("msg"), "type": error.get("type")}
        for error in exc.errors()
    ]


@app.exception_handler(AppError)
async def handle_app_error(request: Request, exc: AppError) -> JSONResponse:
    return _error_response(request, exc.status_code, exc.code, exc.message, exc.details)


@app.exception_handler(StarletteHTTPException)
async def handle_http_exception(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    # Authentication failures carry their reason ("Token has expired") as detail
    code, message = error_for_status(exc.status_code)
    return _error_response(
        request,
        exc.status_code,
        code,
        message,
        exc.detail,
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(RequestValidationError)
async def handle_request_validation_error(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    return _error_response(
        request,
        status.HTTP_422_UNPROCESSABLE_ENTITY,
        ValidationError.code,
        "Request validation failed",
        _validation_details(exc),
    )


@app.exception_handler(IntegrityError)
async def handle_integrity_error(request: Request, exc: IntegrityError) -> JSONResponse:
    # A concurrent insert won the race past the service-level uniqueness check
    return _error_response(
        request,
        status.HTTP_409_CONFLICT,
        ConflictError.code,
        "Request conflicts with existing data",
        exc=exc,
    )


@app.exception_handler(Exception)
async def handle_unhandled_exception(request: Request, exc: Exception) -> JSONResponse:
    return _error_response(
        request,
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        InternalError.code,
        InternalError.message,
        exc=exc,
    )


@app.get("/health", tags=["health"])
async def healthcheck() -> JSONResponse:
    try:
        await check_database_connection(engine, include_metadata=False)
    except SQLAlchemyError as exc:
        logger.error("Healthcheck database probe failed: %s", exc)
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE, content={"status": "error"}
        )

    return JSONResponse(status_code=status.HTTP_200_OK, content={"status": "ok"})

import time
import uuid
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import sentry_sdk
import uvicorn
from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from prometheus_client import make_asgi_app
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.middleware.cors import CORSMiddleware

from taskboard.api.main import (
    DEFAULT_VALIDATION_MESSAGE,
    VALIDATION_MESSAGES,
    api_router,
)
from taskboard.core.config import settings
from taskboard.core.observability import (
    REQUEST_COUNT,
    REQUEST_DURATION,
    get_logger,
    set_correlation_id,
    setup_structured_logging,
)
from taskboard.storage import Storage, StorageError, build_storage
from taskboard.views.routes import router as views_router

logger = get_logger(__name__)

UNMATCHED_ENDPOINT = "<unmatched>"


def route_template(request: Request) -> str:
    """
    Metrics label for the matched route.

    Uses the path template (`/api/tasks/{user:path}`) so user names never
    become label values. Requests no route matched, including mounted apps,
    share one label.
    """
    return getattr(request.scope.get("route"), "path", UNMATCHED_ENDPOINT)


class ObservabilityMiddleware(BaseHTTPMiddleware):
    """Middleware for request correlation, logging and metrics."""

    async def dispatch(self, request: Request, call_next):
        correlation_id = request.headers.get("X-Correlation-ID") or str(uuid.uuid4())
        set_correlation_id(correlation_id)

        start_time = time.time()
        method = request.method
        path = request.url.path

        logger.info(
            "Request started",
            method=method,
            path=path,
            client_ip=request.client.host if request.client else None,
        )

        try:
            response = await call_next(request)
        except Exception as e:
            duration = time.time() - start_time
            endpoint = route_template(request)
            REQUEST_COUNT.labels(method=method, endpoint=endpoint, status="500").inc()
            REQUEST_DURATION.labels(method=method, endpoint=endpoint).observe(duration)
            logger.error(
                "Request failed",
                method=method,
                path=path,
                duration_seconds=duration,
                error=str(e),
                error_type=type(e).__name__,
                exc_info=True,
            )
            raise

        duration = time.time() - start_time
        status_code = response.status_code
        endpoint = route_template(request)
        REQUEST_COUNT.labels(
            method=method, endpoint=endpoint, status=str(status_code)
        ).inc()
        REQUEST_DURATION.labels(method=method, endpoint=endpoint).observe(duration)

        response.headers["X-Correlation-ID"] = correlation_id

        logger.info(
            "Request completed",
            method=method,
            path=path,
            status_code=status_code,
            duration_seconds=duration,
        )
        return response


async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Report schema violations as 400 with the offending fields."""
    route = request.scope.get("route")
    message = VALIDATION_MESSAGES.get(
        getattr(route, "name", ""), DEFAULT_VALIDATION_MESSAGE
    )
    errors = [
        {"loc": list(err.get("loc", ())), "msg": err.get("msg"), "type": err.get("type")}
        for err in exc.errors()
    ]
    logger.info("Request validation failed", path=request.url.path, errors=errors)
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=jsonable_encoder({"detail": message, "errors": errors}),
    )


async def storage_exception_handler(request: Request, exc: StorageError) -> JSONResponse:
    logger.error(
        "Unhandled storage error", path=request.url.path, operation=exc.operation
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Internal server error"},
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error(
        "Unhandled error",
        path=request.url.path,
        error_type=type(exc).__name__,
        exc_info=exc,
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Internal server error"},
    )


def create_app(storage: Storage | None = None) -> FastAPI:
    """
    Build the application.

    Args:
        storage: Backend to serve. When omitted, one is built from settings
            at startup and closed at shutdown.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        setup_structured_logging()
        owned = storage is None
        app.state.storage = storage if storage is not None else build_storage(settings)
        logger.info(
            "Application started",
            project_name=settings.PROJECT_NAME,
            environment=settings.ENVIRONMENT,
            storage_backend=app.state.storage.backend,
        )
        try:
            yield
        finally:
            logger.info("Shutting down application")
            if owned:
                app.state.storage.close()

    app = FastAPI(
        title=settings.PROJECT_NAME,
        description="Task tracking service: users submit task completions, "
        "admins manage users, task assignments and submission logs.",
        version="0.1.0",
        lifespan=lifespan,
    )
    if storage is not None:
        app.state.storage = storage

    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(StorageError, storage_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)

    app.add_middleware(ObservabilityMiddleware)

    if settings.all_cors_origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=settings.all_cors_origins,
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    app.include_router(api_router, prefix=settings.API_STR)
    app.include_router(views_router)

    if settings.ENABLE_METRICS:
        app.mount("/metrics", make_asgi_app())

    return app


# Initialize Sentry for error tracking
if settings.SENTRY_DSN and settings.ENVIRONMENT != "local":
    sentry_sdk.init(
        dsn=str(settings.SENTRY_DSN),
        traces_sample_rate=1.0 if settings.ENVIRONMENT == "staging" else 0.1,
        environment=settings.ENVIRONMENT,
    )

app = create_app()


if __name__ == "__main__":
    uvicorn.run("taskboard.main:app", host="127.0.0.1", port=8000, log_level="info")

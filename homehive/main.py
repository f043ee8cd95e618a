import logging
import uuid
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from homehive.api.deps import engine
from homehive.api.routers.bookings import router as bookings_router
from homehive.api.routers.health import router as health_router
from homehive.api.routers.payments import router as payments_router
from homehive.api.routers.workers import router as workers_router
from homehive.config import get_settings
from homehive.domain.errors import (
    ConflictError,
    DomainError,
    DuplicateError,
    IdempotencyConflictError,
    InvalidTransitionError,
    NotFoundError,
    OptimisticLockError,
    PaymentGatewayError,
    PermissionDeniedError,
    StoreUnavailableError,
    ValidationError,
    WebhookVerificationError,
)
from homehive.infrastructure.db.engine import create_schema

settings = get_settings()

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

# First match wins; order subclasses before their bases.
ERROR_STATUS: list[tuple[type[DomainError], int]] = [
    (ValidationError, 422),
    (NotFoundError, 404),
    (PermissionDeniedError, 403),
    (ConflictError, 409),
    (DuplicateError, 409),
    (InvalidTransitionError, 409),
    (OptimisticLockError, 409),
    (IdempotencyConflictError, 409),
    (StoreUnavailableError, 503),
    (PaymentGatewayError, 502),
    (WebhookVerificationError, 400),
]


def status_for(exc: DomainError) -> int:
    for error_type, status_code in ERROR_STATUS:
        if isinstance(exc, error_type):
            return status_code
    return 400


@asynccontextmanager
async def lifespan(app: FastAPI):
    if not settings.use_in_memory:
        await create_schema(engine)
    yield
    await engine.dispose()


app = FastAPI(
    title="HomeHive Bookings API",
    version="0.1.0",
    lifespan=lifespan,
)


@app.exception_handler(DomainError)
async def domain_exception_handler(request: Request, exc: DomainError):
    status_code = status_for(exc)
    content = {"detail": exc.message, "code": exc.code}
    if isinstance(exc, ConflictError):
        content["blocking_ranges"] = [
            {"check_in": start.isoformat(), "check_out": end.isoformat()}
            for start, end in exc.blocking_ranges
        ]
    if isinstance(exc, DuplicateError) and exc.reservation_id:
        content["reservation_id"] = exc.reservation_id

    log = logger.error if status_code >= 500 else logger.info
    log(
        "Request failed with domain error",
        extra={"code": exc.code, "status_code": status_code, "path": request.url.path},
    )
    return JSONResponse(status_code=status_code, content=content)


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """
    Global exception handler to prevent stack trace exposure to clients.
    Unhandled exceptions are logged internally and answered with a generic error.
    """
    error_id = str(uuid.uuid4())

    logger.error(
        "Unhandled exception occurred",
        exc_info=exc,
        extra={
            "error_id": error_id,
            "path": request.url.path,
            "method": request.method,
            "client_host": request.client.host if request.client else None,
        },
    )

    return JSONResponse(
        status_code=500,
        content={
            "detail": "Internal server error",
            "error_id": error_id,
            "message": "An unexpected error occurred. Please contact support with the error_id if the issue persists.",
        },
    )


app.include_router(health_router, tags=["Health"])
app.include_router(bookings_router, prefix="/api/v1", tags=["Bookings"])
app.include_router(payments_router, prefix="/api/v1", tags=["Payments"])
app.include_router(workers_router, prefix="/api/v1", tags=["Worker"])

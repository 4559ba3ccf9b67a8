# newsletter/main.py
from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from contextlib import asynccontextmanager
from typing import Optional
import logging

from newsletter.config import Settings, settings as default_settings
from newsletter.database import (
    DatabaseConnection,
    InMemorySubscriptionStore,
    PostgresSubscriptionStore,
    migrate,
)
from newsletter.errors import (
    INTERNAL_ERROR_MESSAGE,
    ApiError,
    InternalError,
    UnknownToken,
    ValidationError,
    error_chain,
)
from newsletter.middleware.request_id import setup_request_id
from newsletter.routes import health_router, newsletters_router, subscriptions_router
from newsletter.services import EmailClient
from newsletter.telemetry import setup_logging, shutdown_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events"""
    conf: Settings = app.state.settings
    setup_logging(conf.logs)
    logger.info(f"Starting newsletter API ({conf.application.environment})...")

    if conf.database.backend == "memory":
        logger.warning("Using the in-memory subscription store; data is lost on restart")
        app.state.store = InMemorySubscriptionStore()
    else:
        try:
            pool = await DatabaseConnection.get_pool(conf.database)
            await migrate(pool)
        except Exception as e:
            logger.error(f"Failed to initialize database: {e}")
            raise
        app.state.store = PostgresSubscriptionStore(pool)
        logger.info("Database connection pool initialized")

    app.state.email_client = EmailClient.from_settings(conf.email_client)

    yield

    logger.info("Shutting down newsletter API...")
    await app.state.email_client.aclose()
    try:
        await DatabaseConnection.close_pool()
    except Exception as e:
        logger.warning(f"Error closing database connections: {e}")
    shutdown_logging()


def error_response(status_code: int, message: str, **extra) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"code": status_code, "message": message, **extra}
    )


async def api_error_handler(request: Request, exc: ApiError):
    """Log an application error at its own level and hide internal details"""
    if exc.log_level >= logging.ERROR:
        logger.log(exc.log_level, error_chain(exc), exc_info=exc)
    else:
        logger.log(exc.log_level, error_chain(exc))
    return error_response(exc.status_code, exc.public_message)


async def request_validation_handler(request: Request, exc: RequestValidationError):
    """Bad query strings answer 400, bad bodies answer 422"""
    errors = exc.errors()
    if errors and all(error["loc"] and error["loc"][0] == "query" for error in errors):
        status_code = status.HTTP_400_BAD_REQUEST
        message = "Invalid query parameters"
    else:
        status_code = status.HTTP_422_UNPROCESSABLE_ENTITY
        message = "Invalid payload"
    logger.warning(f"Rejected {request.method} {request.url.path}: {message}")
    return error_response(status_code, message, errors=jsonable_encoder(errors))


async def global_exception_handler(request: Request, exc: Exception):
    logger.error(f"Unhandled exception: {exc}", exc_info=True)
    return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, INTERNAL_ERROR_MESSAGE)


def create_app(conf: Optional[Settings] = None) -> FastAPI:
    app = FastAPI(
        title="Newsletter API",
        description="Newsletter subscriptions with email confirmation",
        version="1.0.0",
        lifespan=lifespan
    )
    app.state.settings = conf or default_settings

    setup_request_id(app)

    app.include_router(health_router)
    app.include_router(subscriptions_router)
    app.include_router(newsletters_router)

    for error_type in (ValidationError, UnknownToken, InternalError):
        app.add_exception_handler(error_type, api_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(Exception, global_exception_handler)

    return app


app = create_app()

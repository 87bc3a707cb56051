"""
HookLog - webhook inbox and demo list backend.
Main FastAPI application entry point.
"""
import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

from hooklog import __version__
from hooklog.config import DEFAULT_SECRET_KEY, get_settings
from hooklog.api.router import api_router
from hooklog.database import dispose_engine
from hooklog.exceptions import HookLogError
from hooklog.utils.logging import (
    configure_structured_logging,
    generate_correlation_id,
    reset_correlation_id,
    set_correlation_id,
)

logger = logging.getLogger("hooklog")


class CorrelationIdMiddleware(BaseHTTPMiddleware):
    """Injects a correlation ID into every request context and response header."""

    async def dispatch(self, request: Request, call_next) -> Response:
        cid = request.headers.get("X-Correlation-ID") or generate_correlation_id()
        token = set_correlation_id(cid)
        try:
            response = await call_next(request)
        finally:
            reset_correlation_id(token)
        response.headers["X-Correlation-ID"] = cid
        return response


async def handle_domain_error(request: Request, exc: HookLogError) -> JSONResponse:
    """Render service-layer errors as {"error": ..., "code": ...}."""
    logger.info("Request rejected: %s", exc.message, extra={"error_code": exc.code})
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.message, "code": exc.code},
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application startup and shutdown events."""
    settings = get_settings()
    logger.info("HookLog starting up (env=%s)", settings.app_env)

    if settings.app_secret_key == DEFAULT_SECRET_KEY and not settings.jwt_secret:
        logger.warning(
            "APP_SECRET_KEY and JWT_SECRET not set - tokens are signed with the "
            "development default. Set a real secret for production."
        )

    if settings.sentry_dsn:
        try:
            import sentry_sdk
            sentry_sdk.init(
                dsn=settings.sentry_dsn,
                traces_sample_rate=0.1,
                environment=settings.app_env,
            )
            logger.info("Sentry initialized")
        except Exception as e:
            logger.warning("Sentry initialization failed: %s", str(e))

    yield

    await dispose_engine()
    logger.info("HookLog shutdown complete")


def create_app() -> FastAPI:
    """Application factory."""
    settings = get_settings()

    configure_structured_logging(settings.log_level, settings.log_format)

    application = FastAPI(
        title="HookLog",
        description="Webhook inbox and demo list backend",
        version=__version__,
        lifespan=lifespan,
    )

    application.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
        allow_headers=[
            "Authorization", "Content-Type", "X-Correlation-ID",
            "X-Webhook-Source", "Accept", "Origin", "X-Requested-With",
        ],
    )

    # Correlation ID middleware (must be added AFTER CORS so it runs on every request)
    application.add_middleware(CorrelationIdMiddleware)

    application.add_exception_handler(HookLogError, handle_domain_error)

    application.include_router(api_router)

    return application


app = create_app()

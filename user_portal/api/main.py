"""
FastAPI application entry point.

Initializes the FastAPI app, registers routers under /api, adds
middleware and configures the lifespan.

Dependencies: fastapi, uvicorn, user_portal.api, user_portal.observability,
    user_portal.configs
System role: Application initialization and server launch
"""

import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from user_portal.api import api_router
from user_portal.boundary.db import dispose_engine, init_models
from user_portal.boundary.ldap import get_directory_client
from user_portal.configs import get_settings
from user_portal.core.encryption import get_encryption_service
from user_portal.observability.logger import configure_logging
from user_portal.observability.middleware import CorrelationMiddleware, RequestLoggingMiddleware

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan context manager.

    Creates tables and checks the secret-encryption key on startup; closes
    the LDAP pool and the database engine on shutdown.
    """
    settings = get_settings()
    configure_logging(settings.log_level)
    logger.info("Application startup: logging configured")

    try:
        await init_models()
        logger.info("Database tables ready")
    except Exception as e:
        # The portal still serves LDAP-only routes without the database
        logger.exception("Failed to initialize database tables", extra={"error": str(e)})

    try:
        if get_encryption_service().self_test():
            logger.info("Secret encryption ready")
        else:
            logger.error("Secret encryption unusable; TOTP and PIN routes will fail")
    except ValueError as e:
        logger.error("Secret encryption not configured", extra={"error": str(e)})

    yield

    if get_directory_client.cache_info().currsize:
        get_directory_client().close()
        logger.info("LDAP connection pool closed")
    await dispose_engine()
    logger.info("Application shutdown complete")


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Report malformed request bodies and parameters as 400."""
    errors = exc.errors()
    first = errors[0] if errors else {}
    field = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
    message = first.get("msg", "Solicitud inválida")
    logger.info(
        "Request validation failed",
        extra={"path": request.url.path, "field": field, "error": message},
    )
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"detail": f"{field}: {message}" if field else message},
    )


def create_app() -> FastAPI:
    """
    Create and configure the FastAPI application.

    Returns:
        FastAPI: Configured application instance with all routers registered
    """
    settings = get_settings()

    app = FastAPI(
        title="University User Portal API",
        description="Account lifecycle, credential recovery and device registry",
        version="0.1.0",
        lifespan=lifespan,
    )

    origins = [settings.frontend_url] if settings.frontend_url else ["*"]
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Add observability middleware
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(CorrelationMiddleware)

    app.add_exception_handler(RequestValidationError, validation_exception_handler)

    app.include_router(api_router, prefix=settings.api_prefix)

    return app


app = create_app()


if __name__ == "__main__":
    server_settings = get_settings()
    uvicorn.run(
        "user_portal.api.main:app",
        host=server_settings.host,
        port=server_settings.port,
    )

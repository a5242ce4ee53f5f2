"""
FastAPI Application - sass command service
"""

from __future__ import annotations

import logging
import secrets
from contextlib import asynccontextmanager

from asgi_correlation_id import CorrelationIdMiddleware
from fastapi import Depends, FastAPI, HTTPException, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse
from fastapi.security import HTTPBasic, HTTPBasicCredentials
from starlette.exceptions import HTTPException as StarletteHTTPException

from sasscmd.config import settings
from sasscmd.engine import libsass_version
from sasscmd.host import CommandHost
from sasscmd.lifecycle import UnloadFlags, sass_package
from sasscmd.observability.logging import configure_logging
from sasscmd.observability.metrics import MetricsMiddleware, metrics_response
from sasscmd.observability.tracing import configure_tracing
from sasscmd.routers.sass import router as sass_router

logger = logging.getLogger(__name__)


# ==========================================
# Application Lifespan
# ==========================================
@asynccontextmanager
async def lifespan(app: FastAPI):
    host = CommandHost(safe=settings.safe_host)
    if host.safe:
        sass_package.safe_init(host)
    else:
        sass_package.init(host)
    app.state.host = host
    logger.info(
        "sass command ready",
        extra={"command": settings.command_name, "libsass": libsass_version()},
    )
    yield
    if host.safe:
        sass_package.safe_unload(host, UnloadFlags.DETACH_FROM_INTERPRETER)
    else:
        sass_package.unload(host, UnloadFlags.DETACH_FROM_INTERPRETER)
    app.state.host = None
    logger.info("sass command unloaded")


configure_logging(settings.log_level.upper())
IS_PROD = settings.is_production


# ==========================================
# Exception handlers
# ==========================================
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(
        {"detail": exc.detail},
        status_code=exc.status_code,
        headers=getattr(exc, "headers", None),
    )


# ==========================================
# FastAPI Application
# ==========================================
app = FastAPI(
    title="sass command service",
    description="libsass compilation through the sass command",
    version=settings.package_version,
    lifespan=lifespan,
    docs_url=None if IS_PROD else "/docs",
    redoc_url=None if IS_PROD else "/redoc",
    openapi_url=None if IS_PROD else "/openapi.json",
)
# Order: compression → metrics → correlation id
app.add_middleware(GZipMiddleware, minimum_size=1000)
app.add_middleware(MetricsMiddleware)
app.add_middleware(CorrelationIdMiddleware, header_name="X-Request-ID")
app.add_exception_handler(HTTPException, http_exception_handler)
app.add_exception_handler(StarletteHTTPException, http_exception_handler)
if settings.cors_origins:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=False,
        allow_methods=["GET", "POST"],
        allow_headers=["Accept", "Content-Type", "Authorization"],
    )
if settings.enable_tracing and settings.otlp_endpoint:
    configure_tracing(
        app, "sasscmd", settings.otlp_endpoint, settings.otlp_headers
    )


# ==========================================
# Health
# ==========================================
@app.get("/healthz", tags=["system"], summary="Health check", response_model=dict)
async def health_check(request: Request) -> dict:
    host: CommandHost | None = getattr(request.app.state, "host", None)
    if host is None or not host.has_command(settings.command_name):
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail="unhealthy"
        )
    if IS_PROD:
        return {"status": "healthy"}
    return {
        "status": "healthy",
        "version": app.version,
        "libsass": libsass_version(),
        "commands": host.command_names(),
    }


# ==========================================
# Metrics (Protected with HTTP Basic Auth)
# ==========================================
security = HTTPBasic(auto_error=False)


def verify_metrics_auth(
    credentials: HTTPBasicCredentials | None = Depends(security),
) -> str:
    """Verify HTTP Basic Auth credentials for metrics endpoint."""
    if not settings.metrics_password:
        return credentials.username if credentials else "anonymous"

    if credentials is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Basic"},
        )
    correct_username = secrets.compare_digest(
        credentials.username, settings.metrics_username
    )
    correct_password = secrets.compare_digest(
        credentials.password, settings.metrics_password
    )
    if not (correct_username and correct_password):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid credentials",
            headers={"WWW-Authenticate": "Basic"},
        )
    return credentials.username


@app.get("/metrics", include_in_schema=False)
def metrics(_: str = Depends(verify_metrics_auth)):
    """
    Prometheus metrics endpoint.

    Set METRICS_PASSWORD (and optionally METRICS_USERNAME) to require auth.
    """
    return metrics_response()


# ==========================================
# Routers
# ==========================================
app.include_router(sass_router)

"""SecuryFlex eligibility API application."""
from contextlib import asynccontextmanager
from collections.abc import AsyncGenerator

import structlog
from fastapi import APIRouter, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import Response

from securyflex.core.config import settings
from securyflex.core.errors import (
    SecuryFlexError,
    domain_exception_handler,
    global_exception_handler,
)
from securyflex.core.sentry import init_sentry
from securyflex.modules.certificates.router import router as certificates_router
from securyflex.modules.gps.router import router as gps_router
from securyflex.modules.matching.router import router as matching_router

# ── Sentry: must be initialised BEFORE FastAPI app is created ────────────────
init_sentry(settings.SENTRY_DSN, settings.SENTRY_ENVIRONMENT, settings.APP_VERSION)

logger = structlog.get_logger()

API_VERSION = "1.0.0"


@asynccontextmanager
async def lifespan(_app: FastAPI) -> AsyncGenerator[None]:
    logger.info(
        "Starting SecuryFlex eligibility API",
        env=settings.APP_ENV,
        warning_window_days=settings.CERT_EXPIRY_WARNING_DAYS,
    )
    yield
    logger.info("Shutting down SecuryFlex eligibility API")


_is_prod = settings.APP_ENV == "production"

app = FastAPI(
    title="SecuryFlex Eligibility API",
    description="Certificate validity, job eligibility and GPS check-in rules for SecuryFlex.",
    version=API_VERSION,
    docs_url=None if _is_prod else "/docs",
    redoc_url=None if _is_prod else "/redoc",
    openapi_url=None if _is_prod else "/openapi.json",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=[settings.FRONTEND_URL],
    allow_credentials=True,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["Authorization", "Content-Type", "Accept", "X-Request-ID"],
)

app.add_exception_handler(SecuryFlexError, domain_exception_handler)  # type: ignore[arg-type]
app.add_exception_handler(Exception, global_exception_handler)


# ── X-API-Version response header ────────────────────────────────────────────


@app.middleware("http")
async def add_version_header(request: Request, call_next) -> Response:
    response = await call_next(request)
    response.headers["X-API-Version"] = "v1"
    return response


# ── Health check (root-level, not under /v1) ─────────────────────────────────


@app.get("/health")
async def health_check() -> dict[str, str]:
    return {"status": "healthy", "service": "securyflex-eligibility", "version": API_VERSION}


# ── /v1 versioned router ──────────────────────────────────────────────────────

api_v1 = APIRouter(prefix="/v1")

api_v1.include_router(certificates_router)
api_v1.include_router(matching_router)
api_v1.include_router(gps_router)

app.include_router(api_v1)

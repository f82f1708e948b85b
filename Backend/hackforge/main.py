# hackforge/main.py
"""
HackForge Backend - prompt to code generation service.
"""
import time
import uuid
import uvicorn
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from starlette.middleware.cors import CORSMiddleware
from starlette.responses import JSONResponse

# Rate limiting
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware

from dotenv import load_dotenv
load_dotenv()

from hackforge.core.config import settings
from hackforge.core.exceptions import HackForgeError, LLMError
from hackforge.core.logging import log, log_section
from hackforge.core.rate_limit import limiter, rate_limit_exceeded_handler
from hackforge.services.cache import cache_service


# ---------------------------------------------------------------------------
# LIFESPAN
# ---------------------------------------------------------------------------

@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application startup and shutdown."""
    log_section("STARTUP", "HackForge starting")
    log("STARTUP", f"Environment: {settings.environment}")
    log("STARTUP", f"GEMINI_API_KEY configured: {settings.llm.gemini_configured}")
    log("STARTUP", f"Model: {settings.llm.gemini_model}")

    from hackforge.db import connect_db, disconnect_db
    await connect_db()
    await cache_service.connect()

    yield

    log("STARTUP", "🔌 Shutting down...")
    await cache_service.close()
    await disconnect_db()


# ---------------------------------------------------------------------------
# APP INITIALIZATION
# ---------------------------------------------------------------------------

app = FastAPI(
    title="HackForge",
    version="1.0.0",
    lifespan=lifespan,
)

# Monitoring
from hackforge.lib.monitoring import register_monitoring
register_monitoring(app)

app.add_middleware(
    CORSMiddleware,
    allow_origins=[settings.frontend_url],
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization"],
)

app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)
app.add_middleware(SlowAPIMiddleware)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    request_id = request.headers.get("x-request-id") or uuid.uuid4().hex
    started = time.perf_counter()
    response = await call_next(request)
    duration = int((time.perf_counter() - started) * 1000)
    log(
        "HTTP",
        f"{request.method} {request.url.path} - {response.status_code} ({duration}ms)",
        request_id=request_id,
    )
    response.headers["X-Request-ID"] = request_id
    return response


# ---------------------------------------------------------------------------
# ERROR HANDLERS
# ---------------------------------------------------------------------------

def error_body(exc: HackForgeError) -> dict:
    """The JSON envelope every failed request returns."""
    message = exc.public_message if isinstance(exc, LLMError) else exc.message
    body = {"success": False, "message": message, "error": exc.error_code}
    if settings.is_development:
        details = dict(exc.details)
        if isinstance(exc, LLMError):
            details["reason"] = exc.message
        if details:
            body["details"] = details
    return body


@app.exception_handler(HackForgeError)
async def hackforge_error_handler(request: Request, exc: HackForgeError):
    return JSONResponse(status_code=exc.status_code, content=error_body(exc))


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    body = {"success": False, "message": "Invalid request data", "error": "VALIDATION_ERROR"}
    if settings.is_development:
        body["details"] = {"errors": jsonable_encoder(exc.errors())}
    return JSONResponse(status_code=400, content=body)


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    log("HTTP", f"❌ Unhandled error on {request.method} {request.url.path}: {exc!r}")
    body = {"success": False, "message": "Something went wrong!", "error": "INTERNAL_ERROR"}
    if settings.is_development:
        body["details"] = {"reason": str(exc)}
    return JSONResponse(status_code=500, content=body)


# ---------------------------------------------------------------------------
# API ROUTES
# ---------------------------------------------------------------------------

from hackforge.api import (
    health,
    code,
    projects,
    offline,
    analysis,
)

app.include_router(health.router)
app.include_router(code.router)
app.include_router(projects.router)
app.include_router(offline.router)
app.include_router(analysis.router)


# ---------------------------------------------------------------------------
# RUN
# ---------------------------------------------------------------------------

if __name__ == "__main__":
    uvicorn.run(
        "hackforge.main:app",
        host="0.0.0.0",
        port=settings.port,
        reload=settings.is_development,
    )

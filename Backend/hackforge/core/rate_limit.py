# hackforge/core/rate_limit.py
"""
Shared slowapi limiter.

Routes decorate with ``@limiter.limit(settings.rate_limits.<name>)`` and must
accept a ``request: Request`` argument.
"""
from fastapi import Request
from slowapi import Limiter
from slowapi.util import get_remote_address
from slowapi.errors import RateLimitExceeded
from starlette.responses import JSONResponse

from hackforge.core.config import settings
from hackforge.core.logging import log


limiter = Limiter(key_func=get_remote_address, default_limits=[settings.rate_limits.default])


def _subject_for(path: str) -> str:
    if path.startswith("/api/generate"):
        return "code generation"
    if path.startswith("/api/projects"):
        return "project"
    return "API"


async def rate_limit_exceeded_handler(request: Request, exc: RateLimitExceeded) -> JSONResponse:
    """Render a 429 in the API's error envelope."""
    log("HTTP", f"Rate limit hit: {request.method} {request.url.path} ({exc.detail})")
    subject = _subject_for(request.url.path)
    return JSONResponse(
        status_code=429,
        content={
            "success": False,
            "message": f"Too many {subject} requests. Please try again later.",
            "error": "RATE_LIMITED",
        },
    )

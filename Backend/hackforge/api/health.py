# hackforge/api/health.py
"""
Health check endpoints.
"""
from datetime import datetime, timezone
from fastapi import APIRouter

from hackforge.core.config import settings
from hackforge import db
from hackforge.services.cache import cache_service

router = APIRouter(tags=["Health"])


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


@router.get("/health")
async def health():
    """Service status: LLM key configured, cache reachable, database connected."""
    return {
        "status": "OK",
        "message": "HackForge Backend is running",
        "timestamp": _now(),
        "services": {
            "gemini": settings.llm.gemini_configured,
            "cache": await cache_service.ping(),
            "database": db.is_connected(),
        },
        "storage": db.get_store().backend,
        "environment": settings.environment,
    }


@router.get("/healthz")
async def healthz():
    """Simple health check."""
    return {"ok": True, "timestamp": _now()}


@router.get("/api/health")
async def api_health():
    """API health check."""
    return {"status": "healthy", "timestamp": _now()}

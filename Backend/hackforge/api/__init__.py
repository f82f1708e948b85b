"""
API module - All route handlers.
"""
from . import health, code, projects, offline, analysis

__all__ = [
    "health",
    "code",
    "projects",
    "offline",
    "analysis",
]

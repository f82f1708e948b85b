import sys
import os
from datetime import datetime
from typing import Any, Optional


# ═══════════════════════════════════════════════════════════════════════════════
# LOG FILTERING
# ═══════════════════════════════════════════════════════════════════════════════
# Only these scopes are shown at INFO level
# Everything else is gated behind DEBUG

INFO_SCOPES = {
    "STARTUP",      # App lifecycle
    "HTTP",         # Request log
    "GENERATE",     # Code generation flow
    "GEMINI",       # LLM boundary
    "DB",           # Database connection
    "CACHE",        # Redis status
    "PROJECTS",     # Project persistence
    "OFFLINE",      # Offline store
    "MONITORING",   # Prometheus
}

# DEBUG-only scopes (hidden by default)
DEBUG_SCOPES = {
    "ANALYZE",
    "VALIDATION",
    "CACHE-HIT",
}

# Check if DEBUG mode is enabled
DEBUG_MODE = os.getenv("HACKFORGE_DEBUG", "false").lower() == "true"


def log(scope: str, message: str, data: Any = None, request_id: Optional[str] = None) -> None:
    """
    Unified logging function for HackForge.

    Only INFO_SCOPES are shown by default.
    Set HACKFORGE_DEBUG=true to see all scopes.
    """
    if not DEBUG_MODE and scope not in INFO_SCOPES:
        return

    timestamp = datetime.now().strftime("%H:%M:%S")
    prefix = f"[{timestamp}] [{scope}]"

    if request_id:
        prefix += f" [{request_id[:8]}]"

    print(f"{prefix} {message}")

    if data:
        print(f"  Data: {data}")

    sys.stdout.flush()


def log_section(scope: str, title: str) -> None:
    """
    Log a section header with visual separator.
    """
    timestamp = datetime.now().strftime("%H:%M:%S")
    print(f"\n{'='*60}")
    print(f"[{timestamp}] [{scope}] {title}")
    print(f"{'='*60}")
    sys.stdout.flush()

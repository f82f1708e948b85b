# hackforge/core/config.py
"""
Application configuration - single source of truth for all settings.
"""
import os
from dataclasses import dataclass, field
from typing import Optional
from dotenv import load_dotenv

load_dotenv()


PLACEHOLDER_GEMINI_KEY = "your_gemini_api_key_here"


@dataclass
class LLMSettings:
    """Gemini provider configuration."""
    default_provider: str = field(default_factory=lambda: os.getenv("DEFAULT_LLM_PROVIDER", "gemini"))
    gemini_api_key: Optional[str] = field(default_factory=lambda: os.getenv("GEMINI_API_KEY"))
    gemini_model: str = field(default_factory=lambda: os.getenv("GEMINI_MODEL", "gemini-2.0-flash"))
    temperature: float = 0.7
    max_output_tokens: int = 2000
    top_p: float = 0.8
    top_k: int = 40
    request_timeout: int = field(default_factory=lambda: int(os.getenv("GEMINI_TIMEOUT", "120")))

    @property
    def gemini_configured(self) -> bool:
        return bool(self.gemini_api_key) and self.gemini_api_key != PLACEHOLDER_GEMINI_KEY


@dataclass
class DatabaseSettings:
    """MongoDB configuration. Without a URI the app runs on the in-memory store."""
    mongodb_uri: Optional[str] = field(default_factory=lambda: os.getenv("MONGODB_URI"))
    database_name: str = field(default_factory=lambda: os.getenv("MONGODB_DB", "hackforge"))
    server_selection_timeout_ms: int = 5000


@dataclass
class CacheSettings:
    """Redis response cache configuration."""
    redis_url: Optional[str] = field(default_factory=lambda: os.getenv("REDIS_URL"))
    default_ttl: int = field(default_factory=lambda: int(os.getenv("CACHE_TTL", "3600")))
    key_prefix: str = "api"


@dataclass
class RateLimitSettings:
    """Per-client request limits (slowapi/limits syntax)."""
    default: str = field(default_factory=lambda: os.getenv("RATE_LIMIT", "300/minute"))
    generate: str = field(default_factory=lambda: os.getenv("GENERATE_RATE_LIMIT", "10 per 15 minutes"))
    projects: str = field(default_factory=lambda: os.getenv("PROJECTS_RATE_LIMIT", "100 per 15 minutes"))


@dataclass
class Settings:
    """Main application settings."""
    llm: LLMSettings = field(default_factory=LLMSettings)
    database: DatabaseSettings = field(default_factory=DatabaseSettings)
    cache: CacheSettings = field(default_factory=CacheSettings)
    rate_limits: RateLimitSettings = field(default_factory=RateLimitSettings)
    port: int = field(default_factory=lambda: int(os.getenv("PORT", 5002)))
    frontend_url: str = field(default_factory=lambda: os.getenv("FRONTEND_URL", "http://localhost:3000"))
    environment: str = field(default_factory=lambda: os.getenv("ENVIRONMENT", "development"))
    default_user_id: str = "demo-user"

    @property
    def is_development(self) -> bool:
        return self.environment == "development"


# Singleton instance
settings = Settings()

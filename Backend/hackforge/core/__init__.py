# hackforge/core/__init__.py
"""
Core module - configuration, logging, exceptions and rate limiting.
"""
from .config import settings
from .exceptions import (
    HackForgeError,
    PromptValidationError,
    MissingFieldsError,
    LLMError,
    RateLimitError,
    ProjectNotFoundError,
    OfflineItemNotFoundError,
    PersistenceError,
    InvalidPayloadError,
)

__all__ = [
    # Config
    "settings",
    # Exceptions
    "HackForgeError",
    "PromptValidationError",
    "MissingFieldsError",
    "LLMError",
    "RateLimitError",
    "ProjectNotFoundError",
    "OfflineItemNotFoundError",
    "PersistenceError",
    "InvalidPayloadError",
]

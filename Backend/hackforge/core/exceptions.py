# hackforge/core/exceptions.py
"""
Custom exceptions for the application.

Every HackForgeError carries the machine-readable ``error_code`` and the HTTP
status the API reports for it. See ``hackforge.main`` for the JSON rendering.
"""
from typing import Optional, Dict, Any


class HackForgeError(Exception):
    """Base exception for all HackForge errors."""
    status_code: int = 500
    error_code: str = "INTERNAL_ERROR"

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class PromptValidationError(HackForgeError):
    """Prompt missing or too short."""
    status_code = 400

    def __init__(self, error_code: str, message: str):
        super().__init__(message)
        self.error_code = error_code


class MissingFieldsError(HackForgeError):
    """Required request fields were not supplied."""
    status_code = 400
    error_code = "MISSING_REQUIRED_FIELDS"

    def __init__(self, fields: list):
        super().__init__(
            "Title, prompt, and generated code are required",
            {"missing": fields},
        )
        self.fields = fields


# LLM error codes
GEMINI_NOT_CONFIGURED = "GEMINI_NOT_CONFIGURED"
INVALID_API_KEY = "INVALID_API_KEY"
QUOTA_EXCEEDED = "QUOTA_EXCEEDED"
MODEL_NOT_FOUND = "MODEL_NOT_FOUND"
GENERATION_ERROR = "GENERATION_ERROR"

LLM_ERROR_MESSAGES = {
    GEMINI_NOT_CONFIGURED: "Gemini API key is not configured. Please add your API key to the backend .env file.",
    INVALID_API_KEY: "Invalid Gemini API key. Please check your API key in the backend .env file.",
    QUOTA_EXCEEDED: "Gemini API quota exceeded. Please check your Gemini account billing.",
    MODEL_NOT_FOUND: "Gemini model not available. Please try again later.",
    GENERATION_ERROR: "Failed to generate code",
}


class LLMError(HackForgeError):
    """LLM provider error."""
    status_code = 500

    def __init__(self, provider: str, message: str, error_code: str = GENERATION_ERROR):
        super().__init__(
            f"LLM error ({provider}): {message}",
            {"provider": provider}
        )
        self.provider = provider
        self.error_code = error_code

    @property
    def public_message(self) -> str:
        return LLM_ERROR_MESSAGES.get(self.error_code, LLM_ERROR_MESSAGES[GENERATION_ERROR])


class RateLimitError(LLMError):
    """Provider quota or rate limit exhausted."""
    def __init__(self, provider: str, message: str = "quota exceeded"):
        super().__init__(provider, message, QUOTA_EXCEEDED)


class ProjectNotFoundError(HackForgeError):
    """No project with that id for that user."""
    status_code = 404
    error_code = "PROJECT_NOT_FOUND"

    def __init__(self, project_id: str):
        super().__init__("Project not found", {"project_id": project_id})
        self.project_id = project_id


class OfflineItemNotFoundError(HackForgeError):
    """Offline code or project missing from the offline store."""
    status_code = 404

    def __init__(self, kind: str, item_id: str):
        super().__init__(f"Offline {kind} not found", {"id": item_id})
        self.error_code = f"OFFLINE_{kind.upper()}_NOT_FOUND"
        self.kind = kind
        self.item_id = item_id


class PersistenceError(HackForgeError):
    """Database operation failed."""
    error_code = "PERSISTENCE_ERROR"

    def __init__(self, operation: str, message: str, error_code: Optional[str] = None):
        super().__init__(
            f"Failed to {operation}",
            {"operation": operation, "reason": message}
        )
        self.operation = operation
        if error_code:
            self.error_code = error_code


class InvalidPayloadError(HackForgeError):
    """Request body parsed but its content is unusable."""
    status_code = 400

    def __init__(self, error_code: str, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, details)
        self.error_code = error_code

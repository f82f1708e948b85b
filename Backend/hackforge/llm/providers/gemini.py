# hackforge/llm/providers/gemini.py
"""
Google Gemini provider implementation.
"""
import json
import aiohttp
from typing import Optional, Dict, Any

from hackforge.core.config import settings
from hackforge.core.exceptions import (
    LLMError,
    RateLimitError,
    GEMINI_NOT_CONFIGURED,
    INVALID_API_KEY,
    QUOTA_EXCEEDED,
    MODEL_NOT_FOUND,
    GENERATION_ERROR,
)
from hackforge.core.logging import log


PROVIDER = "gemini"
DEFAULT_MODEL = "gemini-2.0-flash"
API_URL = "https://generativelanguage.googleapis.com/v1beta/models"


def classify_error(status: int, body: str) -> str:
    """Map a failed Gemini response to one of the API error codes."""
    lowered = body.lower()
    if "api_key_invalid" in lowered or "api key not valid" in lowered or status in (401, 403):
        return INVALID_API_KEY
    if status == 429 or "quota" in lowered or "resource_exhausted" in lowered:
        return QUOTA_EXCEEDED
    if status == 404 or "model_not_found" in lowered:
        return MODEL_NOT_FOUND
    return GENERATION_ERROR


def build_payload(
    prompt: str,
    system_prompt: str,
    temperature: float,
    max_tokens: int,
    top_p: float,
    top_k: int,
) -> Dict[str, Any]:
    """Request body for generateContent. The system prompt is inlined ahead of the user request."""
    text = f"{system_prompt}\n\nUser request: {prompt}" if system_prompt else prompt
    return {
        "contents": [{"parts": [{"text": text}]}],
        "generationConfig": {
            "temperature": temperature,
            "maxOutputTokens": max_tokens,
            "topP": top_p,
            "topK": top_k,
        },
    }


def parse_response(data: Dict[str, Any]) -> Dict[str, Any]:
    """Pull the generated text and token usage out of a generateContent response."""
    candidates = data.get("candidates") or []
    if not candidates:
        raise LLMError(PROVIDER, "Invalid response format from Gemini API (no candidates)")

    parts = (candidates[0].get("content") or {}).get("parts") or []
    if not parts:
        raise LLMError(PROVIDER, "Invalid response format from Gemini API (no parts)")

    usage_metadata = data.get("usageMetadata", {})
    return {
        "text": parts[0].get("text", ""),
        "usage": {
            "input": usage_metadata.get("promptTokenCount", 0),
            "output": usage_metadata.get("candidatesTokenCount", 0),
            "total": usage_metadata.get("totalTokenCount", 0),
        },
    }


async def call(
    prompt: str,
    system_prompt: str = "",
    model: Optional[str] = None,
    temperature: float = 0.7,
    max_tokens: int = 2000,
    top_p: float = 0.8,
    top_k: int = 40,
) -> Dict[str, Any]:
    """
    Call Google Gemini API.

    Returns:
        Dict with ``text`` and ``usage`` ({"input", "output", "total"})

    Raises:
        LLMError with an error code from ``classify_error``
    """
    if not settings.llm.gemini_configured:
        raise LLMError(PROVIDER, "Gemini API key not configured", GEMINI_NOT_CONFIGURED)

    model = model or DEFAULT_MODEL
    url = f"{API_URL}/{model}:generateContent"
    headers = {
        "Content-Type": "application/json",
        "X-goog-api-key": settings.llm.gemini_api_key,
    }
    payload = build_payload(prompt, system_prompt, temperature, max_tokens, top_p, top_k)

    log("GEMINI", f"Calling {model} (prompt {len(prompt)} chars)")
    timeout = aiohttp.ClientTimeout(total=settings.llm.request_timeout)

    async with aiohttp.ClientSession() as session:
        async with session.post(url, json=payload, headers=headers, timeout=timeout) as response:
            text = await response.text()

            if response.status != 200:
                log("GEMINI", f"Error {response.status}: {text[:500]}")
                code = classify_error(response.status, text)
                if code == QUOTA_EXCEEDED:
                    raise RateLimitError(PROVIDER, f"{response.status}: {text[:200]}")
                raise LLMError(PROVIDER, f"Gemini API error {response.status}: {text[:200]}", code)

            try:
                data = json.loads(text)
            except json.JSONDecodeError as e:
                log("GEMINI", f"Failed to parse JSON: {text[:500]}")
                raise LLMError(PROVIDER, f"Failed to parse Gemini response: {e}")

    result = parse_response(data)
    log("GEMINI", f"Response received ({len(result['text'])} chars, {result['usage']['total']} tokens)")
    return result

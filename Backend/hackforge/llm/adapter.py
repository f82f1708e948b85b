# hackforge/llm/adapter.py
"""
Unified LLM adapter - single interface for code generation.

NOTE: No fallback and no retries. A provider failure surfaces as LLMError
and the API reports it with the matching error code.
"""
from typing import Optional, Dict, Any

from hackforge.core.config import settings
from hackforge.core.exceptions import LLMError
from hackforge.core.logging import log
from hackforge.llm.prompts import CODE_GENERATION_SYSTEM_PROMPT


# Type for LLM response with usage data
LLMResponse = Dict[str, Any]  # {"text": str, "usage": {"input": int, "output": int, "total": int}}


class LLMAdapter:
    """
    Unified adapter for LLM providers.

    Handles:
    - Provider selection
    - Generation config from settings
    - Wrapping unexpected failures (network, timeouts) as LLMError
    """

    def __init__(self):
        self.default_provider = settings.llm.default_provider
        self.default_model = settings.llm.gemini_model

    async def call(
        self,
        prompt: str,
        system_prompt: str = "",
        provider: Optional[str] = None,
        model: Optional[str] = None,
    ) -> LLMResponse:
        """
        Call an LLM provider once.

        Args:
            prompt: The user prompt, sent verbatim
            system_prompt: System instructions
            provider: Provider name (only gemini is wired)
            model: Model name

        Returns:
            Dict with {"text": str, "usage": {...}}

        Raises:
            LLMError: If the provider fails
        """
        provider = provider or self.default_provider
        model = model or self.default_model

        # Import here so tests can patch the provider module
        from .providers import gemini

        provider_map = {
            "gemini": gemini.call,
        }

        if provider not in provider_map:
            raise LLMError(provider, f"Unknown provider: {provider}")

        call_func = provider_map[provider]

        try:
            return await call_func(
                prompt=prompt,
                system_prompt=system_prompt,
                model=model,
                temperature=settings.llm.temperature,
                max_tokens=settings.llm.max_output_tokens,
                top_p=settings.llm.top_p,
                top_k=settings.llm.top_k,
            )
        except LLMError:
            raise
        except Exception as e:
            log("GEMINI", f"Provider error: {e}")
            raise LLMError(provider, f"Provider error: {e}")

    async def generate_code(self, prompt: str) -> LLMResponse:
        """Generate source code for a natural-language prompt."""
        return await self.call(prompt, system_prompt=CODE_GENERATION_SYSTEM_PROMPT)

    @property
    def model_name(self) -> str:
        return self.default_model


# Singleton instance
_adapter = LLMAdapter()


def get_adapter() -> LLMAdapter:
    return _adapter


async def generate_code(prompt: str) -> LLMResponse:
    """Convenience function for the code-generation call."""
    return await _adapter.generate_code(prompt)

# hackforge/api/code.py
"""
Code generation route.

Flow: validate prompt -> Gemini -> metadata extraction -> optional save.
Saving is best-effort; a failed save never fails the generation.
"""
import time
from datetime import datetime, timezone
from typing import Optional

from fastapi import APIRouter, Request
from pydantic import BaseModel

from hackforge.core.config import settings
from hackforge.core.exceptions import HackForgeError, LLMError, PromptValidationError
from hackforge.core.logging import log
from hackforge.core.rate_limit import limiter
from hackforge.db import get_store
from hackforge.lib.monitoring import record_generation
from hackforge.llm import generate_code as llm_generate_code, get_adapter
from hackforge.models import ProjectMetadata
from hackforge.services.cache import invalidate_user_projects
from hackforge.services.metadata import (
    default_title,
    estimate_tokens,
    extract_framework,
    extract_language,
    extract_tags,
)


router = APIRouter(prefix="/api", tags=["Code"])

MIN_PROMPT_LENGTH = 10


class GenerateRequest(BaseModel):
    prompt: Optional[str] = None
    saveToHistory: bool = True
    projectTitle: Optional[str] = None
    userId: Optional[str] = None


def validate_prompt(prompt: Optional[str]) -> str:
    if not prompt:
        raise PromptValidationError("MISSING_PROMPT", "Prompt is required")
    if len(prompt) < MIN_PROMPT_LENGTH:
        raise PromptValidationError(
            "PROMPT_TOO_SHORT",
            f"Please provide a more detailed description (at least {MIN_PROMPT_LENGTH} characters)",
        )
    return prompt


async def save_to_history(
    prompt: str,
    code: str,
    generation_time: int,
    user_id: str,
    title: Optional[str],
) -> Optional[str]:
    """Persist the result as a project. Returns its id, or None when saving failed."""
    try:
        project = await get_store().create(
            user_id=user_id,
            title=title or default_title(prompt),
            prompt=prompt,
            generated_code=code,
            framework=extract_framework(prompt, code),
            tags=extract_tags(prompt, code),
            metadata=ProjectMetadata(
                tokens_used=estimate_tokens(code),
                generation_time=generation_time,
                model=get_adapter().model_name,
            ),
        )
    except HackForgeError as e:
        log("GENERATE", f"⚠️ Failed to save project to history: {e.message} {e.details}")
        return None

    await invalidate_user_projects(user_id)
    log("GENERATE", f"💾 Project saved to history: {project.id}")
    return project.id


@router.post("/generate")
@limiter.limit(settings.rate_limits.generate)
async def generate(request: Request, data: GenerateRequest):
    """Generate code for a prompt and optionally save it as a project."""
    log("GENERATE", f"🎯 Request received (prompt {len(data.prompt or '')} chars)")

    try:
        prompt = validate_prompt(data.prompt)
    except PromptValidationError as e:
        log("GENERATE", f"❌ {e.error_code}")
        record_generation(e.error_code)
        raise

    started = time.perf_counter()
    try:
        result = await llm_generate_code(prompt)
    except LLMError as e:
        log("GENERATE", f"❌ Code generation error: {e.message}")
        record_generation(e.error_code, time.perf_counter() - started)
        raise
    elapsed = time.perf_counter() - started
    generation_time = int(elapsed * 1000)
    record_generation("success", elapsed)

    code = result["text"]
    log("GENERATE", f"✅ Code generated in {generation_time}ms ({len(code)} chars)")

    project_id = None
    if data.saveToHistory:
        project_id = await save_to_history(
            prompt,
            code,
            generation_time,
            data.userId or settings.default_user_id,
            data.projectTitle,
        )

    return {
        "success": True,
        "code": code,
        "prompt": prompt,
        "language": extract_language(prompt, code),
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "projectId": project_id,
        "generationTime": generation_time,
    }

# hackforge/api/analysis.py
"""
Code review routes backed by the code processor.
"""
from typing import Optional

from fastapi import APIRouter
from pydantic import BaseModel

from hackforge.core.exceptions import InvalidPayloadError
from hackforge.services.code_processor import detect_framework, explain_code, process_code


router = APIRouter(prefix="/api", tags=["Analysis"])


class AnalyzeRequest(BaseModel):
    code: Optional[str] = None
    framework: Optional[str] = None


def _require_code(code: Optional[str]) -> str:
    if not code or not code.strip():
        raise InvalidPayloadError("MISSING_CODE", "Code is required")
    return code


@router.post("/analyze")
async def analyze(data: AnalyzeRequest):
    """Security scan, syntax lint and suggestions for a piece of code."""
    code = _require_code(data.code)
    return {"success": True, "result": process_code(code, data.framework or "javascript")}


@router.post("/explain")
async def explain(data: AnalyzeRequest):
    """Static summary, key features and complexity of a piece of code."""
    code = _require_code(data.code)
    framework = data.framework or detect_framework(code)
    return {"success": True, "explanation": explain_code(code, framework)}

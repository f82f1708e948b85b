# hackforge/validation/__init__.py
"""
Validation Module - Single Entry Point for syntax checks.

Usage:
    from hackforge.validation import validate_syntax
"""
from .syntax_validator import (
    ValidationResult,
    validate_python_syntax,
    validate_javascript_syntax,
    validate_syntax,
    strip_code_fences,
)

__all__ = [
    "ValidationResult",
    "validate_python_syntax",
    "validate_javascript_syntax",
    "validate_syntax",
    "strip_code_fences",
]

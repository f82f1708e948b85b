# hackforge/validation/syntax_validator.py
"""
Lightweight syntax checks for generated code.

Validates:
- Python syntax (AST parsing)
- JavaScript/JSX basic structure (bracket balance)
- Common LLM mistakes (all code on one line, markdown fences)
"""
import ast
import re
from typing import Dict, List, Optional, Any

from hackforge.core.logging import log


FENCE_PATTERN = re.compile(r"^```[\w+-]*\s*\n(.*?)\n```\s*$", re.DOTALL)


class ValidationResult:
    """Result of syntax validation."""
    def __init__(
        self,
        valid: bool,
        errors: List[str] = None,
        warnings: List[str] = None,
    ):
        self.valid = valid
        self.errors = errors or []
        self.warnings = warnings or []

    def __bool__(self):
        return self.valid

    def to_dict(self) -> Dict[str, Any]:
        return {
            "valid": self.valid,
            "errors": self.errors,
            "warnings": self.warnings,
        }


def strip_code_fences(code: str) -> str:
    """Remove a single surrounding ```lang ... ``` block, which Gemini often adds."""
    match = FENCE_PATTERN.match(code.strip())
    return match.group(1) if match else code


def _single_line_error(code: str) -> Optional[str]:
    if len(code.split("\n")) == 1 and len(code) > 200:
        return (
            f"Entire content appears to be on a single line ({len(code)} chars). "
            "Newlines were probably stripped from the code."
        )
    return None


def validate_python_syntax(code: str, filename: str = "generated.py") -> ValidationResult:
    """
    Validate Python code using AST parsing.

    Catches:
    - Syntax errors (reported with line and column)
    - Empty content
    """
    if not code or not code.strip():
        return ValidationResult(False, ["Empty file content"])

    single_line = _single_line_error(code)
    if single_line:
        return ValidationResult(False, [single_line])

    code = strip_code_fences(code)
    try:
        ast.parse(code, filename=filename)
    except SyntaxError as e:
        log("VALIDATION", f"Python syntax error in {filename}: {e.msg} (line {e.lineno})")
        return ValidationResult(False, [f"SyntaxError at line {e.lineno}, column {e.offset}: {e.msg}"])

    return ValidationResult(True)


def validate_javascript_syntax(code: str, filename: str = "generated.js") -> ValidationResult:
    """
    Basic JavaScript/JSX validation without a full parser.

    Severe bracket imbalance is an error, slight imbalance a warning.
    """
    if not code or not code.strip():
        return ValidationResult(False, ["Empty file content"])

    single_line = _single_line_error(code)
    if single_line:
        return ValidationResult(False, [single_line])

    code = strip_code_fences(code)
    errors = []
    warnings = []

    open_parens = code.count('(') - code.count(')')
    open_brackets = code.count('[') - code.count(']')
    open_braces = code.count('{') - code.count('}')

    if abs(open_parens) > 2:
        errors.append(f"Severely unbalanced parentheses: {open_parens}")
    if abs(open_brackets) > 2:
        errors.append(f"Severely unbalanced brackets: {open_brackets}")
    if abs(open_braces) > 2:
        errors.append(f"Severely unbalanced braces: {open_braces}")

    if errors:
        return ValidationResult(False, errors)

    if open_parens != 0:
        warnings.append(f"Slightly unbalanced parentheses: {open_parens}")
    if open_brackets != 0:
        warnings.append(f"Slightly unbalanced brackets: {open_brackets}")
    if open_braces != 0:
        warnings.append(f"Slightly unbalanced braces: {open_braces}")

    return ValidationResult(True, [], warnings)


def validate_syntax(code: str, language: str) -> ValidationResult:
    """Dispatch on language; anything that isn't Python gets the JS checks."""
    if language == "python":
        return validate_python_syntax(code)
    return validate_javascript_syntax(code)

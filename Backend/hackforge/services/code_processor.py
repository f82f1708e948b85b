# hackforge/services/code_processor.py
"""
Post-generation review of code: framework detection, a security pattern scan,
syntax lint, suggestions and a rough complexity read-out.
"""
import re
from typing import Any, Dict, List

from hackforge.core.logging import log
from hackforge.validation import validate_syntax


SECURITY_PATTERNS = [
    ("eval(", "Use of eval() is dangerous and should be avoided"),
    ("new function", "Dynamic function creation can be a security risk"),
    ("innerhtml", "innerHTML can lead to XSS attacks, consider textContent"),
    ("document.write", "document.write can be dangerous in certain contexts"),
    ("settimeout", "setTimeout with user input can be a security risk"),
    ("setinterval", "setInterval with user input can be a security risk"),
    ("localstorage", "Be careful with localStorage, ensure data validation"),
    ("sessionstorage", "Be careful with sessionStorage, ensure data validation"),
]

KEY_FEATURES = [
    (("usestate", "state"), "State Management"),
    (("useeffect", "effect"), "Side Effects"),
    (("async", "await"), "Async Operations"),
    (("fetch", "axios"), "API Integration"),
    (("router", "navigate"), "Routing"),
    (("form", "input"), "Form Handling"),
    (("css", "styled"), "Styling"),
]

FUNCTION_PATTERN = re.compile(r"function|=>")
CONDITIONAL_PATTERN = re.compile(r"if|else|switch|case")
LOOP_PATTERN = re.compile(r"for|while|do|forEach|map|filter")


def count_lines(code: str) -> int:
    return len(code.split("\n"))


def detect_framework(code: str) -> str:
    lower = code.lower()

    if "react" in lower or "jsx" in lower or "usestate" in lower:
        return "react"
    if "next" in lower or "pages" in lower or "app/" in lower:
        return "nextjs"
    if "vue" in lower or "v-bind" in lower or "v-model" in lower:
        return "vue"
    if "python" in lower or "def " in lower or "import " in lower:
        return "python"
    if "angular" in lower or "@component" in lower or "ngoninit" in lower:
        return "angular"
    if "svelte" in lower or "{#if" in lower or "{#each" in lower:
        return "svelte"

    return "javascript"


def security_review(code: str) -> List[str]:
    """Warnings for risky patterns found in the code."""
    lower = code.lower()
    warnings = [message for pattern, message in SECURITY_PATTERNS if pattern in lower]

    if ("sql" in lower or "query" in lower) and "${" in lower and "}" in lower:
        warnings.append("Potential SQL injection risk with template literals in queries")

    if "innerhtml" in lower or "outerhtml" in lower:
        warnings.append("Potential XSS risk with innerHTML/outerHTML, consider textContent")

    return warnings


def lint_code(code: str, framework: str) -> Dict[str, Any]:
    """
    Syntax lint via the validation module.

    Score is 100 minus 10 per error and 2 per warning, floored at 0.
    """
    language = "python" if framework == "python" else "javascript"
    result = validate_syntax(code, language)

    issues = [{"severity": "error", "message": m} for m in result.errors]
    issues += [{"severity": "warning", "message": m} for m in result.warnings]
    score = max(0, 100 - len(result.errors) * 10 - len(result.warnings) * 2)

    return {
        "issues": issues,
        "score": score,
        "errorCount": len(result.errors),
        "warningCount": len(result.warnings),
    }


def generate_suggestions(code: str, framework: str, issues: List[Any]) -> List[str]:
    suggestions = []

    if framework == "react":
        if "useState" not in code and "useEffect" not in code:
            suggestions.append("Consider using React hooks for state management")
        if "class " in code and "extends" in code:
            suggestions.append("Consider converting class component to functional component with hooks")
    elif framework == "nextjs":
        if "pages/" in code and "getStaticProps" not in code and "getServerSideProps" not in code:
            suggestions.append("Consider adding data fetching methods for better SEO")
    elif framework == "vue":
        if "data()" in code and "computed" not in code:
            suggestions.append("Consider using computed properties for derived state")

    if issues:
        suggestions.append("Fix linting issues to improve code quality")

    if "map(" in code and "filter(" in code:
        suggestions.append("Consider combining map and filter operations for better performance")

    if "setTimeout" in code or "setInterval" in code:
        suggestions.append("Remember to clear timeouts/intervals to prevent memory leaks")

    return suggestions


def process_code(code: str, framework: str = "javascript") -> Dict[str, Any]:
    """
    Review generated code.

    The framework argument is a hint; when detection disagrees the detected
    framework wins and a suggestion records it.
    """
    results: Dict[str, Any] = {
        "originalCode": code,
        "processedCode": code,
        "framework": framework,
        "issues": [],
        "securityWarnings": [],
        "suggestions": [],
        "metadata": {
            "lineCount": count_lines(code),
            "characterCount": len(code),
            "hasSecurityIssues": False,
            "lintScore": 100,
        },
    }

    detected = detect_framework(code)
    if detected != framework:
        results["framework"] = detected
        results["suggestions"].append(f"Detected framework: {detected}")

    warnings = security_review(code)
    results["securityWarnings"] = warnings
    results["metadata"]["hasSecurityIssues"] = bool(warnings)

    lint = lint_code(code, detected)
    results["issues"] = lint["issues"]
    results["metadata"]["lintScore"] = lint["score"]

    results["suggestions"] += generate_suggestions(code, detected, results["issues"])

    log("ANALYZE", f"Processed {len(code)} chars: {detected}, lint {lint['score']}, {len(warnings)} security warnings")
    return results


def extract_key_features(code: str) -> List[str]:
    lower = code.lower()
    return [label for needles, label in KEY_FEATURES if any(n in lower for n in needles)]


def assess_complexity(code: str) -> Dict[str, Any]:
    lines = count_lines(code)
    functions = len(FUNCTION_PATTERN.findall(code))
    conditionals = len(CONDITIONAL_PATTERN.findall(code))
    loops = len(LOOP_PATTERN.findall(code))

    if lines > 100 or functions > 10 or conditionals > 20 or loops > 10:
        level = "High"
    elif lines > 50 or functions > 5 or conditionals > 10 or loops > 5:
        level = "Medium"
    else:
        level = "Low"

    return {
        "level": level,
        "metrics": {
            "lines": lines,
            "functions": functions,
            "conditionals": conditionals,
            "loops": loops,
        },
    }


def explain_code(code: str, framework: str) -> Dict[str, Any]:
    """Static summary of the code; no LLM call."""
    return {
        "summary": f"This is a {framework} application with {count_lines(code)} lines of code.",
        "keyFeatures": extract_key_features(code),
        "complexity": assess_complexity(code),
    }

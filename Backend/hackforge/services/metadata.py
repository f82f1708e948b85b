# hackforge/services/metadata.py
"""
Display metadata for generated code.

Plain substring heuristics over the prompt and the generated code. Rules are
checked in order and the first match wins; these are display hints, not a
classifier.
"""
import math
from typing import List, Tuple


# (name, prompt keywords, code keywords)
FRAMEWORK_RULES: List[Tuple[str, Tuple[str, ...], Tuple[str, ...]]] = [
    ("react", ("react",), ("react", "jsx")),
    ("nextjs", ("next.js", "nextjs"), ("next",)),
    ("vue", ("vue",), ("vue",)),
    ("angular", ("angular",), ("angular",)),
    ("express", ("express",), ("express",)),
    ("django", ("django",), ("django",)),
    ("flask", ("flask",), ("flask",)),
    ("laravel", ("laravel",), ("laravel",)),
    ("spring", ("spring",), ("spring",)),
    ("fastapi", ("fastapi",), ("fastapi",)),
]
DEFAULT_FRAMEWORK = "react"

TAG_RULES: List[Tuple[str, Tuple[str, ...], Tuple[str, ...]]] = [
    ("api", ("api",), ("fetch", "axios")),
    ("database", ("database", "db"), ("mongodb", "sql")),
    ("authentication", ("authentication", "auth"), ("login", "jwt")),
    ("ui", ("ui", "interface", "component"), ()),
    ("responsive", ("responsive", "mobile"), ()),
    ("animation", ("animation",), ("animation", "transition")),
    ("form", ("form",), ("form", "input")),
    ("todo", ("todo", "task"), ()),
    ("ecommerce", ("ecommerce", "shop"), ()),
    ("blog", ("blog", "cms"), ()),
]

DEFAULT_LANGUAGE = "javascript"


def _any_in(text: str, needles: Tuple[str, ...]) -> bool:
    return any(needle in text for needle in needles)


def _matches(prompt: str, code: str, prompt_keys: Tuple[str, ...], code_keys: Tuple[str, ...]) -> bool:
    return _any_in(prompt, prompt_keys) or _any_in(code, code_keys)


def extract_framework(prompt: str, code: str) -> str:
    """Guess the framework a prompt/code pair targets."""
    prompt_lower, code_lower = prompt.lower(), code.lower()
    for name, prompt_keys, code_keys in FRAMEWORK_RULES:
        if _matches(prompt_lower, code_lower, prompt_keys, code_keys):
            return name
    return DEFAULT_FRAMEWORK


def extract_tags(prompt: str, code: str) -> List[str]:
    """Every tag whose rule matches, in rule order."""
    prompt_lower, code_lower = prompt.lower(), code.lower()
    return [
        name
        for name, prompt_keys, code_keys in TAG_RULES
        if _matches(prompt_lower, code_lower, prompt_keys, code_keys)
    ]


def extract_language(prompt: str, code: str) -> str:
    """Guess the programming language of the generated code."""
    p, c = prompt.lower(), code.lower()

    if "python" in p or "def " in c or "import " in c:
        return "python"
    if "javascript" in p or "js" in p or "function " in c or "const " in c:
        return "javascript"
    if "typescript" in p or "ts" in p or ": string" in c or ": number" in c:
        return "typescript"
    if "react" in p or "jsx" in c or "react" in c:
        return "javascript"
    if "html" in p or "<!doctype" in c or "<html" in c:
        return "html"
    if "css" in p or ("{" in c and ":" in c):
        return "css"
    if "java" in p or "public class" in c:
        return "java"
    if "c++" in p or "#include" in c:
        return "cpp"
    if "c#" in p or "using system" in c:
        return "csharp"
    if "php" in p or "<?php" in c:
        return "php"
    if "ruby" in p or ("def " in c and "end" in c):
        return "ruby"
    if "go" in p or "package main" in c:
        return "go"
    if "rust" in p or "fn " in c:
        return "rust"
    if "swift" in p or "import swift" in c:
        return "swift"
    if "kotlin" in p or "fun " in c:
        return "kotlin"

    return DEFAULT_LANGUAGE


def estimate_tokens(code: str) -> int:
    """Rough token count: four characters per token."""
    return math.ceil(len(code) / 4)


def default_title(prompt: str) -> str:
    return f"Generated from: {prompt[:50]}..."

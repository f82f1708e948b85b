"""
Tests for the syntax validator used by the lint step.
"""
from hackforge.validation import (
    strip_code_fences,
    validate_javascript_syntax,
    validate_python_syntax,
    validate_syntax,
)


def test_strip_code_fences():
    fenced = "```python\nprint('hi')\n```"
    assert strip_code_fences(fenced) == "print('hi')"
    assert strip_code_fences("print('hi')") == "print('hi')"


def test_python_valid():
    result = validate_python_syntax("def f(x):\n    return x * 2\n")
    assert result.valid
    assert result.errors == []


def test_python_valid_inside_fences():
    assert validate_python_syntax("```python\nx = 1\ny = 2\n```")


def test_python_syntax_error_reports_location():
    result = validate_python_syntax("x = 1\nif x\n    pass\n")
    assert not result.valid
    assert result.errors[0].startswith("SyntaxError at line 2")


def test_empty_content():
    assert validate_python_syntax("   ").errors == ["Empty file content"]
    assert validate_javascript_syntax("").errors == ["Empty file content"]


def test_single_line_blob_is_rejected():
    blob = "const a = 1; " * 30
    result = validate_javascript_syntax(blob)
    assert not result.valid
    assert "single line" in result.errors[0]


def test_javascript_severe_imbalance():
    result = validate_javascript_syntax("foo((((\nbar\n")
    assert not result.valid
    assert result.errors == ["Severely unbalanced parentheses: 4"]


def test_javascript_slight_imbalance_is_warning():
    result = validate_javascript_syntax("const a = [1, 2;\nconst b = {};\n")
    assert result.valid
    assert result.warnings == ["Slightly unbalanced brackets: 1"]


def test_validate_syntax_dispatch():
    assert not validate_syntax("def (:\n  x\n", "python").valid
    # the JS check only looks at bracket balance
    assert validate_syntax("def (:\n  x)\n", "javascript").valid
    assert validate_syntax("def (:\n  x)\n", "typescript").to_dict() == {
        "valid": True,
        "errors": [],
        "warnings": [],
    }

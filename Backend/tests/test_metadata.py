"""
Unit tests for the framework / tag / language heuristics.
"""
import pytest

from hackforge.services.metadata import (
    default_title,
    estimate_tokens,
    extract_framework,
    extract_language,
    extract_tags,
)


class TestExtractFramework:

    @pytest.mark.parametrize(
        "prompt, code, expected",
        [
            ("Build a React counter", "", "react"),
            ("counter", "return <div>jsx</div>", "react"),
            ("A Next.js blog", "", "nextjs"),
            ("", "import Link from 'next/link'", "nextjs"),
            ("Simple VUE todo list", "", "vue"),
            ("an Angular form", "", "angular"),
            ("REST service on express", "", "express"),
            ("django admin clone", "", "django"),
            ("", "from flask import Flask", "flask"),
            ("laravel crud", "", "laravel"),
            ("spring boot service", "", "spring"),
            ("", "from fastapi import FastAPI", "fastapi"),
        ],
    )
    def test_detects(self, prompt, code, expected):
        assert extract_framework(prompt, code) == expected

    def test_first_rule_wins(self):
        # react is checked before vue
        assert extract_framework("vue or react?", "") == "react"

    def test_defaults_to_react(self):
        assert extract_framework("a calculator", "print(1 + 1)") == "react"


class TestExtractTags:

    def test_prompt_keywords(self):
        prompt = "Responsive shop with user authentication and a database"
        assert extract_tags(prompt, "") == ["database", "authentication", "responsive", "ecommerce"]

    def test_code_keywords(self):
        code = "fetch('/items'); const jwt = login(); el.style.transition = 'all 1s';"
        assert extract_tags("make something", code) == ["api", "authentication", "animation"]

    def test_ordered_and_unique(self):
        tags = extract_tags("todo task form with form input", "<form><input/></form>")
        assert tags == ["form", "todo"]

    def test_no_match(self):
        assert extract_tags("hello", "x = 1") == []


class TestExtractLanguage:

    @pytest.mark.parametrize(
        "prompt, code, expected",
        [
            ("write python", "", "python"),
            ("", "def main():\n    pass", "python"),
            ("", "const x = 1;", "javascript"),
            ("", "let name: string = 'a'", "typescript"),
            ("", "<!DOCTYPE html><html></html>", "html"),
            ("", "body { color: red }", "css"),
            ("", "public class Main {}", "java"),
            ("", "#include <stdio.h>", "cpp"),
            ("", "using System;", "csharp"),
            ("", "<?php echo 1; ?>", "php"),
            ("", "package main", "go"),
            ("", "fn main()", "rust"),
        ],
    )
    def test_detects(self, prompt, code, expected):
        assert extract_language(prompt, code) == expected

    def test_defaults_to_javascript(self):
        assert extract_language("hello", "x") == "javascript"


def test_estimate_tokens():
    assert estimate_tokens("") == 0
    assert estimate_tokens("abcd") == 1
    assert estimate_tokens("abcde") == 2


def test_default_title_truncates_prompt():
    prompt = "x" * 80
    assert default_title(prompt) == f"Generated from: {'x' * 50}..."
    assert default_title("short") == "Generated from: short..."

"""
LLM module - Unified interface for the code-generation provider.
"""
from .adapter import LLMAdapter, LLMResponse, generate_code, get_adapter

__all__ = ["LLMAdapter", "LLMResponse", "generate_code", "get_adapter"]

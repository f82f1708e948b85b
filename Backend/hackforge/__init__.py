"""
HackForge - generate code from natural-language prompts.
"""
__version__ = "1.0.0"

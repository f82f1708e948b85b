"""
Services module - persistence, caching and code heuristics.
"""

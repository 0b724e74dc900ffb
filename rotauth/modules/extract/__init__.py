"""
Extract Module - Black Box Interface

Purpose: Pull one key's value out of a large JSON document
Interface: extract_value(), extract_span()
Hidden: Bracket-balance scan, serialization of non-text input

Replaceable with a full parse-and-search implementation without affecting callers.
"""

from .extractor import extract_span, extract_value

__all__ = ["extract_span", "extract_value"]

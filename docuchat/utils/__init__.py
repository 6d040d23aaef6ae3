"""Utility modules for docuchat."""

from .text import safe_truncate, strip_code_fences, strip_code_fences_stream

__all__ = ["safe_truncate", "strip_code_fences", "strip_code_fences_stream"]

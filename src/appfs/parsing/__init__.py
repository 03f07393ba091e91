"""Lexical scanning of project sources."""

from .imports import has_default_export, scan_imports

__all__ = ["has_default_export", "scan_imports"]

"""Incremental import graph construction."""

from .builder import DependencyGraphBuilder, FileImports

__all__ = ["DependencyGraphBuilder", "FileImports"]

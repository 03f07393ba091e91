"""
appfs: Virtual project filesystem and module resolution engine.

Holds generated React projects in memory, resolves their `@/` and relative
imports, and validates them structurally before they are rendered.
"""

from .config import ProjectSettings
from .project import FileOperation, OperationType, Project, ProjectBundle
from .validation import ValidationReport, Violation, ViolationKind

__version__ = "0.1.0"

__all__ = [
    "FileOperation",
    "OperationType",
    "Project",
    "ProjectBundle",
    "ProjectSettings",
    "ValidationReport",
    "Violation",
    "ViolationKind",
]

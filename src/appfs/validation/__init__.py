"""Structural validation of virtual projects."""

from .models import Severity, ValidationReport, Violation, ViolationKind
from .validator import ProjectValidator

__all__ = [
    "ProjectValidator",
    "Severity",
    "ValidationReport",
    "Violation",
    "ViolationKind",
]

"""
Validation report models.

A ValidationReport is the single surface handed to whatever orchestrates the
generation loop: every problem found in one pass, errors and warnings apart.
"""

from enum import StrEnum
from typing import List, Optional

from pydantic import BaseModel, Field

from ..core.errors import (
    AppFSError,
    DisallowedFileKindError,
    ImportCycleError,
    MissingDefaultExportError,
    MissingEntryError,
    UnresolvedImportError,
)


class ViolationKind(StrEnum):
    """One value per structural check."""
    MISSING_ENTRY = "MissingEntryError"
    MISSING_DEFAULT_EXPORT = "MissingDefaultExportError"
    DISALLOWED_FILE_KIND = "DisallowedFileKindError"
    UNRESOLVED_IMPORT = "UnresolvedImportError"
    IMPORT_CYCLE = "ImportCycleError"
    ORPHANED_FILE = "OrphanedFile"


class Severity(StrEnum):
    ERROR = "error"
    WARNING = "warning"


class Violation(BaseModel):
    """
    A single problem found by the validator.

    Attributes:
        kind: Which check produced it.
        severity: error or warning.
        message: Human-readable description.
        path: File the problem is attached to, if any.
        specifier: Offending specifier for unresolved imports.
        paths: Cycle members, in store order.
        line: 1-based line of the offending import, when known.
        file_kind: Rejected kind for disallowed files.
    """
    kind: ViolationKind
    severity: Severity = Severity.ERROR
    message: str
    path: Optional[str] = None
    specifier: Optional[str] = None
    paths: List[str] = Field(default_factory=list)
    line: Optional[int] = None
    file_kind: Optional[str] = None

    @property
    def is_error(self) -> bool:
        return self.severity == Severity.ERROR

    def as_exception(self) -> Optional[AppFSError]:
        """The taxonomy exception equivalent to this violation (None for orphans)."""
        if self.kind == ViolationKind.MISSING_ENTRY:
            return MissingEntryError(self.path or "")
        if self.kind == ViolationKind.MISSING_DEFAULT_EXPORT:
            return MissingDefaultExportError(self.path or "")
        if self.kind == ViolationKind.DISALLOWED_FILE_KIND:
            return DisallowedFileKindError(self.path or "", self.file_kind)
        if self.kind == ViolationKind.UNRESOLVED_IMPORT:
            return UnresolvedImportError(self.path or "", self.specifier or "")
        if self.kind == ViolationKind.IMPORT_CYCLE:
            return ImportCycleError(self.paths)
        return None


class ValidationReport(BaseModel):
    """
    Result of one validation pass.

    Attributes:
        entry_path: The project's entry file.
        generation: Store generation the pass ran against.
        violations: Errors, in check order.
        warnings: Non-fatal findings (unreachable cycles, orphaned files).
        reachable: Files reachable from the entry, in store order.
        orphans: Files not reachable from the entry, in store order.
    """
    entry_path: str
    generation: int
    violations: List[Violation] = Field(default_factory=list)
    warnings: List[Violation] = Field(default_factory=list)
    reachable: List[str] = Field(default_factory=list)
    orphans: List[str] = Field(default_factory=list)

    def add(self, violation: Violation) -> None:
        if violation.is_error:
            self.violations.append(violation)
        else:
            self.warnings.append(violation)

    @property
    def ok(self) -> bool:
        return not self.violations

    def kinds(self) -> List[ViolationKind]:
        return [v.kind for v in self.violations]

    def of_kind(self, kind: ViolationKind) -> List[Violation]:
        return [v for v in self.violations if v.kind == kind]

    def exceptions(self) -> List[AppFSError]:
        return [exc for exc in (v.as_exception() for v in self.violations) if exc is not None]

    def summary(self) -> str:
        if self.ok:
            return f"✅ Valid ({len(self.reachable)} reachable files, {len(self.warnings)} warnings)"
        return f"❌ {len(self.violations)} violation(s), {len(self.warnings)} warning(s)"

    def to_json(self, indent: int = 2) -> str:
        return self.model_dump_json(indent=indent)

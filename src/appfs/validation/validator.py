"""
Project Validator.

Checks a store snapshot against the structural rules of a generated project
and collects every violation instead of failing fast, so a generation pass can
see all of its problems at once.

Checks:
    1. The entry file exists                       -> MissingEntryError
    2. The entry file has a default export         -> MissingDefaultExportError
    3. No file of a disallowed kind is present     -> DisallowedFileKindError
    4. Every local import resolves                 -> UnresolvedImportError
    5. No import cycle is reachable from the entry -> ImportCycleError
       (cycles outside the reachable set and orphaned files are warnings)
"""

import logging
from typing import Generator, Optional

from ..config import ProjectSettings, is_markup_extension
from ..core.graph import DependencyGraph
from ..core.paths import extension
from ..core.store import FileView
from ..graph.builder import DependencyGraphBuilder
from ..parsing.imports import has_default_export
from .models import Severity, ValidationReport, Violation, ViolationKind

logger = logging.getLogger(__name__)


class ProjectValidator:
    """
    Stateless validation pass over a store snapshot.

    The validator keeps no state between passes apart from the builder's
    caches, which are keyed on file versions and store generations.
    """

    def __init__(self, builder: DependencyGraphBuilder, settings: Optional[ProjectSettings] = None):
        self.builder = builder
        self.settings = settings or builder.resolver.settings

    def validate(self, source: FileView, entry_path: Optional[str] = None) -> ValidationReport:
        """
        Validate a store or snapshot.

        Args:
            source: What to validate. Pass a snapshot when writers may be active.
            entry_path: Entry file; defaults to the configured one.

        Returns:
            ValidationReport with every violation found.
        """
        walk = self.iter_validate(source, entry_path)
        while True:
            try:
                next(walk)
            except StopIteration as done:
                return done.value

    def iter_validate(
        self,
        source: FileView,
        entry_path: Optional[str] = None,
    ) -> Generator[str, None, ValidationReport]:
        """Generator form of `validate`, yielding after each file is processed."""
        entry = entry_path or self.settings.entry_path
        report = ValidationReport(entry_path=entry, generation=source.generation)

        self._check_entry(source, entry, report)
        self._check_kinds(source, report)

        graph = yield from self.builder.iter_full_graph(source, entry)

        self._check_imports(graph, report)
        self._check_cycles(graph, report)
        self._check_orphans(graph, report)

        report.reachable = [p for p in graph.iter_files() if p in graph.reachable]
        report.orphans = graph.orphans()

        logger.info(f"Validated {len(source)} files at generation {source.generation}: {report.summary()}")
        return report

    # =========================================================================
    # Checks
    # =========================================================================

    def _check_entry(self, source: FileView, entry: str, report: ValidationReport) -> None:
        node = source.get(entry)
        if node is None:
            report.add(Violation(
                kind=ViolationKind.MISSING_ENTRY,
                message=f"Entry file {entry} does not exist",
                path=entry,
            ))
            return

        if not has_default_export(node.content):
            report.add(Violation(
                kind=ViolationKind.MISSING_DEFAULT_EXPORT,
                message=f"{entry} must export the root component as its default export",
                path=entry,
            ))

    def _check_kinds(self, source: FileView, report: ValidationReport) -> None:
        # Store writes already reject these; nodes placed by other means are caught here
        for node in source.nodes():
            if node.kind.is_allowed and not is_markup_extension(extension(node.path)):
                continue
            report.add(Violation(
                kind=ViolationKind.DISALLOWED_FILE_KIND,
                message=f"{node.path} is a {node.kind} file; markup files are not allowed",
                path=node.path,
                file_kind=node.kind.value,
            ))

    def _check_imports(self, graph: DependencyGraph, report: ValidationReport) -> None:
        for item in graph.unresolved:
            report.add(Violation(
                kind=ViolationKind.UNRESOLVED_IMPORT,
                message=f"Cannot resolve '{item.specifier}' from {item.from_path}",
                path=item.from_path,
                specifier=item.specifier,
                line=item.line,
            ))

    def _check_cycles(self, graph: DependencyGraph, report: ValidationReport) -> None:
        for members in graph.find_cycles():
            reachable = any(path in graph.reachable for path in members)
            report.add(Violation(
                kind=ViolationKind.IMPORT_CYCLE,
                severity=Severity.ERROR if reachable else Severity.WARNING,
                message=f"Import cycle between {', '.join(members)}",
                path=members[0],
                paths=members,
            ))

    def _check_orphans(self, graph: DependencyGraph, report: ValidationReport) -> None:
        if not self.settings.report_orphans:
            return
        for path in graph.orphans():
            report.add(Violation(
                kind=ViolationKind.ORPHANED_FILE,
                severity=Severity.WARNING,
                message=f"{path} is not reachable from {graph.entry_path}",
                path=path,
            ))

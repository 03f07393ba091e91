"""
Project facade.

A Project owns one virtual store, a fixed entry path and the resolver, graph
builder and validator derived from them. The generation loop feeds it file
operations one at a time and asks it for either a validated bundle to render
or the report listing what to fix.
"""

import asyncio
import logging
import threading
from enum import StrEnum
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, Field, model_validator

from .config import ProjectSettings
from .core.errors import InvalidPathError, NotFoundError, StaleValidationError
from .core.graph import DependencyGraph
from .core.paths import normalize
from .core.resolver import ModuleResolver, Resolution
from .core.result import Err, Ok, Result
from .core.store import KindLike, StoreSnapshot, VirtualFileStore
from .core.types import FileNode
from .graph.builder import DependencyGraphBuilder
from .validation.models import ValidationReport
from .validation.validator import ProjectValidator

logger = logging.getLogger(__name__)


class OperationType(StrEnum):
    """File operations the generation process may emit."""
    CREATE = "create"
    REPLACE = "replace"
    DELETE = "delete"
    RENAME = "rename"


class FileOperation(BaseModel):
    """
    One discrete edit emitted by the generation process.

    Attributes:
        op: What to do.
        path: Target path.
        kind: File kind for create/replace; None infers it from the extension.
        content: File content for create/replace.
        new_path: Destination for rename.
    """
    op: OperationType
    path: str
    kind: Optional[str] = None
    content: str = ""
    new_path: Optional[str] = None

    @model_validator(mode="after")
    def _rename_needs_target(self) -> "FileOperation":
        if self.op == OperationType.RENAME and not self.new_path:
            raise ValueError("rename requires new_path")
        return self


class ProjectBundle(BaseModel):
    """A validated project snapshot, ready for the renderer."""
    entry_path: str
    generation: int
    files: List[FileNode] = Field(default_factory=list)

    @classmethod
    def from_snapshot(cls, snapshot: StoreSnapshot, entry_path: str) -> "ProjectBundle":
        return cls(entry_path=entry_path, generation=snapshot.generation, files=snapshot.nodes())

    def as_file_map(self) -> Dict[str, str]:
        return {node.path: node.content for node in self.files}


class Project:
    """
    A virtual project: store plus a fixed entry file.

    Example:
        ```python
        project = Project()
        project.write("/App.jsx", "component", APP_SOURCE)
        project.write("/components/Header.jsx", "component", HEADER_SOURCE)
        report = project.validate()
        assert report.ok
        ```
    """

    def __init__(
        self,
        store: Optional[VirtualFileStore] = None,
        entry_path: Optional[str] = None,
        settings: Optional[ProjectSettings] = None,
    ):
        """
        Initialize the project.

        Args:
            store: Existing store to adopt; a fresh one is created otherwise.
            entry_path: Entry file, fixed for the project's lifetime.
            settings: Resolution and reporting settings.
        """
        self.settings = settings or ProjectSettings()
        self._entry_path = normalize(entry_path or self.settings.entry_path)
        self.store = store if store is not None else VirtualFileStore()
        self.resolver = ModuleResolver(self.store, self.settings)
        self.builder = DependencyGraphBuilder(self.resolver)
        self.validator = ProjectValidator(self.builder, self.settings)
        self._mutations = threading.Lock()

    @classmethod
    def from_config(cls, config_path: Optional[Path] = None) -> "Project":
        """Create an empty project with settings loaded from YAML."""
        return cls(settings=ProjectSettings.load(config_path))

    @property
    def entry_path(self) -> str:
        return self._entry_path

    @property
    def generation(self) -> int:
        return self.store.generation

    # =========================================================================
    # Edits
    # =========================================================================

    def apply(self, operation: Union[FileOperation, Dict[str, Any]]) -> Optional[FileNode]:
        """
        Apply one file operation.

        Args:
            operation: A FileOperation or a dict that validates as one.

        Returns:
            The written/moved node, or the removed node for deletes.

        Raises:
            InvalidPathError: On create of an existing path or a bad path.
            NotFoundError: On replace/delete/rename of a missing path.
            DisallowedFileKindError: On markup files.
        """
        if not isinstance(operation, FileOperation):
            operation = FileOperation.model_validate(operation)

        with self._mutations:
            if operation.op == OperationType.CREATE:
                if self.store.exists(operation.path):
                    raise InvalidPathError(normalize(operation.path), "file already exists")
                return self.store.write(operation.path, operation.kind, operation.content)
            if operation.op == OperationType.REPLACE:
                if not self.store.exists(operation.path):
                    raise NotFoundError(normalize(operation.path))
                return self.store.write(operation.path, operation.kind, operation.content)
            if operation.op == OperationType.DELETE:
                return self._delete(operation.path)
            return self._rename(operation.path, operation.new_path)

    def apply_all(self, operations: List[Union[FileOperation, Dict[str, Any]]]) -> int:
        """Apply operations in order; stops at the first failure."""
        for operation in operations:
            self.apply(operation)
        return len(operations)

    def write(self, path: str, kind: KindLike = None, content: str = "") -> FileNode:
        with self._mutations:
            return self.store.write(path, kind, content)

    def delete(self, path: str) -> FileNode:
        with self._mutations:
            return self._delete(path)

    def rename(self, old_path: str, new_path: str) -> FileNode:
        with self._mutations:
            return self._rename(old_path, new_path)

    def _delete(self, path: str) -> FileNode:
        node = self.store.delete(path)
        self.builder.invalidate(node.path)
        return node

    def _rename(self, old_path: str, new_path: str) -> FileNode:
        node = self.store.rename(old_path, new_path)
        self.builder.invalidate(normalize(old_path))
        return node

    # =========================================================================
    # Reads
    # =========================================================================

    def read(self, path: str) -> FileNode:
        return self.store.read(path)

    def list(self) -> List[str]:
        return self.store.list()

    def resolve(self, from_path: str, specifier: str) -> Resolution:
        return self.resolver.resolve(normalize(from_path), specifier)

    def graph(self) -> DependencyGraph:
        """Full import graph of the current snapshot."""
        return self.builder.full_graph(self.store.snapshot(), self._entry_path)

    # =========================================================================
    # Validation
    # =========================================================================

    def validate(self) -> ValidationReport:
        """Validate a snapshot of the current store."""
        return self.validator.validate(self.store.snapshot(), self._entry_path)

    async def validate_async(self) -> ValidationReport:
        """
        Validate cooperatively, yielding to the event loop after every file.

        Raises:
            StaleValidationError: If the store changed before the pass finished.
                The caller should validate again against the newer generation.
        """
        snapshot = self.store.snapshot()
        walk = self.validator.iter_validate(snapshot, self._entry_path)
        while True:
            try:
                next(walk)
            except StopIteration as done:
                report = done.value
                break
            await asyncio.sleep(0)
            if self.store.generation != snapshot.generation:
                walk.close()
                logger.warning(
                    f"Validation at generation {snapshot.generation} abandoned "
                    f"(store is at {self.store.generation})"
                )
                raise StaleValidationError(snapshot.generation, self.store.generation)

        if self.store.generation != snapshot.generation:
            raise StaleValidationError(snapshot.generation, self.store.generation)
        return report

    def render_payload(self) -> Result[ProjectBundle, ValidationReport]:
        """
        Hand the project to the renderer.

        Returns:
            Ok(ProjectBundle) when the snapshot validates, Err(ValidationReport) otherwise.
        """
        snapshot = self.store.snapshot()
        report = self.validator.validate(snapshot, self._entry_path)
        if not report.ok:
            return Err(report)
        return Ok(ProjectBundle.from_snapshot(snapshot, self._entry_path))

    def __repr__(self) -> str:
        return f"Project(entry={self._entry_path!r}, files={len(self.store)}, generation={self.generation})"

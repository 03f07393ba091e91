"""
Dependency Graph Builder.

Derives the import graph from the store incrementally:

- Specifier scans are cached per node, so a file is re-scanned only after
  its own content changes.
- Resolved edges are cached per (path, version, structure_generation), so
  they are recomputed when the file changes or when files appear or vanish.
- Entries for deleted files are discarded.

The full walk is a generator (`iter_full_graph`) that yields after every file,
which lets a caller interleave it with other work or abandon it mid-walk.
"""

import logging
import threading
from collections import deque
from dataclasses import dataclass, field
from typing import Dict, Generator, List, Optional, Set, Tuple

from ..core.errors import NotFoundError
from ..core.graph import DependencyGraph
from ..core.resolver import EXTERNAL, ModuleResolver
from ..core.store import FileView
from ..core.types import FileKind, FileNode, ImportSpecifier, ResolvedImport, UnresolvedImport
from ..parsing.imports import scan_imports

logger = logging.getLogger(__name__)

# Only script sources carry import statements the resolver understands
SCANNED_KINDS = {FileKind.COMPONENT, FileKind.OTHER_SOURCE}


@dataclass
class FileImports:
    """
    Imports of one file after resolution.

    Attributes:
        path: The importing file.
        version: FileNode version the scan was computed from.
        edges: Resolved edges, in specifier order, without duplicates.
        unresolved: Local specifiers that matched no file.
        external: Bare specifiers, passed through unresolved.
    """

    path: str
    version: int
    edges: List[ResolvedImport] = field(default_factory=list)
    unresolved: List[UnresolvedImport] = field(default_factory=list)
    external: List[str] = field(default_factory=list)

    @property
    def edge_set(self) -> Set[ResolvedImport]:
        return set(self.edges)


class DependencyGraphBuilder:
    """
    Builds per-file edge sets and whole-project graphs.

    Example:
        ```python
        builder = DependencyGraphBuilder(ModuleResolver(store))
        builder.edges_for("/App.jsx")
        graph = builder.full_graph(store.snapshot(), "/App.jsx")
        ```
    """

    def __init__(self, resolver: ModuleResolver):
        self.resolver = resolver
        self._specifiers: Dict[str, Tuple[FileNode, List[ImportSpecifier]]] = {}
        self._imports: Dict[str, Tuple[int, int, FileImports]] = {}
        self._lock = threading.Lock()

    @property
    def store(self) -> FileView:
        return self.resolver.store

    # =========================================================================
    # Per-file
    # =========================================================================

    def specifiers(self, node: FileNode) -> List[ImportSpecifier]:
        """Import specifiers of a node, cached until the node is replaced."""
        if node.kind not in SCANNED_KINDS:
            return []
        with self._lock:
            cached = self._specifiers.get(node.path)
        if cached is not None and cached[0] == node:
            return cached[1]

        found = scan_imports(node.content)
        with self._lock:
            self._specifiers[node.path] = (node, found)
        return found

    def scan(self, path: str, source: Optional[FileView] = None) -> FileImports:
        """
        Resolve every import of a file. Unresolved imports are returned as data.

        Raises:
            NotFoundError: If the file itself is not in the source.
        """
        source = source if source is not None else self.store
        node = source.read(path)
        key = (node.version, source.structure_generation)

        with self._lock:
            cached = self._imports.get(node.path)
        if cached is not None and cached[:2] == key:
            return cached[2]

        result = FileImports(path=node.path, version=node.version)
        seen: Set[str] = set()
        for spec in self.specifiers(node):
            outcome = self.resolver.try_resolve(node.path, spec.raw, source)
            if outcome.is_err():
                result.unresolved.append(
                    UnresolvedImport(from_path=node.path, specifier=spec.raw, line=spec.line)
                )
                continue
            target = outcome.unwrap()
            if target is EXTERNAL:
                result.external.append(spec.raw)
            elif target not in seen:
                seen.add(target)
                result.edges.append(
                    ResolvedImport(from_path=node.path, to_path=target, specifier=spec.raw)
                )

        with self._lock:
            self._imports[node.path] = (key[0], key[1], result)
        return result

    def edges_for(self, path: str, source: Optional[FileView] = None) -> Set[ResolvedImport]:
        """Resolved import edges originating at `path`."""
        return self.scan(path, source).edge_set

    def invalidate(self, path: str) -> None:
        """Discard cached results for one file."""
        with self._lock:
            self._specifiers.pop(path, None)
            self._imports.pop(path, None)

    def prune(self, source: Optional[FileView] = None) -> int:
        """Discard cached results for files no longer in the source."""
        source = source if source is not None else self.store
        live = set(source.list())
        with self._lock:
            stale = [p for p in set(self._specifiers) | set(self._imports) if p not in live]
            for path in stale:
                self._specifiers.pop(path, None)
                self._imports.pop(path, None)
        if stale:
            logger.debug(f"Pruned graph cache for {len(stale)} deleted file(s)")
        return len(stale)

    @property
    def cached_paths(self) -> Set[str]:
        with self._lock:
            return set(self._imports) | set(self._specifiers)

    # =========================================================================
    # Whole project
    # =========================================================================

    def iter_full_graph(
        self,
        source: FileView,
        entry_path: str,
    ) -> Generator[str, None, DependencyGraph]:
        """
        Walk the project, yielding each path after it is processed.

        Files reachable from the entry are walked breadth-first from the entry;
        the rest follow in store order so cycles and unresolved imports outside
        the reachable set are still recorded.

        Returns:
            The DependencyGraph (as the generator's return value).
        """
        graph = DependencyGraph(entry_path)
        paths = source.list()
        for path in paths:
            node = source.get(path)
            graph.add_file(path, node.kind if node else None)

        visited: Set[str] = set()
        queue = deque([entry_path] if source.exists(entry_path) else [])
        while queue:
            path = queue.popleft()
            if path in visited:
                continue
            visited.add(path)
            imports = self._record(graph, path, source)
            yield path
            for edge in imports.edges:
                if edge.to_path not in visited:
                    queue.append(edge.to_path)
        graph.reachable = visited

        for path in paths:
            if path not in visited:
                self._record(graph, path, source)
                yield path

        self.prune(source)
        logger.debug(
            f"Graph built: {graph.file_count} files, {graph.edge_count} edges, "
            f"{len(graph.reachable)} reachable"
        )
        return graph

    def full_graph(self, source: Optional[FileView] = None, entry_path: Optional[str] = None) -> DependencyGraph:
        """Build the whole graph in one go."""
        source = source if source is not None else self.store
        walk = self.iter_full_graph(source, entry_path or self.resolver.settings.entry_path)
        while True:
            try:
                next(walk)
            except StopIteration as done:
                return done.value

    def _record(self, graph: DependencyGraph, path: str, source: FileView) -> FileImports:
        try:
            imports = self.scan(path, source)
        except NotFoundError:
            return FileImports(path=path, version=0)
        for edge in imports.edges:
            graph.add_edge(edge)
        for item in imports.unresolved:
            graph.add_unresolved(item)
        for specifier in imports.external:
            graph.add_external(path, specifier)
        return imports

"""
Dependency Graph implementation.

This module provides a type-safe wrapper around NetworkX that:
- Records resolved import edges between virtual files
- Tracks the set of files reachable from the entry file
- Keeps unresolved and external (bare) imports seen while building
- Detects import cycles and orphaned files
"""

from collections import defaultdict
from typing import Any, Dict, Iterator, List, Optional, Set

import networkx as nx

from .types import FileKind, ResolvedImport, UnresolvedImport


class DependencyGraph:
    """
    Import graph of one virtual project.

    Nodes are VirtualPaths, kept in store order. Edges carry the
    ResolvedImport they came from.
    """

    def __init__(self, entry_path: str):
        self.entry_path = entry_path
        self._graph = nx.DiGraph()
        self._kinds: Dict[str, FileKind] = {}
        self.reachable: Set[str] = set()
        self.unresolved: List[UnresolvedImport] = []
        self.external: Dict[str, Set[str]] = defaultdict(set)

    # =========================================================================
    # Construction
    # =========================================================================

    def add_file(self, path: str, kind: Optional[FileKind] = None) -> None:
        self._graph.add_node(path)
        if kind is not None:
            self._kinds[path] = kind

    def add_edge(self, edge: ResolvedImport) -> None:
        """Add a directed import edge; both ends must already be files."""
        if edge.from_path not in self._graph or edge.to_path not in self._graph:
            return
        self._graph.add_edge(edge.from_path, edge.to_path, edge=edge)

    def add_unresolved(self, item: UnresolvedImport) -> None:
        self.unresolved.append(item)

    def add_external(self, path: str, specifier: str) -> None:
        self.external[specifier].add(path)

    # =========================================================================
    # Queries
    # =========================================================================

    def has_file(self, path: str) -> bool:
        return path in self._graph

    def has_edge(self, from_path: str, to_path: str) -> bool:
        return self._graph.has_edge(from_path, to_path)

    def edges_from(self, path: str) -> Set[ResolvedImport]:
        """Edges originating at a file."""
        if path not in self._graph:
            return set()
        return {data["edge"] for _, _, data in self._graph.out_edges(path, data=True)}

    def importers_of(self, path: str) -> List[str]:
        """Files that import `path` directly."""
        if path not in self._graph:
            return []
        return list(self._graph.predecessors(path))

    def get_descendants(self, path: str) -> Set[str]:
        """Files transitively imported by `path`."""
        if path not in self._graph:
            return set()
        return nx.descendants(self._graph, path)

    def get_ancestors(self, path: str) -> Set[str]:
        """Files that transitively import `path`."""
        if path not in self._graph:
            return set()
        return nx.ancestors(self._graph, path)

    def as_mapping(self) -> Dict[str, Set[ResolvedImport]]:
        """VirtualPath -> outgoing ResolvedImport edges, for every file."""
        return {path: self.edges_from(path) for path in self._graph.nodes}

    def orphans(self) -> List[str]:
        """Files not reachable from the entry, in store order."""
        return [path for path in self._graph.nodes if path not in self.reachable]

    def find_cycles(self) -> List[List[str]]:
        """
        Find import cycles.

        Each strongly connected component with more than one file, or a single
        file importing itself, is one cycle. Members are listed in store order.
        """
        order = {path: i for i, path in enumerate(self._graph.nodes)}
        cycles: List[List[str]] = []
        for component in nx.strongly_connected_components(self._graph):
            if len(component) == 1:
                (only,) = component
                if not self._graph.has_edge(only, only):
                    continue
            cycles.append(sorted(component, key=order.__getitem__))
        cycles.sort(key=lambda members: order[members[0]])
        return cycles

    def iter_files(self) -> Iterator[str]:
        return iter(self._graph.nodes)

    def iter_edges(self) -> Iterator[ResolvedImport]:
        for _, _, data in self._graph.edges(data=True):
            yield data["edge"]

    @property
    def file_count(self) -> int:
        return self._graph.number_of_nodes()

    @property
    def edge_count(self) -> int:
        return self._graph.number_of_edges()

    def get_stats(self) -> Dict[str, Any]:
        kind_counts: Dict[str, int] = defaultdict(int)
        for kind in self._kinds.values():
            kind_counts[kind.value] += 1

        return {
            "total_files": self.file_count,
            "total_edges": self.edge_count,
            "files_by_kind": dict(kind_counts),
            "reachable": len(self.reachable),
            "orphans": len(self.orphans()),
            "unresolved": len(self.unresolved),
            "external_modules": sorted(self.external),
            "cycles": len(self.find_cycles()),
        }

    def to_dict(self) -> Dict[str, Any]:
        return {
            "entry": self.entry_path,
            "files": list(self._graph.nodes),
            "edges": [edge.model_dump() for edge in self.iter_edges()],
            "unresolved": [item.model_dump() for item in self.unresolved],
            "stats": self.get_stats(),
        }

"""
Virtual File Store.

Holds the project's file tree as mutable state. The store is the single owner
of FileNodes; every consumer holds an explicit reference to a store instance.

Mutations (write, delete, rename) are serialized through a readers/writer
lock and each bumps the store-wide `generation`. Mutations that change the set
of paths also bump `structure_generation`, which is what resolution caches key
on: a content-only replace never changes what a specifier resolves to.

Readers that need a stable view across many calls take a `snapshot()`.
"""

import logging
from typing import Dict, Iterator, List, Optional, Union

from ..config import is_markup_extension
from .errors import DisallowedFileKindError, InvalidPathError, NotFoundError
from .locks import ReadWriteLock
from .paths import extension, normalize
from .types import FileKind, FileNode

logger = logging.getLogger(__name__)

KindLike = Union[FileKind, str, None]


def coerce_kind(path: str, kind: KindLike) -> FileKind:
    """
    Turn a declared kind into an allowed FileKind.

    A `None` kind is inferred from the extension. Markup, unknown kind names,
    and markup extensions (whatever kind is declared) are rejected.

    Raises:
        DisallowedFileKindError: If the file may not exist in a project.
    """
    ext = extension(path)
    if is_markup_extension(ext):
        raise DisallowedFileKindError(path, kind if kind is not None else FileKind.MARKUP)

    if kind is None:
        resolved = FileKind.from_extension(ext)
    else:
        try:
            resolved = FileKind(kind)
        except ValueError:
            raise DisallowedFileKindError(path, kind)

    if not resolved.is_allowed:
        raise DisallowedFileKindError(path, resolved)
    return resolved


class FileView:
    """Read API shared by the live store and its snapshots."""

    _nodes: Dict[str, FileNode]
    generation: int
    structure_generation: int

    def _get(self, path: str) -> Optional[FileNode]:
        return self._nodes.get(path)

    def get(self, path: str) -> Optional[FileNode]:
        """Return the node at a (normalized) path, or None."""
        return self._get(normalize(path))

    def read(self, path: str) -> FileNode:
        """
        Return the node at a path.

        Raises:
            NotFoundError: If the path is not in the store.
        """
        node = self.get(path)
        if node is None:
            raise NotFoundError(normalize(path))
        return node

    def exists(self, path: str) -> bool:
        return self.get(path) is not None

    def list(self) -> List[str]:
        """All paths, in insertion order."""
        return list(self._nodes)

    def nodes(self) -> List[FileNode]:
        return list(self._nodes.values())

    def __contains__(self, path: object) -> bool:
        return isinstance(path, str) and self.exists(path)

    def __len__(self) -> int:
        return len(self._nodes)

    def __iter__(self) -> Iterator[FileNode]:
        return iter(self.nodes())


class StoreSnapshot(FileView):
    """
    Immutable view of the store at one generation.

    FileNodes are immutable, so the snapshot only copies the path mapping.
    """

    def __init__(self, nodes: Dict[str, FileNode], generation: int, structure_generation: int):
        self._nodes = dict(nodes)
        self.generation = generation
        self.structure_generation = structure_generation

    def __repr__(self) -> str:
        return f"StoreSnapshot(files={len(self._nodes)}, generation={self.generation})"


class VirtualFileStore(FileView):
    """
    In-memory file tree rooted at `/`.

    Example:
        ```python
        store = VirtualFileStore()
        store.write("/App.jsx", "component", "export default function App() {}")
        store.read("/App.jsx").version  # 1
        ```
    """

    def __init__(self):
        self._nodes: Dict[str, FileNode] = {}
        self._lock = ReadWriteLock()
        self.generation = 0
        self.structure_generation = 0

    @property
    def lock(self) -> ReadWriteLock:
        return self._lock

    # =========================================================================
    # Reads
    # =========================================================================

    def get(self, path: str) -> Optional[FileNode]:
        key = normalize(path)
        with self._lock.read():
            return self._nodes.get(key)

    def list(self) -> List[str]:
        with self._lock.read():
            return list(self._nodes)

    def nodes(self) -> List[FileNode]:
        with self._lock.read():
            return list(self._nodes.values())

    def __len__(self) -> int:
        with self._lock.read():
            return len(self._nodes)

    def snapshot(self) -> StoreSnapshot:
        """Materialize a consistent view; never observes a half-applied edit."""
        with self._lock.read():
            return StoreSnapshot(self._nodes, self.generation, self.structure_generation)

    # =========================================================================
    # Mutations
    # =========================================================================

    def write(self, path: str, kind: KindLike = None, content: str = "") -> FileNode:
        """
        Create or replace a file.

        Args:
            path: Target path (normalized before use).
            kind: FileKind or its value; None infers from the extension.
            content: Text content.

        Returns:
            The stored FileNode.

        Raises:
            InvalidPathError: If the path cannot be normalized.
            DisallowedFileKindError: If the kind is not whitelisted. The store
                is left untouched.
        """
        key = normalize(path)
        try:
            file_kind = coerce_kind(key, kind)
        except DisallowedFileKindError:
            logger.warning(f"Rejected write of {key} (kind={kind})")
            raise

        with self._lock.write():
            existing = self._nodes.get(key)
            if existing is None:
                node = FileNode(path=key, kind=file_kind, content=content)
                self.structure_generation += 1
                logger.debug(f"Created {key} ({file_kind})")
            else:
                node = existing.replaced(file_kind, content)
                logger.debug(f"Replaced {key} -> v{node.version}")
            self._nodes[key] = node
            self.generation += 1
            return node

    def delete(self, path: str) -> FileNode:
        """
        Remove a file. Importers keep dangling edges until the next resolution pass.

        Returns:
            The removed node.

        Raises:
            NotFoundError: If the path is not in the store.
        """
        key = normalize(path)
        with self._lock.write():
            node = self._nodes.pop(key, None)
            if node is None:
                raise NotFoundError(key)
            self.generation += 1
            self.structure_generation += 1
            logger.debug(f"Deleted {key}")
            return node

    def rename(self, old_path: str, new_path: str) -> FileNode:
        """
        Move a file to a new path as a single mutation.

        The moved file keeps its content and kind; its version restarts at 1.

        Raises:
            NotFoundError: If `old_path` is absent.
            InvalidPathError: If `new_path` is already taken.
            DisallowedFileKindError: If `new_path` has a markup extension.
        """
        src = normalize(old_path)
        dst = normalize(new_path)

        with self._lock.write():
            node = self._nodes.get(src)
            if node is None:
                raise NotFoundError(src)
            if src == dst:
                return node
            if dst in self._nodes:
                raise InvalidPathError(dst, "target already exists")
            kind = coerce_kind(dst, node.kind)

            del self._nodes[src]
            moved = FileNode(path=dst, kind=kind, content=node.content)
            self._nodes[dst] = moved
            self.generation += 1
            self.structure_generation += 1
            logger.debug(f"Renamed {src} -> {dst}")
            return moved

    def clear(self) -> None:
        with self._lock.write():
            if not self._nodes:
                return
            self._nodes.clear()
            self.generation += 1
            self.structure_generation += 1

    def __repr__(self) -> str:
        return f"VirtualFileStore(files={len(self._nodes)}, generation={self.generation})"

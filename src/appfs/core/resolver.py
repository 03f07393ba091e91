"""
Module Resolver.

Turns an import specifier plus its referring file into a concrete file in the
virtual store.

Resolution Strategy:
    1. `@/x`        -> `/x` (alias onto the root, independent of the importer)
    2. `./x`, `../x` -> joined with the importer's directory
    3. bare (`react`) -> EXTERNAL, never checked against the store

Probe order for local targets (first hit wins):
    1. The literal path, so an explicit extension is always authoritative
    2. The path with each resolve extension appended (.jsx, .js, .tsx, .ts)
    3. The path as a directory holding an index file, in the same extension order
"""

import logging
import threading
from typing import Dict, Iterator, Optional, Tuple, Union

from ..config import ProjectSettings
from .errors import InvalidPathError, UnresolvedImportError
from .paths import ROOT, alias_target, classify_specifier, dirname, join, resolve_relative
from .result import Err, Ok, Result
from .store import FileView, VirtualFileStore
from .types import SpecifierKind

logger = logging.getLogger(__name__)


class _External:
    """Sentinel for bare specifiers satisfied outside the virtual store."""

    _instance: Optional["_External"] = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "EXTERNAL"

    def __bool__(self) -> bool:
        return False


EXTERNAL = _External()

Resolution = Union[str, _External]


class ModuleResolver:
    """
    Resolves specifiers against a store (or a snapshot of one).

    Results are cached per (importer directory, specifier). The cache is
    dropped as a whole when the source's `structure_generation` differs from
    the one it was filled at; content-only replaces keep it warm.

    Example:
        ```python
        resolver = ModuleResolver(store)
        resolver.resolve("/App.jsx", "@/components/Header")
        # '/components/Header.jsx'
        ```
    """

    def __init__(self, store: VirtualFileStore, settings: Optional[ProjectSettings] = None):
        """
        Initialize the resolver.

        Args:
            store: Default source for lookups.
            settings: Probe order configuration.
        """
        self.store = store
        self.settings = settings or ProjectSettings()
        self._cache: Dict[Tuple[str, str], Result[Resolution, Exception]] = {}
        self._cache_generation: Optional[int] = None
        self._cache_lock = threading.Lock()
        self.hits = 0
        self.misses = 0

    def resolve(
        self,
        from_path: str,
        specifier: str,
        source: Optional[FileView] = None,
    ) -> Resolution:
        """
        Resolve a specifier to a VirtualPath.

        Args:
            from_path: The importing file.
            specifier: The specifier as written.
            source: Store or snapshot to probe. Defaults to the resolver's store.

        Returns:
            The target VirtualPath, or EXTERNAL for bare specifiers.

        Raises:
            UnresolvedImportError: If no probe matches.
            InvalidPathError: If a relative specifier climbs above the root.
        """
        return self.try_resolve(from_path, specifier, source).unwrap()

    def try_resolve(
        self,
        from_path: str,
        specifier: str,
        source: Optional[FileView] = None,
    ) -> Result[Resolution, Exception]:
        """Resolve without raising: Ok(path | EXTERNAL) or Err(error)."""
        source = source if source is not None else self.store
        kind = classify_specifier(specifier)
        if kind is SpecifierKind.BARE:
            return Ok(EXTERNAL)

        # Alias targets do not depend on the importer
        scope = "@" if kind is SpecifierKind.ALIASED else dirname(from_path)
        key = (scope, specifier)

        with self._cache_lock:
            if self._cache_generation != source.structure_generation:
                if self._cache:
                    logger.debug(
                        f"Resolution cache dropped ({len(self._cache)} entries, "
                        f"generation {self._cache_generation} -> {source.structure_generation})"
                    )
                self._cache.clear()
                self._cache_generation = source.structure_generation
            cached = self._cache.get(key)

        if cached is not None:
            self.hits += 1
            return self._rebind(cached, from_path, specifier)

        self.misses += 1
        result = self._resolve_uncached(from_path, specifier, kind, source)

        with self._cache_lock:
            if self._cache_generation == source.structure_generation:
                self._cache[key] = result
        return result

    def invalidate(self) -> None:
        """Drop every cached resolution."""
        with self._cache_lock:
            self._cache.clear()
            self._cache_generation = None

    def _resolve_uncached(
        self,
        from_path: str,
        specifier: str,
        kind: SpecifierKind,
        source: FileView,
    ) -> Result[Resolution, Exception]:
        try:
            if kind is SpecifierKind.ALIASED:
                base = alias_target(specifier)
            else:
                base = resolve_relative(from_path, specifier)
        except InvalidPathError as e:
            return Err(e)

        for candidate in self.candidates(base):
            if source.exists(candidate):
                logger.debug(f"Resolved '{specifier}' from {from_path} -> {candidate}")
                return Ok(candidate)

        return Err(UnresolvedImportError(from_path, specifier))

    def candidates(self, base: str) -> Iterator[str]:
        """Probe paths for a local target, in priority order."""
        if base != ROOT:
            yield base
            for ext in self.settings.resolve_extensions:
                yield base + ext
        for index_name in self.settings.index_candidates:
            yield join(base, index_name)

    @staticmethod
    def _rebind(
        cached: Result[Resolution, Exception],
        from_path: str,
        specifier: str,
    ) -> Result[Resolution, Exception]:
        # A cached failure may have been produced for a sibling file in the same directory
        if cached.is_err() and isinstance(cached.error, UnresolvedImportError):
            if cached.error.from_path != from_path:
                return Err(UnresolvedImportError(from_path, specifier))
        return cached

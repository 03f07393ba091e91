"""
Core type definitions for appfs.

FileNode and ResolvedImport are immutable pydantic models: the store swaps in a
new FileNode on every replace, so a reader holding an old instance always sees
a consistent value.
"""

from dataclasses import dataclass
from enum import StrEnum
from typing import Optional

from pydantic import BaseModel, ConfigDict

from ..config import (
    ASSET_EXTENSIONS,
    COMPONENT_EXTENSIONS,
    MARKUP_EXTENSIONS,
    STYLE_EXTENSIONS,
)


class FileKind(StrEnum):
    """Categories of files in a virtual project."""
    COMPONENT = "component"
    STYLE = "style"
    ASSET = "asset"
    OTHER_SOURCE = "other-source"
    # Never stored; present so it can be named and rejected
    MARKUP = "markup"

    @property
    def is_allowed(self) -> bool:
        return self is not FileKind.MARKUP

    @classmethod
    def from_extension(cls, ext: str) -> "FileKind":
        """Infer the kind of a file from its extension."""
        ext = ext.lower()
        if ext in COMPONENT_EXTENSIONS:
            return cls.COMPONENT
        if ext in STYLE_EXTENSIONS:
            return cls.STYLE
        if ext in MARKUP_EXTENSIONS:
            return cls.MARKUP
        if ext in ASSET_EXTENSIONS:
            return cls.ASSET
        # Scripts (.js, .ts, .mjs, ...) and anything unrecognized
        return cls.OTHER_SOURCE


ALLOWED_KINDS = frozenset(kind for kind in FileKind if kind.is_allowed)


class SpecifierKind(StrEnum):
    """How an import specifier is resolved."""
    ALIASED = "aliased"    # @/components/Header
    RELATIVE = "relative"  # ./Header, ../lib/util
    BARE = "bare"          # react, lucide-react


class FileNode(BaseModel):
    """
    A single file in the virtual store.

    Attributes:
        path: Normalized VirtualPath.
        kind: File category.
        content: Full text content.
        version: Starts at 1, incremented on every replace.
    """
    path: str
    kind: FileKind
    content: str = ""
    version: int = 1

    model_config = ConfigDict(frozen=True)

    def replaced(self, kind: FileKind, content: str) -> "FileNode":
        """Return the next version of this node."""
        return self.model_copy(
            update={"kind": kind, "content": content, "version": self.version + 1}
        )

    @property
    def size(self) -> int:
        return len(self.content.encode("utf-8"))


@dataclass(frozen=True)
class ImportSpecifier:
    """An import specifier as written in source."""
    raw: str
    kind: SpecifierKind
    line: int = 0

    @property
    def is_local(self) -> bool:
        return self.kind is not SpecifierKind.BARE


class ResolvedImport(BaseModel):
    """
    Directional edge from an importing file to an existing file.
    """
    from_path: str
    to_path: str
    specifier: str = ""

    model_config = ConfigDict(frozen=True)

    def __hash__(self):
        return hash((self.from_path, self.to_path))

    def __eq__(self, other):
        if isinstance(other, ResolvedImport):
            return (self.from_path, self.to_path) == (other.from_path, other.to_path)
        return False


class UnresolvedImport(BaseModel):
    """A local specifier that matched no file at scan time."""
    from_path: str
    specifier: str
    line: Optional[int] = None

    model_config = ConfigDict(frozen=True)

"""
appfs Core Module.

Building blocks of the virtual project filesystem:

Paths & Types:
    - normalize, resolve_relative, classify_specifier: Path Normalizer
    - FileNode, FileKind, ResolvedImport: Data model

Store & Resolution:
    - VirtualFileStore, StoreSnapshot: Mutable file tree and its snapshots
    - ModuleResolver, EXTERNAL: Specifier resolution with alias/extension/index probing
    - DependencyGraph: NetworkX-backed import graph
"""

from .errors import (
    AppFSError,
    DisallowedFileKindError,
    ImportCycleError,
    InvalidPathError,
    MissingDefaultExportError,
    MissingEntryError,
    NotFoundError,
    StaleValidationError,
    UnresolvedImportError,
)
from .graph import DependencyGraph
from .paths import classify_specifier, normalize, resolve_relative
from .resolver import EXTERNAL, ModuleResolver
from .result import Err, Ok, Result
from .store import FileView, StoreSnapshot, VirtualFileStore
from .types import FileKind, FileNode, ImportSpecifier, ResolvedImport, SpecifierKind, UnresolvedImport

__all__ = [
    # Errors
    "AppFSError",
    "InvalidPathError",
    "DisallowedFileKindError",
    "NotFoundError",
    "UnresolvedImportError",
    "MissingEntryError",
    "MissingDefaultExportError",
    "ImportCycleError",
    "StaleValidationError",
    # Types
    "FileKind",
    "FileNode",
    "ImportSpecifier",
    "ResolvedImport",
    "SpecifierKind",
    "UnresolvedImport",
    # Paths
    "normalize",
    "resolve_relative",
    "classify_specifier",
    # Store
    "FileView",
    "StoreSnapshot",
    "VirtualFileStore",
    # Resolution & Graph
    "EXTERNAL",
    "ModuleResolver",
    "DependencyGraph",
    "Ok",
    "Err",
    "Result",
]

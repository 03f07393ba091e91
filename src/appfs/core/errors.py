"""
Error taxonomy for appfs.

Store operations raise these immediately. During a full validation pass the
same conditions are collected as `Violation`s instead, and `as_exception()`
turns a violation back into one of these classes when a caller wants to raise.
"""

from typing import List, Optional


class AppFSError(Exception):
    """Base class for every appfs error."""


class InvalidPathError(AppFSError):
    """
    Raised when a path cannot be normalized into a VirtualPath.

    Attributes:
        path: The offending input.
        reason: Why it was rejected.
    """

    def __init__(self, path: object, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"Invalid path {path!r}: {reason}")


class DisallowedFileKindError(AppFSError):
    """
    Raised when a file of a kind outside the whitelist is written.

    Attributes:
        path: Target path.
        kind: The rejected kind (as given).
    """

    def __init__(self, path: str, kind: object):
        self.path = path
        self.kind = kind
        super().__init__(f"File kind '{kind}' is not allowed for {path}")


class NotFoundError(AppFSError):
    """Raised when reading or deleting a path that is not in the store."""

    def __init__(self, path: str):
        self.path = path
        super().__init__(f"No such file: {path}")


class UnresolvedImportError(AppFSError):
    """
    Raised when a local import specifier matches no file.

    Attributes:
        from_path: The importing file.
        specifier: The specifier as written.
    """

    def __init__(self, from_path: str, specifier: str):
        self.from_path = from_path
        self.specifier = specifier
        super().__init__(f"Cannot resolve '{specifier}' from {from_path}")


class MissingEntryError(AppFSError):
    """Raised when the project has no entry file."""

    def __init__(self, entry_path: str):
        self.path = entry_path
        super().__init__(f"Entry file {entry_path} does not exist")


class MissingDefaultExportError(AppFSError):
    """Raised when the entry file has no detectable default export."""

    def __init__(self, entry_path: str):
        self.path = entry_path
        super().__init__(f"Entry file {entry_path} has no default export")


class ImportCycleError(AppFSError):
    """
    Raised for an import cycle.

    Attributes:
        paths: Cycle members in store order.
    """

    def __init__(self, paths: List[str]):
        self.paths = list(paths)
        super().__init__(f"Import cycle: {' -> '.join(self.paths)}")


class StaleValidationError(AppFSError):
    """
    Raised when the store changed while a validation pass was in flight.

    Attributes:
        started_at: Generation the pass started against.
        current: Generation observed when the pass was abandoned.
    """

    def __init__(self, started_at: int, current: Optional[int] = None):
        self.started_at = started_at
        self.current = current
        super().__init__(
            f"Store moved from generation {started_at} to {current} during validation"
        )

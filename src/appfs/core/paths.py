"""
Path Normalizer.

Canonicalizes virtual paths and classifies import specifiers. Every function
here is pure: no store access, no shared state.

A VirtualPath is an absolute string rooted at `/` with `.`/`..` segments
resolved, duplicate slashes collapsed and no trailing slash.
"""

from typing import List

from ..config import ALIAS_PREFIX
from .errors import InvalidPathError
from .types import SpecifierKind

ROOT = "/"


def normalize(path: str) -> str:
    """
    Canonicalize a path into a VirtualPath.

    Relative inputs are anchored at the root, so `components/A.jsx` and
    `/components/A.jsx` normalize to the same value.

    Args:
        path: Raw path.

    Returns:
        The normalized VirtualPath.

    Raises:
        InvalidPathError: On empty input, NUL bytes, or a `..` that climbs above `/`.
    """
    if not isinstance(path, str):
        raise InvalidPathError(path, "path must be a string")
    if not path.strip():
        raise InvalidPathError(path, "path is empty")
    if "\x00" in path:
        raise InvalidPathError(path, "path contains a NUL byte")

    segments: List[str] = []
    for part in path.replace("\\", "/").split("/"):
        if part in ("", "."):
            continue
        if part == "..":
            if not segments:
                raise InvalidPathError(path, "path escapes the root")
            segments.pop()
            continue
        segments.append(part)

    return ROOT + "/".join(segments)


def dirname(path: str) -> str:
    """Directory of a VirtualPath (`/` for top-level files)."""
    head, _, _ = path.rpartition("/")
    return head or ROOT


def basename(path: str) -> str:
    return path.rpartition("/")[2]


def extension(path: str) -> str:
    """Lower-cased extension including the dot, or '' when there is none."""
    name = basename(path)
    dot = name.rfind(".")
    if dot <= 0:
        return ""
    return name[dot:].lower()


def join(directory: str, name: str) -> str:
    return normalize(f"{directory}/{name}")


def resolve_relative(from_path: str, specifier: str) -> str:
    """
    Combine the referring file's directory with a relative specifier.

    Args:
        from_path: VirtualPath of the importing file.
        specifier: `./x`, `../x`, `.` or `..`.

    Returns:
        The normalized target VirtualPath.

    Raises:
        InvalidPathError: If the specifier climbs above the root.
    """
    return normalize(f"{dirname(normalize(from_path))}/{specifier}")


def classify_specifier(raw: str) -> SpecifierKind:
    """Tag an import specifier as aliased, relative or bare."""
    if raw.startswith(ALIAS_PREFIX):
        return SpecifierKind.ALIASED
    if raw in (".", "..") or raw.startswith("./") or raw.startswith("../"):
        return SpecifierKind.RELATIVE
    return SpecifierKind.BARE


def alias_target(raw: str) -> str:
    """Map an `@/` specifier onto the root: `@/components/A` -> `/components/A`."""
    return normalize(ROOT + raw[len(ALIAS_PREFIX):])

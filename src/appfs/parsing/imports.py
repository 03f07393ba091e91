"""
Import Scanner for virtual project sources.

A lexical scan, not a parse: only the specifier strings and the presence of a
default export matter to resolution and validation.

Supported Import Patterns:
- import App from "./App"
- import { a, b as c } from "@/lib/util"   (may span several lines)
- import "./styles.css"
- export { x } from "./x", export * from "./y"
- import("./Lazy")
- require("./legacy")

Supported Default Export Patterns:
- export default ...
- export { App as default }
- export { default } from "./App"
"""

import re
from typing import List, Set, Tuple

from ..core.paths import classify_specifier
from ..core.types import ImportSpecifier

# String literals are matched first so comment markers inside them are kept
_TOKENS = re.compile(
    r"""("(?:\\.|[^"\\\n])*"|'(?:\\.|[^'\\\n])*'|`(?:\\.|[^`\\])*`)"""
    r"""|(/\*.*?\*/)"""
    r"""|(//[^\n]*)""",
    re.DOTALL,
)

IMPORT_PATTERNS = [
    # import x from "module", export { x } from "module" (clause may span lines)
    re.compile(r"""\b(?:import|export)\s+(?:type\s+)?[\w*{}\s,$]*?\bfrom\s*["']([^"'\n]+)["']"""),
    # import "module"
    re.compile(r"""\bimport\s*["']([^"'\n]+)["']"""),
    # import("module")
    re.compile(r"""\bimport\s*\(\s*["']([^"'\n]+)["']\s*\)"""),
    # require("module")
    re.compile(r"""\brequire\s*\(\s*["']([^"'\n]+)["']\s*\)"""),
]

DEFAULT_EXPORT_PATTERNS = [
    re.compile(r"\bexport\s+default\b"),
    # export { App as default } / export { default } from "./App"
    re.compile(r"\bexport\s*\{[^}]*(?<![\w$.])default\b(?!\s+as\b)[^}]*\}"),
]


def _blank_comment(match: re.Match) -> str:
    if match.group(1):
        return match.group(1)
    return "\n" * match.group(0).count("\n")


def strip_comments(text: str) -> str:
    """Blank out comments while keeping line numbers stable."""
    return _TOKENS.sub(_blank_comment, text)


def scan_imports(content: str) -> List[ImportSpecifier]:
    """
    Extract import specifiers from source text.

    Args:
        content: File content.

    Returns:
        Specifiers in order of first appearance, each listed once.
    """
    text = strip_comments(content)
    found: List[Tuple[int, str]] = []

    for pattern in IMPORT_PATTERNS:
        for match in pattern.finditer(text):
            found.append((match.start(1), match.group(1).strip()))

    found.sort()
    seen: Set[str] = set()
    specifiers: List[ImportSpecifier] = []
    for offset, raw in found:
        if not raw or raw in seen:
            continue
        seen.add(raw)
        line = text.count("\n", 0, offset) + 1
        specifiers.append(ImportSpecifier(raw=raw, kind=classify_specifier(raw), line=line))

    return specifiers


def has_default_export(content: str) -> bool:
    """Check syntactically for a default export."""
    text = strip_comments(content)
    return any(pattern.search(text) for pattern in DEFAULT_EXPORT_PATTERNS)

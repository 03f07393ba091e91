"""
Global Configuration and Project Conventions.

This module centralizes the fixed conventions every generated project must
follow (single entry file, `@/` import alias, no markup files) together with
the tunable settings that may be loaded from `.appfs/config.yaml`.
"""

import logging
from pathlib import Path
from typing import Dict, List, Optional, Set

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator

logger = logging.getLogger(__name__)

# --- Fixed Conventions ---

# The well-known root file whose default export is the rendered component
ENTRY_PATH = "/App.jsx"

# Non-library imports map onto the virtual root through this prefix
ALIAS_PREFIX = "@/"

# Probed in order when a specifier omits its extension
RESOLVE_EXTENSIONS: List[str] = [".jsx", ".js", ".tsx", ".ts"]

# Basename probed when a specifier names a directory
INDEX_BASENAME = "index"

DEFAULT_CONFIG_PATH = Path(".appfs/config.yaml")

# --- Extension Tables ---

COMPONENT_EXTENSIONS: Set[str] = {".jsx", ".tsx"}

STYLE_EXTENSIONS: Set[str] = {".css", ".scss", ".sass", ".less"}

ASSET_EXTENSIONS: Set[str] = {
    # Images
    ".png",
    ".jpg",
    ".jpeg",
    ".gif",
    ".webp",
    ".ico",
    ".svg",
    # Fonts
    ".woff",
    ".woff2",
    ".ttf",
    ".otf",
    # Data
    ".json",
    ".txt",
    ".md",
}

# Markup never belongs in a project: the entry component replaces it
MARKUP_EXTENSIONS: Set[str] = {".html", ".htm", ".xhtml"}


def is_markup_extension(ext: str) -> bool:
    """Check if an extension denotes a markup (HTML) file."""
    return ext.lower() in MARKUP_EXTENSIONS


class ProjectSettings(BaseModel):
    """
    Tunable project settings.

    Attributes:
        entry_path: The entry file designated at project creation.
        resolve_extensions: Extensions probed, in order, for extensionless specifiers.
        index_basename: Basename probed inside directories.
        report_orphans: Whether unreachable files are reported as warnings.
    """

    entry_path: str = ENTRY_PATH
    resolve_extensions: List[str] = Field(default_factory=lambda: list(RESOLVE_EXTENSIONS))
    index_basename: str = INDEX_BASENAME
    report_orphans: bool = True

    @field_validator("entry_path")
    @classmethod
    def _rooted(cls, value: str) -> str:
        from .core.errors import InvalidPathError
        from .core.paths import normalize

        try:
            return normalize(value)
        except InvalidPathError as e:
            raise ValueError(str(e)) from e

    @field_validator("resolve_extensions")
    @classmethod
    def _dotted(cls, value: List[str]) -> List[str]:
        return [ext if ext.startswith(".") else f".{ext}" for ext in value]

    @property
    def index_candidates(self) -> List[str]:
        """Index file names in probe order (index.jsx, index.js, ...)."""
        return [f"{self.index_basename}{ext}" for ext in self.resolve_extensions]

    @classmethod
    def load(cls, config_path: Optional[Path] = None) -> "ProjectSettings":
        """
        Load settings from the `appfs:` section of a YAML file.

        Args:
            config_path: File to read. Defaults to `.appfs/config.yaml`.

        Returns:
            ProjectSettings. Defaults are returned when the file is missing.

        Raises:
            ValueError: If the file is not valid YAML or holds invalid values.
        """
        path = config_path or DEFAULT_CONFIG_PATH
        if not path.exists():
            logger.debug(f"No config at {path}, using defaults")
            return cls()

        try:
            with open(path, "r") as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ValueError(f"Failed to parse {path}: {e}") from e

        section: Dict = (data.get("appfs") or {}) if isinstance(data, dict) else {}
        try:
            return cls(**section)
        except ValidationError as e:
            raise ValueError(f"Invalid settings in {path}: {e}") from e

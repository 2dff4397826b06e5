"""Value types passed between path resolution and enumeration."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class ResolvedBase:
    """
    Absolute form of one pattern.

    `path` is the pattern joined onto the invoking unit's directory. `root` is the
    directory that names are made relative to: `path` itself in walk mode, or the
    fixed prefix before the first wildcard component in glob mode, where `glob_part`
    holds the remainder.
    """

    pattern: str
    path: Path
    root: Path
    glob_part: str | None = None

    @property
    def is_glob(self) -> bool:
        return self.glob_part is not None


@dataclass(frozen=True)
class DiscoveredFile:
    """A regular file found under `base`, with its name relative to `base.root`."""

    path: Path
    base: ResolvedBase
    name: tuple[str, ...]

"""Build-input registration for discovered files."""

from __future__ import annotations

from pathlib import Path
from typing import Protocol


class DependencyRegistrar(Protocol):
    """Anything that can record a file as an input of the bundling step."""

    def register(self, path: Path) -> None: ...


class DependencySet:
    """
    Default registrar: records every registration, and exposes the unique paths in
    first-seen order for writing a depfile or a manifest.
    """

    def __init__(self) -> None:
        self.registrations: list[Path] = []
        self._seen: dict[Path, None] = {}

    def register(self, path: Path) -> None:
        self.registrations.append(path)
        self._seen.setdefault(path, None)

    @property
    def paths(self) -> tuple[Path, ...]:
        return tuple(self._seen)

    def __len__(self) -> int:
        return len(self._seen)

    def __contains__(self, path: object) -> bool:
        return path in self._seen

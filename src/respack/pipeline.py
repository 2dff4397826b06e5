"""
The bundling pipeline: parse patterns, resolve them, enumerate files, register
them as build inputs, read them, and assemble the package.

Every stage raises on failure, so a run either returns a complete package or
nothing at all.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from respack.dependencies import DependencyRegistrar, DependencySet
from respack.file_resolver import FileEnumerator, resolve_base
from respack.loader import load_content
from respack.package import Package, assemble
from respack.spec_parser import parse_patterns

logger = logging.getLogger(__name__)


@dataclass
class BundleConfig:
    """
    Inputs for one bundling run.

    `unit_dir` is the directory of the build unit asking for the bundle; relative
    patterns are resolved against it (or the working directory if it is `None`).
    `exclude` holds optional gitignore-style patterns and is empty by default.
    """

    patterns: Sequence[str] = ()
    unit_dir: Path | None = None
    exclude: list[str] = field(default_factory=list)
    sort: bool = False

    @classmethod
    def from_arg(cls, arg: Any, unit_dir: str | Path | None = None, **kwargs: Any) -> BundleConfig:
        """Build a config from a single raw argument: a pattern or a list of patterns."""
        return cls(
            patterns=parse_patterns(arg),
            unit_dir=Path(unit_dir) if unit_dir is not None else None,
            **kwargs,
        )


@dataclass(frozen=True)
class BundleResult:
    package: Package
    dependencies: tuple[Path, ...]


def bundle(config: BundleConfig, registrar: DependencyRegistrar | None = None) -> BundleResult:
    """
    Run the whole pipeline for `config`.

    Each discovered file is passed to `registrar` once, just before it is read.
    The returned `dependencies` are the unique file paths in discovery order.
    """
    # Re-validate even pre-parsed patterns so a bad config fails before any I/O.
    patterns = parse_patterns(config.patterns)
    deps = DependencySet()

    bases = [resolve_base(pattern, config.unit_dir) for pattern in patterns]
    enumerator = FileEnumerator(exclude=config.exclude, sort=config.sort)
    discovered = enumerator.discover_all(bases)

    pairs: list[tuple[tuple[str, ...], bytes]] = []
    for found in discovered:
        deps.register(found.path)
        if registrar is not None:
            registrar.register(found.path)
        pairs.append((found.name, load_content(found.path, pattern=found.base.pattern)))

    package = assemble(pairs)
    logger.info(
        "Bundled %d file(s), %d bytes, from %d pattern(s)",
        len(package),
        package.total_size(),
        len(patterns),
    )
    return BundleResult(package=package, dependencies=deps.paths)


def resources_package(
    arg: Any,
    *,
    unit_dir: str | Path | None = None,
    unit_file: str | Path | None = None,
    exclude: Sequence[str] = (),
    sort: bool = False,
) -> Package:
    """
    Bundle one raw argument (a pattern or a list of patterns) and return the package.

    Pass `unit_file=__file__` to resolve relative patterns next to the calling module.
    """
    if unit_dir is None and unit_file is not None:
        unit_dir = Path(unit_file).parent
    config = BundleConfig.from_arg(arg, unit_dir=unit_dir, exclude=list(exclude), sort=sort)
    return bundle(config).package

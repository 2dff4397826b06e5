"""
Path resolution and file enumeration.

Each pattern is anchored at the invoking unit's directory, then expanded either by a
recursive directory walk or by glob matching. Files come back in discovery order:
whatever order `os.walk()` or `Path.glob()` yields, unless sorting is requested.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Iterable, Iterator, Sequence
from pathlib import Path

import pathspec

from respack.errors import EnumerationError, InternalInvariantError, ResolutionError
from respack.file_resolver.excludes import compile_excludes
from respack.file_resolver.types import DiscoveredFile, ResolvedBase

logger = logging.getLogger(__name__)

# Characters that indicate a pattern is a glob rather than a literal directory.
GLOB_CHARS = frozenset("*?[")


def is_glob(pattern: str) -> bool:
    return any(c in pattern for c in GLOB_CHARS)


def resolve_base(pattern: str, unit_dir: str | Path | None = None) -> ResolvedBase:
    """
    Anchor `pattern` at `unit_dir`, falling back to the current working directory.

    An absolute pattern is used verbatim. Nothing is checked for existence here;
    missing directories are reported when they are walked.
    """
    if "\0" in pattern:
        raise ResolutionError(f"pattern contains a NUL byte: {pattern!r}", pattern=pattern)

    raw = Path(pattern)
    if raw.is_absolute():
        anchor = Path()
    else:
        anchor = Path(unit_dir) if unit_dir is not None else Path()
        if not anchor.is_absolute():
            anchor = Path.cwd() / anchor
    path = anchor / raw
    if not path.is_absolute():
        raise ResolutionError(f"could not resolve `{pattern}` to an absolute path", pattern=pattern)

    if not is_glob(pattern):
        return ResolvedBase(pattern=pattern, path=path, root=path)

    # Only the pattern's own components are searched for wildcards; the anchor
    # directory is literal even if its name contains glob characters.
    parts = raw.parts
    for i, part in enumerate(parts):
        if is_glob(part):
            return ResolvedBase(
                pattern=pattern,
                path=path,
                root=anchor / Path(*parts[:i]),
                glob_part="/".join(parts[i:]),
            )
    raise ResolutionError(f"no wildcard component found in `{pattern}`", pattern=pattern)


def relative_name(path: Path, base: ResolvedBase) -> tuple[str, ...]:
    """Name components of `path` relative to the base root."""
    try:
        rel = path.relative_to(base.root)
    except ValueError as e:
        raise InternalInvariantError(
            f"`{path}` is not under its base directory `{base.root}`",
            path=path,
            pattern=base.pattern,
        ) from e
    if not rel.parts:
        raise InternalInvariantError(
            f"`{path}` is its own base directory", path=path, pattern=base.pattern
        )
    return rel.parts


class FileEnumerator:
    """
    Expands resolved bases into regular files.

    `exclude` takes gitignore-style patterns matched against names relative to the
    base root; directories matching a `dir/` pattern are pruned during the walk.
    With `sort=True`, each base's files are ordered by name.
    """

    def __init__(self, exclude: Sequence[str] = (), sort: bool = False) -> None:
        self._exclude_spec: pathspec.PathSpec | None = compile_excludes(exclude)
        self._sort: bool = sort

    def discover(self, base: ResolvedBase) -> list[DiscoveredFile]:
        """List the regular files for one base, raising `EnumerationError` if a walk fails."""
        paths = self._expand_glob(base) if base.is_glob else self._walk_directory(base)
        found: list[DiscoveredFile] = []
        for path in paths:
            name = relative_name(path, base)
            if self._is_excluded(name):
                logger.debug("Excluded %s", "/".join(name))
                continue
            found.append(DiscoveredFile(path=path, base=base, name=name))
        if self._sort:
            found.sort(key=lambda f: f.name)
        logger.debug("Pattern %r matched %d file(s) under %s", base.pattern, len(found), base.root)
        return found

    def discover_all(self, bases: Iterable[ResolvedBase]) -> list[DiscoveredFile]:
        """Concatenate the files of each base, in base order."""
        result: list[DiscoveredFile] = []
        for base in bases:
            result.extend(self.discover(base))
        return result

    def _walk_directory(self, base: ResolvedBase) -> Iterator[Path]:
        """
        Walk a directory tree with `os.walk()`. Any directory that cannot be listed,
        including the base itself, aborts the walk.
        """

        def on_error(err: OSError) -> None:
            failed = err.filename if err.filename is not None else base.path
            raise EnumerationError(
                f"error while reading the content of `{failed}`: {err.strerror or err}",
                path=failed,
                pattern=base.pattern,
            ) from err

        for dirpath, dirnames, filenames in os.walk(base.path, onerror=on_error):
            current = Path(dirpath)
            if self._exclude_spec is not None:
                rel_dir = current.relative_to(base.path)
                dirnames[:] = [d for d in dirnames if not self._is_dir_excluded(rel_dir / d)]
            for filename in filenames:
                filepath = current / filename
                # Skips special files and dangling symlinks; symlinks to files are kept.
                if filepath.is_file():
                    yield filepath

    def _expand_glob(self, base: ResolvedBase) -> Iterator[Path]:
        """Expand a glob against its fixed root. No matches is not an error."""
        assert base.glob_part is not None
        for path in base.root.glob(base.glob_part):
            if path.is_file():
                yield path

    def _is_dir_excluded(self, rel_path: Path) -> bool:
        assert self._exclude_spec is not None
        return self._exclude_spec.match_file(rel_path.as_posix() + "/")

    def _is_excluded(self, name: tuple[str, ...]) -> bool:
        if self._exclude_spec is None:
            return False
        return self._exclude_spec.match_file("/".join(name))

"""Exclusion patterns (gitignore syntax) using pathspec."""

from __future__ import annotations

from collections.abc import Iterable
from pathlib import Path

import pathspec


def compile_excludes(patterns: Iterable[str]) -> pathspec.PathSpec | None:
    """
    Compile gitignore-style patterns, skipping blanks and `#` comments.
    Returns `None` when nothing is left, so callers can skip matching entirely.
    """
    lines = [line for line in patterns if line.strip() and not line.strip().startswith("#")]
    if not lines:
        return None
    return pathspec.PathSpec.from_lines("gitignore", lines)


def read_exclude_file(path: Path) -> list[str]:
    """Read exclusion patterns from a file, one per line, in the same syntax as `.gitignore`."""
    return path.read_text(encoding="utf-8").splitlines()

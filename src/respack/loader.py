"""Reads file contents in full."""

from __future__ import annotations

from pathlib import Path

from respack.errors import ReadError


def load_content(path: Path, pattern: str | None = None) -> bytes:
    """
    Read the whole file as bytes, unchanged. Any `OSError` becomes a `ReadError`
    naming the path.
    """
    try:
        return path.read_bytes()
    except OSError as e:
        raise ReadError(
            f"could not read `{path}`: {e.strerror or e}", path=path, pattern=pattern
        ) from e

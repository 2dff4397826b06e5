"""
Error types raised by the bundling pipeline.

Every error is fatal for the whole run: there is no partial package and no retry.
Where an `OSError` caused the failure it is chained as `__cause__`.
"""

from __future__ import annotations

from pathlib import Path


class RespackError(Exception):
    """Base class for all bundling errors, with the offending path and pattern if known."""

    def __init__(
        self,
        message: str,
        *,
        path: str | Path | None = None,
        pattern: str | None = None,
    ) -> None:
        super().__init__(message)
        self.message: str = message
        self.path: Path | None = Path(path) if path is not None else None
        self.pattern: str | None = pattern


class ConfigError(RespackError):
    """Malformed configuration. Raised before any filesystem access."""


class ArityError(ConfigError):
    """Wrong number of top-level arguments."""


class ShapeError(ConfigError):
    """Argument is neither a string nor a list of strings."""


class ResolutionError(RespackError):
    """A pattern could not be turned into a base path."""


class EnumerationError(RespackError):
    """A directory could not be walked."""


class ReadError(RespackError):
    """A discovered file could not be read."""


class InternalInvariantError(RespackError):
    """A discovered file does not lie under its own base."""

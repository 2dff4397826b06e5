"""
Turns patterns into concrete files: resolution against the invoking unit's
directory, then a recursive walk or glob expansion.

Usage::

    from respack.file_resolver import FileEnumerator, resolve_base

    base = resolve_base("assets", unit_dir=Path(__file__).parent)
    files = FileEnumerator().discover(base)
"""

from respack.file_resolver.resolver import FileEnumerator, is_glob, relative_name, resolve_base
from respack.file_resolver.types import DiscoveredFile, ResolvedBase

__all__ = [
    "DiscoveredFile",
    "FileEnumerator",
    "ResolvedBase",
    "is_glob",
    "relative_name",
    "resolve_base",
]

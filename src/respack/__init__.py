"""
respack: bundle resource files at build time into an embedded, queryable table.

Usage::

    from respack import resources_package

    package = resources_package(["templates", "static/*.css"], unit_file=__file__)
    html = package.find("index.html")
"""

from respack.errors import (
    ArityError,
    ConfigError,
    EnumerationError,
    InternalInvariantError,
    ReadError,
    ResolutionError,
    RespackError,
    ShapeError,
)
from respack.package import Package, ResourceEntry
from respack.pipeline import BundleConfig, BundleResult, bundle, resources_package
from respack.spec_parser import parse_patterns

__all__ = [
    "ArityError",
    "BundleConfig",
    "BundleResult",
    "ConfigError",
    "EnumerationError",
    "InternalInvariantError",
    "Package",
    "ReadError",
    "ResolutionError",
    "RespackError",
    "ResourceEntry",
    "ShapeError",
    "bundle",
    "parse_patterns",
    "resources_package",
]

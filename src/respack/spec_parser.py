"""
Normalizes raw build-time arguments into an ordered tuple of patterns.

The single accepted argument is either one pattern string or a list of them.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import PurePath
from typing import Any, Union

from respack.errors import ArityError, ShapeError

# `PurePath` is accepted wherever a string pattern is, since callers often build paths.
_PATTERN_TYPES = (str, PurePath)


@dataclass(frozen=True)
class Single:
    pattern: str


@dataclass(frozen=True)
class Many:
    patterns: tuple[str, ...]


PatternArg = Union[Single, Many]


def classify(arg: Any) -> PatternArg:
    """Turn a raw argument into a `Single` or `Many` variant, or raise `ShapeError`."""
    if isinstance(arg, _PATTERN_TYPES):
        return Single(_check_pattern(str(arg)))
    if isinstance(arg, Sequence) and not isinstance(arg, (bytes, bytearray)):
        patterns: list[str] = []
        for i, element in enumerate(arg):
            if not isinstance(element, _PATTERN_TYPES):
                raise ShapeError(
                    f"expected string literal at position {i}, got {type(element).__name__}"
                )
            patterns.append(_check_pattern(str(element)))
        return Many(tuple(patterns))
    raise ShapeError(
        "wrong format for parameter: expected a string or a list of strings, "
        f"got {type(arg).__name__}"
    )


def parse_patterns(*args: Any) -> tuple[str, ...]:
    """
    Parse exactly one argument into patterns, preserving input order.

    An empty list is legal and yields no patterns.
    """
    if len(args) != 1:
        raise ArityError(f"expected 1 argument but got {len(args)} (did you forget []?)")
    variant = classify(args[0])
    if isinstance(variant, Single):
        return (variant.pattern,)
    return variant.patterns


def _check_pattern(pattern: str) -> str:
    if not pattern:
        raise ShapeError("pattern must be a non-empty string", pattern=pattern)
    return pattern

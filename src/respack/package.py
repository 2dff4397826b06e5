"""
The assembled resource table and its query surface.

A `Package` is an ordered, immutable sequence of `(name, content)` entries. Names
are tuples of path components, so lookups do not depend on the platform's path
separator. Entries keep discovery order and are not deduplicated: when two entries
share a name, the first one wins.
"""

from __future__ import annotations

import os
from collections.abc import Iterable, Iterator, Sequence
from dataclasses import dataclass
from pathlib import PurePath, PurePosixPath
from typing import Union

NameQuery = Union[str, bytes, PurePath, Sequence[str]]


def name_components(name: NameQuery) -> tuple[str, ...]:
    """
    Split a name into components. Strings may use `/` or the native separator.
    """
    if isinstance(name, bytes):
        name = os.fsdecode(name)
    if isinstance(name, str):
        text = name
        for sep in (os.sep, os.altsep):
            if sep and sep != "/":
                text = text.replace(sep, "/")
        return PurePosixPath(text).parts
    if isinstance(name, PurePath):
        return name.parts
    return tuple(name)


@dataclass(frozen=True)
class ResourceEntry:
    name: tuple[str, ...]
    content: bytes

    @property
    def name_str(self) -> str:
        """The name joined with `/`."""
        return "/".join(self.name)


@dataclass(frozen=True)
class Package:
    entries: tuple[ResourceEntry, ...] = ()

    @classmethod
    def from_pairs(cls, pairs: Iterable[tuple[NameQuery, bytes]]) -> Package:
        """Build a package from `(name, content)` pairs, e.g. from an embedded table."""
        return cls(
            tuple(ResourceEntry(name_components(name), bytes(content)) for name, content in pairs)
        )

    def iterate(self) -> Iterator[tuple[str, bytes]]:
        """Yield `(name, content)` pairs in discovery order. Each call starts over."""
        for entry in self.entries:
            yield entry.name_str, entry.content

    def find(self, name: NameQuery) -> bytes | None:
        """
        Content of the first entry named `name`, or `None` if there is none.
        This is a linear scan.
        """
        wanted = name_components(name)
        for entry in self.entries:
            if entry.name == wanted:
                return entry.content
        return None

    def names(self) -> list[str]:
        return [entry.name_str for entry in self.entries]

    def total_size(self) -> int:
        return sum(len(entry.content) for entry in self.entries)

    def __iter__(self) -> Iterator[tuple[str, bytes]]:
        return self.iterate()

    def __len__(self) -> int:
        return len(self.entries)

    def __getitem__(self, index: int) -> ResourceEntry:
        return self.entries[index]

    def __contains__(self, name: object) -> bool:
        if not isinstance(name, (str, bytes, PurePath, tuple, list)):
            return False
        return self.find(name) is not None


def assemble(pairs: Iterable[tuple[tuple[str, ...], bytes]]) -> Package:
    """Zip names with contents into a `Package`, keeping the given order."""
    return Package(tuple(ResourceEntry(name, content) for name, content in pairs))

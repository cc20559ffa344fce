"""Ordering policy for directory listings.

A ``SortOption`` is supplied by configuration to every cache and listing
operation. It filters hidden names and defines a strict total order over
entries: ties on the chosen key fall back to name and finally to path, so two
distinct entries never compare equal.
"""

from __future__ import annotations

import re
from collections.abc import Iterable
from dataclasses import dataclass, replace
from enum import Enum
from functools import cmp_to_key

from .types import DirEntry

_DIGIT_RUN_RE = re.compile(r"(\d+)")


class SortMethod(Enum):
    NATURAL = "natural"
    LEXICAL = "lexical"
    SIZE = "size"
    MTIME = "mtime"

    @classmethod
    def parse(cls, value: str) -> SortMethod:
        normalized = str(value).strip().lower()
        for method in cls:
            if method.value == normalized:
                return method
        raise ValueError(f"unknown sort method: {value!r}")


def natural_key(text: str) -> tuple[tuple[int, int | str], ...]:
    """Split ``text`` into digit/non-digit runs so ``file2`` sorts before ``file10``."""
    parts: list[tuple[int, int | str]] = []
    for chunk in _DIGIT_RUN_RE.split(text):
        if not chunk:
            continue
        if chunk.isdigit():
            parts.append((0, int(chunk)))
        else:
            parts.append((1, chunk))
    return tuple(parts)


def _sign(value: int) -> int:
    return (value > 0) - (value < 0)


def _cmp(left, right) -> int:
    if left < right:
        return -1
    if left > right:
        return 1
    return 0


@dataclass(frozen=True)
class SortOption:
    """Comparator settings for one listing: key, grouping and direction."""

    method: SortMethod = SortMethod.NATURAL
    directories_first: bool = True
    case_sensitive: bool = False
    reverse: bool = False
    show_hidden: bool = False

    def is_visible(self, name: str) -> bool:
        """Return whether a child called ``name`` belongs in the listing."""
        return self.show_hidden or not name.startswith(".")

    def _name(self, entry: DirEntry) -> str:
        return entry.name if self.case_sensitive else entry.name.lower()

    def _compare_primary(self, a: DirEntry, b: DirEntry) -> int:
        if self.method is SortMethod.SIZE:
            return _cmp(a.metadata.size, b.metadata.size)
        if self.method is SortMethod.MTIME:
            return _cmp(a.metadata.mtime_ns or 0, b.metadata.mtime_ns or 0)
        if self.method is SortMethod.NATURAL:
            return _cmp(natural_key(self._name(a)), natural_key(self._name(b)))
        return _cmp(self._name(a), self._name(b))

    def compare(self, a: DirEntry, b: DirEntry) -> int:
        """Three-way compare two entries; ``0`` only when their paths are equal.

        Directory grouping is applied before direction, so ``reverse`` keeps
        directories on top when ``directories_first`` is set.
        """
        if a.path == b.path:
            return 0
        if self.directories_first and a.is_dir != b.is_dir:
            return -1 if a.is_dir else 1

        result = self._compare_primary(a, b)
        if result == 0:
            result = _cmp(self._name(a), self._name(b))
        if result == 0:
            result = _cmp(a.name, b.name)
        if result == 0:
            result = _cmp(str(a.path), str(b.path))
        result = _sign(result)
        return -result if self.reverse else result

    def sort(self, entries: Iterable[DirEntry]) -> list[DirEntry]:
        """Return ``entries`` as a new list in this option's order."""
        return sorted(entries, key=cmp_to_key(self.compare))

    def with_changes(self, **changes) -> SortOption:
        return replace(self, **changes)


__all__ = [
    "SortMethod",
    "SortOption",
    "natural_key",
]

"""Domain datatypes for directory entries and their metadata snapshots."""

from __future__ import annotations

import stat
from dataclasses import dataclass, field
from enum import Enum
from functools import total_ordering
from pathlib import Path


class FileType(Enum):
    """Coarse filesystem object kind as seen by ``lstat``."""

    REGULAR = "regular"
    DIRECTORY = "directory"
    SYMLINK = "symlink"
    OTHER = "other"

    @classmethod
    def from_mode(cls, mode: int) -> FileType:
        if stat.S_ISLNK(mode):
            return cls.SYMLINK
        if stat.S_ISDIR(mode):
            return cls.DIRECTORY
        if stat.S_ISREG(mode):
            return cls.REGULAR
        return cls.OTHER


@dataclass(frozen=True)
class Metadata:
    """Metadata observed for one path at listing time.

    ``degraded`` marks a snapshot built without a successful ``lstat`` (the
    name was listed but its metadata could not be read).
    """

    file_type: FileType
    size: int = 0
    mode: int = 0
    mtime_ns: int | None = None
    degraded: bool = False

    @property
    def permissions(self) -> int:
        return stat.S_IMODE(self.mode)

    @property
    def is_dir(self) -> bool:
        return self.file_type is FileType.DIRECTORY

    @property
    def is_symlink(self) -> bool:
        return self.file_type is FileType.SYMLINK

    @classmethod
    def degraded_for(cls) -> Metadata:
        return cls(file_type=FileType.OTHER, degraded=True)


@total_ordering
@dataclass(eq=False)
class DirEntry:
    """One filesystem object inside a directory listing.

    Equality, hashing and natural ordering use ``path`` only, so entries
    carrying stale metadata still compare equal to fresh ones. Display order
    inside a listing comes from a ``SortOption``, not from this ordering.
    """

    name: str
    path: Path
    metadata: Metadata
    selected: bool = field(default=False)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, DirEntry):
            return NotImplemented
        return self.path == other.path

    def __lt__(self, other: DirEntry) -> bool:
        if not isinstance(other, DirEntry):
            return NotImplemented
        return self.path < other.path

    def __hash__(self) -> int:
        return hash(self.path)

    def __str__(self) -> str:
        return self.name

    @property
    def is_dir(self) -> bool:
        return self.metadata.is_dir

    def set_selected(self, selected: bool) -> None:
        self.selected = bool(selected)

    def toggle_selected(self) -> bool:
        self.selected = not self.selected
        return self.selected


__all__ = [
    "FileType",
    "Metadata",
    "DirEntry",
]

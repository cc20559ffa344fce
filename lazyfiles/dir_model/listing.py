"""Directory listings: ordered entries plus cursor and freshness state."""

from __future__ import annotations

import logging
import os
from collections.abc import Iterator, Sequence
from enum import Enum
from pathlib import Path

from .metadata import metadata_from_stat, safe_mtime_ns
from .sort import SortOption
from .types import DirEntry, Metadata

logger = logging.getLogger(__name__)


class Freshness(Enum):
    FRESH = "fresh"
    STALE = "stale"


def list_entries(directory: Path, sort_option: SortOption) -> list[DirEntry]:
    """List visible children of ``directory`` as entries in sort order.

    A child that vanishes between listing and stat is skipped. A child whose
    metadata cannot be read for another reason is kept with degraded
    metadata. Failure to open ``directory`` itself raises ``OSError``.
    """
    entries: list[DirEntry] = []
    with os.scandir(directory) as children:
        for child in children:
            name = child.name
            if not sort_option.is_visible(name):
                continue
            child_path = Path(child.path)
            try:
                metadata = metadata_from_stat(child.stat(follow_symlinks=False))
            except FileNotFoundError:
                logger.debug("entry vanished while listing: %s", child_path)
                continue
            except OSError as exc:
                logger.debug("degraded metadata for %s: %s", child_path, exc)
                metadata = Metadata.degraded_for()
            entries.append(DirEntry(name=name, path=child_path, metadata=metadata))
    return sort_option.sort(entries)


def rederive_cursor(previous_path: Path | None, entries: Sequence[DirEntry]) -> int | None:
    """Return the cursor index for ``entries`` after a reload.

    The cursor follows ``previous_path`` when it is still listed, otherwise it
    falls back to ``0``, or ``None`` when ``entries`` is empty.
    """
    if not entries:
        return None
    if previous_path is not None:
        for idx, entry in enumerate(entries):
            if entry.path == previous_path:
                return idx
    return 0


class DirList:
    """Ordered entries of one directory with a cursor and freshness tag.

    The cursor is ``None`` exactly when ``contents`` is empty and is otherwise
    a valid index into ``contents``.
    """

    def __init__(
        self,
        path: Path,
        contents: list[DirEntry],
        *,
        sort_option: SortOption | None = None,
        index: int | None = 0,
        read_mtime_ns: int | None = None,
    ) -> None:
        self.path = path
        self.contents = contents
        self.sort_option = sort_option if sort_option is not None else SortOption()
        self.read_mtime_ns = read_mtime_ns
        self.freshness = Freshness.FRESH
        self.index: int | None = None
        self.set_cursor(index)

    @classmethod
    def load(cls, path: Path, sort_option: SortOption) -> DirList:
        """Read ``path`` from storage into a new fresh listing."""
        # mtime is read before the scan; a change during the scan leaves it outdated.
        read_mtime_ns = safe_mtime_ns(path)
        contents = list_entries(path, sort_option)
        return cls(path, contents, sort_option=sort_option, read_mtime_ns=read_mtime_ns)

    def __len__(self) -> int:
        return len(self.contents)

    def __iter__(self) -> Iterator[DirEntry]:
        return iter(self.contents)

    def __repr__(self) -> str:
        return (
            f"DirList(path={str(self.path)!r}, entries={len(self.contents)}, "
            f"index={self.index}, freshness={self.freshness.value})"
        )

    @property
    def is_empty(self) -> bool:
        return not self.contents

    @property
    def is_fresh(self) -> bool:
        return self.freshness is Freshness.FRESH

    def depreciate(self) -> None:
        """Mark contents stale without touching them."""
        self.freshness = Freshness.STALE

    def need_update(self, sort_option: SortOption | None = None) -> bool:
        """Cheap check for whether a reload is due.

        True when marked stale, when the directory's own mtime differs from
        the one captured at the last read, or when a different sort option is
        requested. Never lists the directory.
        """
        if self.freshness is Freshness.STALE:
            return True
        if sort_option is not None and sort_option != self.sort_option:
            return True
        return safe_mtime_ns(self.path) != self.read_mtime_ns

    def reload_contents(self, sort_option: SortOption) -> None:
        """Re-list the directory, keeping the cursor on the same path if possible.

        Raises ``OSError`` when the directory can no longer be read; the
        listing is left unchanged in that case.
        """
        previous_path = self.curr_entry_path
        read_mtime_ns = safe_mtime_ns(self.path)
        contents = list_entries(self.path, sort_option)
        self.contents = contents
        self.index = rederive_cursor(previous_path, contents)
        self.sort_option = sort_option
        self.read_mtime_ns = read_mtime_ns
        self.freshness = Freshness.FRESH

    @property
    def curr_entry(self) -> DirEntry | None:
        if self.index is None:
            return None
        return self.contents[self.index]

    @property
    def curr_entry_path(self) -> Path | None:
        entry = self.curr_entry
        return entry.path if entry is not None else None

    def index_of(self, path: Path) -> int | None:
        """Return the position of the entry whose path equals ``path``."""
        for idx, entry in enumerate(self.contents):
            if entry.path == path:
                return idx
        return None

    def set_cursor(self, index: int | None) -> None:
        """Place the cursor at ``index`` clamped into range."""
        if not self.contents:
            self.index = None
            return
        if index is None:
            index = 0
        self.index = max(0, min(len(self.contents) - 1, index))

    def set_cursor_path(self, path: Path) -> bool:
        """Move the cursor onto ``path``; return ``False`` when it is not listed."""
        idx = self.index_of(path)
        if idx is None:
            return False
        self.index = idx
        return True

    def move_cursor(self, delta: int) -> None:
        if self.index is None:
            return
        self.set_cursor(self.index + delta)

    def selected_entries(self) -> list[DirEntry]:
        """Return selected entries in listing order."""
        return [entry for entry in self.contents if entry.selected]

    def toggle_selected_at_cursor(self) -> bool:
        entry = self.curr_entry
        if entry is None:
            return False
        return entry.toggle_selected()

    def select_all(self) -> None:
        for entry in self.contents:
            entry.set_selected(True)

    def clear_selection(self) -> None:
        for entry in self.contents:
            entry.set_selected(False)


__all__ = [
    "Freshness",
    "DirList",
    "list_entries",
    "rederive_cursor",
]

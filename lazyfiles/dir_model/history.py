"""Path-keyed cache of directory listings with lazy refresh.

The cache is unbounded. Entries are only removed when a forced reload fails,
which is taken to mean the directory is gone or no longer readable. Callers
run on a single control flow, so there is no locking here.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Iterator
from pathlib import Path

from .listing import DirList
from .sort import SortOption

logger = logging.getLogger(__name__)


def normalize_path(path: Path | str) -> Path:
    """Return an absolute, lexically normalized key for ``path``."""
    return Path(os.path.abspath(os.fspath(path)))


class DirectoryHistory:
    """Mapping from absolute directory path to its cached ``DirList``."""

    def __init__(self) -> None:
        self._lists: dict[Path, DirList] = {}

    def __contains__(self, path: object) -> bool:
        if not isinstance(path, (str, os.PathLike)):
            return False
        return normalize_path(path) in self._lists

    def __len__(self) -> int:
        return len(self._lists)

    def __iter__(self) -> Iterator[Path]:
        return iter(list(self._lists))

    def get(self, path: Path) -> DirList | None:
        return self._lists.get(normalize_path(path))

    def remove(self, path: Path) -> DirList | None:
        return self._lists.pop(normalize_path(path), None)

    def _reload_or_evict(self, key: Path, dirlist: DirList, sort_option: SortOption) -> DirList | None:
        try:
            dirlist.reload_contents(sort_option)
        except OSError as exc:
            logger.debug("evicting %s after failed reload: %s", key, exc)
            del self._lists[key]
            return None
        return dirlist

    def _create(self, key: Path, sort_option: SortOption) -> DirList:
        dirlist = DirList.load(key, sort_option)
        self._lists[key] = dirlist
        logger.debug("cached new listing for %s (%d entries)", key, len(dirlist))
        return dirlist

    def create_or_soft_update(self, path: Path, sort_option: SortOption) -> DirList:
        """Return a listing for ``path``, reloading only when it reports outdated.

        Creating a new listing propagates ``OSError``. An existing listing that
        fails to reload is kept as it was, still stale, rather than evicted.
        """
        key = normalize_path(path)
        dirlist = self._lists.get(key)
        if dirlist is None:
            return self._create(key, sort_option)
        if dirlist.need_update(sort_option):
            try:
                dirlist.reload_contents(sort_option)
            except OSError as exc:
                logger.debug("soft update of %s failed, keeping cached listing: %s", key, exc)
        return dirlist

    def create_or_reload(self, path: Path, sort_option: SortOption) -> DirList | None:
        """Return a freshly read listing for ``path``.

        An existing listing whose reload fails is evicted and ``None`` is
        returned. Creating a new listing propagates ``OSError``.
        """
        key = normalize_path(path)
        dirlist = self._lists.get(key)
        if dirlist is None:
            return self._create(key, sort_option)
        return self._reload_or_evict(key, dirlist, sort_option)

    def reload(self, path: Path, sort_option: SortOption) -> DirList | None:
        """Force-reload ``path`` if cached; evict it when the reload fails.

        Uncached paths are left alone and ``None`` is returned.
        """
        key = normalize_path(path)
        dirlist = self._lists.get(key)
        if dirlist is None:
            return None
        return self._reload_or_evict(key, dirlist, sort_option)

    def populate_to_root(self, path: Path, sort_option: SortOption) -> list[Path]:
        """Ensure listings exist for ``path`` and each ancestor up to the root.

        Every ancestor's cursor is pointed at the child the walk came up from,
        when that child is listed. An ancestor that cannot be read is skipped
        and the walk continues above it; skipped ancestors are returned. A
        failure on ``path`` itself propagates.
        """
        start = normalize_path(path)
        skipped: list[Path] = []
        prev: Path | None = None
        for curr in (start, *start.parents):
            try:
                dirlist = self.create_or_soft_update(curr, sort_option)
            except OSError as exc:
                if curr == start:
                    raise
                logger.warning("cannot list ancestor %s: %s", curr, exc)
                skipped.append(curr)
                prev = curr
                continue
            if prev is not None:
                dirlist.set_cursor_path(prev)
            prev = curr
        return skipped

    def depreciate_entry(self, path: Path) -> None:
        dirlist = self._lists.get(normalize_path(path))
        if dirlist is not None:
            dirlist.depreciate()

    def depreciate_all_entries(self) -> None:
        for dirlist in self._lists.values():
            dirlist.depreciate()


__all__ = [
    "DirectoryHistory",
    "normalize_path",
]

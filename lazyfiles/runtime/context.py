"""Navigation state over the history cache.

Tracks the current directory and the parent/preview listings rendered beside
it, and turns file-operation reports into cache refreshes.
"""

from __future__ import annotations

import logging
from pathlib import Path

from ..dir_model import DirectoryHistory, DirList, SortOption, normalize_path
from ..file_ops import ConfirmationProvider, FileOperations, OperationReport, ProgressCallback

logger = logging.getLogger(__name__)


class NavigationContext:
    """Current directory plus the cache that backs every pane."""

    def __init__(
        self,
        start: Path,
        sort_option: SortOption | None = None,
        history: DirectoryHistory | None = None,
    ) -> None:
        """Populate listings from ``start`` up to the root.

        Raises ``OSError`` when ``start`` itself cannot be listed.
        """
        self.history = history if history is not None else DirectoryHistory()
        self.sort_option = sort_option if sort_option is not None else SortOption()
        self.curr_path = normalize_path(start)
        self.history.populate_to_root(self.curr_path, self.sort_option)

    @property
    def curr_list(self) -> DirList | None:
        return self.history.get(self.curr_path)

    @property
    def parent_path(self) -> Path | None:
        parent = self.curr_path.parent
        return parent if parent != self.curr_path else None

    @property
    def parent_list(self) -> DirList | None:
        parent = self.parent_path
        return self.history.get(parent) if parent is not None else None

    @property
    def preview_path(self) -> Path | None:
        """Directory under the cursor, shown in the preview pane."""
        dirlist = self.curr_list
        if dirlist is None:
            return None
        entry = dirlist.curr_entry
        if entry is None or not entry.is_dir:
            return None
        return entry.path

    @property
    def preview_list(self) -> DirList | None:
        path = self.preview_path
        return self.history.get(path) if path is not None else None

    def load_preview(self) -> DirList | None:
        """Soft-update the preview listing; unreadable previews yield ``None``."""
        path = self.preview_path
        if path is None:
            return None
        try:
            return self.history.create_or_soft_update(path, self.sort_option)
        except OSError as exc:
            logger.debug("no preview for %s: %s", path, exc)
            return None

    def change_directory(self, path: Path) -> DirList:
        """Make ``path`` the current directory with a freshly read listing."""
        target = normalize_path(path)
        dirlist = self.history.create_or_reload(target, self.sort_option)
        if dirlist is None:
            raise FileNotFoundError(f"directory is no longer readable: {target}")
        if target != self.curr_path:
            self.history.depreciate_entry(self.curr_path)
        self.curr_path = target
        self.history.populate_to_root(target, self.sort_option)
        return dirlist

    def enter_selected(self) -> bool:
        path = self.preview_path
        if path is None:
            return False
        self.change_directory(path)
        return True

    def go_parent(self) -> bool:
        parent = self.parent_path
        if parent is None:
            return False
        self.change_directory(parent)
        return True

    def set_sort_option(self, sort_option: SortOption) -> None:
        self.sort_option = sort_option
        self.history.depreciate_all_entries()
        self.reload_dirlists()

    def reload_dirlists(self) -> None:
        """Force-reload current, parent and preview listings.

        When the current directory was evicted, moves to its nearest ancestor
        that can still be listed.
        """
        self.history.reload(self.curr_path, self.sort_option)
        for path in (self.parent_path, self.preview_path):
            if path is not None:
                self.history.reload(path, self.sort_option)
        if self.curr_path not in self.history:
            self._recover_current()

    def _recover_current(self) -> None:
        lost = self.curr_path
        for candidate in lost.parents:
            try:
                dirlist = self.history.create_or_reload(candidate, self.sort_option)
            except OSError:
                continue
            if dirlist is None:
                continue
            logger.info("%s disappeared, moved to %s", lost, candidate)
            self.curr_path = candidate
            self.history.populate_to_root(candidate, self.sort_option)
            return
        raise FileNotFoundError(f"no readable ancestor of {lost}")

    def apply_report(self, report: OperationReport) -> None:
        """Mark every directory a file command touched stale, then reload visible panes."""
        for path in report.invalidated_paths:
            self.history.depreciate_entry(path)
        if report.invalidated_paths:
            self.reload_dirlists()

    def paste(self, operations: FileOperations, progress: ProgressCallback | None = None) -> OperationReport:
        report = operations.paste(self.curr_path, progress=progress)
        self.apply_report(report)
        return report

    def delete(self, operations: FileOperations, confirm: ConfirmationProvider) -> OperationReport:
        report = operations.delete(self.curr_list, confirm)
        self.apply_report(report)
        return report

    def rename_selected(self, operations: FileOperations, new_name: str) -> OperationReport | None:
        dirlist = self.curr_list
        path = dirlist.curr_entry_path if dirlist is not None else None
        if path is None:
            return None
        report = operations.rename(path, new_name)
        self.apply_report(report)
        refreshed = self.curr_list
        if report.succeeded and refreshed is not None:
            refreshed.set_cursor_path(path.with_name(new_name))
        return report


__all__ = ["NavigationContext"]

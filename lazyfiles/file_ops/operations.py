"""Cut/copy/paste/delete/rename commands over the shared clipboard.

Commands act on the active listing's selection and return an
``OperationReport`` describing what happened and which directories must be
invalidated. Refreshing the history cache is left to the navigation layer.
"""

from __future__ import annotations

import errno
import logging
import os
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from pathlib import Path

from ..dir_model import DirList
from .clipboard import FileClipboard, FileOp
from .selection import collect_selected_paths
from .transfer import (
    ItemFailure,
    ProgressCallback,
    TransferOptions,
    TransferProgress,
    copy_items,
    move_items,
    remove_path,
)

logger = logging.getLogger(__name__)

AFFIRMATIVE_RESPONSES = frozenset({"y", "Y", "\n", "\r"})

ConfirmationProvider = Callable[[str], object]


def is_affirmative(response: object) -> bool:
    """Return whether a confirmation answer accepts the destructive action.

    ``True`` or a single ``y``/Enter keypress accepts; anything else declines.
    """
    if isinstance(response, bool):
        return response
    if isinstance(response, str):
        return response in AFFIRMATIVE_RESPONSES
    return False


def format_bytes(count: int) -> str:
    if count < 1024:
        return f"{count} B"
    value = float(count)
    for unit in ("KiB", "MiB", "GiB"):
        value /= 1024.0
        if value < 1024.0:
            break
    return f"{value:.1f} {unit}"


def progress_message(progress: TransferProgress) -> str:
    """Status-line text for one progress update."""
    return (
        f"{format_bytes(progress.copied_bytes)} / {format_bytes(progress.total_bytes)}"
        f"  {progress.file_name}"
    )


def _unique_paths(paths: Iterable[Path]) -> tuple[Path, ...]:
    seen: dict[Path, None] = {}
    for path in paths:
        seen.setdefault(Path(path), None)
    return tuple(seen)


@dataclass
class OperationReport:
    """Result of one file command, aggregated over its items."""

    action: str
    attempted: list[Path] = field(default_factory=list)
    completed: list[Path] = field(default_factory=list)
    skipped: list[Path] = field(default_factory=list)
    failures: list[ItemFailure] = field(default_factory=list)
    aborted: bool = False
    cancelled: bool = False
    copied_bytes: int = 0
    invalidated_paths: tuple[Path, ...] = ()

    @property
    def is_noop(self) -> bool:
        return not self.attempted

    @property
    def succeeded(self) -> bool:
        return not (self.failures or self.aborted or self.cancelled)

    @property
    def failed_paths(self) -> list[Path]:
        return [failure.path for failure in self.failures]

    def summary(self) -> str:
        """One-line user-facing outcome; never reports success over failures."""
        total = len(self.attempted)
        if self.cancelled:
            return f"{self.action.capitalize()} cancelled"
        if total == 0:
            return "Nothing to " + self.action
        if self.aborted:
            return f"{self.action.capitalize()} aborted after {len(self.completed)} of {total} items"
        if self.failures:
            return f"{len(self.failures)} of {total} items failed"
        if self.skipped:
            return f"{self.action.capitalize()}: {len(self.completed)} done, {len(self.skipped)} skipped"
        noun = "item" if total == 1 else "items"
        return f"{self.action.capitalize()}: {total} {noun} done"


class FileOperations:
    """File commands bound to one clipboard and default transfer options."""

    def __init__(
        self,
        clipboard: FileClipboard | None = None,
        options: TransferOptions | None = None,
    ) -> None:
        self.clipboard = clipboard if clipboard is not None else FileClipboard()
        self.options = options if options is not None else TransferOptions()

    def _set_clipboard(self, op: FileOp, dirlist: DirList | None) -> bool:
        paths = collect_selected_paths(dirlist)
        if not paths:
            return False
        self.clipboard.set(op, paths)
        logger.debug("clipboard set to %s of %d paths", op.value, len(paths))
        return True

    def set_cut(self, dirlist: DirList | None) -> bool:
        """Replace the clipboard with a cut of the selection.

        Returns ``False`` and leaves the clipboard alone when nothing is selected.
        """
        return self._set_clipboard(FileOp.CUT, dirlist)

    def set_copy(self, dirlist: DirList | None) -> bool:
        return self._set_clipboard(FileOp.COPY, dirlist)

    def paste(
        self,
        destination: Path,
        progress: ProgressCallback | None = None,
        options: TransferOptions | None = None,
    ) -> OperationReport:
        """Transfer the clipboard's paths into ``destination``.

        The clipboard's path list is consumed up front, so a repeated paste is
        a no-op whether this one succeeds, fails partway or is aborted.
        """
        contents = self.clipboard.take()
        action = "move" if contents.op is FileOp.CUT else "copy"
        if contents.is_empty:
            return OperationReport(action=action)

        destination = Path(destination)
        sources = list(contents.paths)
        transfer_options = options if options is not None else self.options
        if contents.op is FileOp.CUT:
            result = move_items(sources, destination, transfer_options, progress)
        else:
            result = copy_items(sources, destination, transfer_options, progress)

        report = OperationReport(
            action=action,
            attempted=sources,
            completed=list(result.completed),
            skipped=list(result.skipped),
            failures=list(result.failures),
            aborted=result.aborted,
            copied_bytes=result.copied_bytes,
            invalidated_paths=_unique_paths([*(source.parent for source in sources), destination]),
        )
        logger.info("paste into %s: %s", destination, report.summary())
        return report

    def delete(self, dirlist: DirList | None, confirm: ConfirmationProvider) -> OperationReport:
        """Remove the selection after an explicit affirmative confirmation.

        Every path is attempted even when an earlier one fails.
        """
        paths = collect_selected_paths(dirlist)
        if not paths:
            return OperationReport(action="delete")

        noun = "item" if len(paths) == 1 else "items"
        if not is_affirmative(confirm(f"Delete {len(paths)} selected {noun}? (y/N)")):
            return OperationReport(action="delete", attempted=paths, cancelled=True)

        report = OperationReport(
            action="delete",
            attempted=paths,
            invalidated_paths=_unique_paths(path.parent for path in paths),
        )
        for path in paths:
            try:
                remove_path(path)
            except OSError as exc:
                logger.warning("failed to delete %s: %s", path, exc)
                report.failures.append(ItemFailure(path=path, error=exc))
                continue
            report.completed.append(path)
        logger.info("delete: %s", report.summary())
        return report

    def rename(self, path: Path, new_name: str) -> OperationReport:
        """Rename ``path`` to ``new_name`` inside the same directory.

        An existing destination is never replaced.
        """
        path = Path(path)
        report = OperationReport(
            action="rename",
            attempted=[path],
            invalidated_paths=(path.parent,),
        )
        try:
            if not new_name or new_name in {".", ".."} or os.sep in new_name:
                raise OSError(errno.EINVAL, "invalid file name", new_name)
            target = path.with_name(new_name)
            if target != path and os.path.lexists(target):
                raise FileExistsError(errno.EEXIST, "destination exists", str(target))
            os.rename(path, target)
        except OSError as exc:
            logger.warning("failed to rename %s to %r: %s", path, new_name, exc)
            report.failures.append(ItemFailure(path=path, error=exc))
            return report
        report.completed.append(path)
        return report


__all__ = [
    "AFFIRMATIVE_RESPONSES",
    "ConfirmationProvider",
    "FileOperations",
    "OperationReport",
    "format_bytes",
    "is_affirmative",
    "progress_message",
]

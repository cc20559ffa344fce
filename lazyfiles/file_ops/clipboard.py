"""Pending cut/copy state shared between the command loop and paste workers."""

from __future__ import annotations

import threading
from collections.abc import Iterable
from dataclasses import dataclass
from enum import Enum
from pathlib import Path


class FileOp(Enum):
    COPY = "copy"
    CUT = "cut"


@dataclass(frozen=True)
class ClipboardContents:
    """Immutable view of the clipboard at one moment."""

    op: FileOp
    paths: tuple[Path, ...]

    @property
    def is_empty(self) -> bool:
        return not self.paths


class FileClipboard:
    """Single pending file operation guarded by a lock.

    The lock only covers reading or replacing the mode and path list; file
    transfers run outside it.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._op = FileOp.COPY
        self._paths: list[Path] = []

    def set(self, op: FileOp, paths: Iterable[Path]) -> None:
        """Replace the pending operation. Previous paths are discarded."""
        new_paths = [Path(path) for path in paths]
        with self._lock:
            self._op = op
            self._paths = new_paths

    def contents(self) -> ClipboardContents:
        with self._lock:
            return ClipboardContents(op=self._op, paths=tuple(self._paths))

    def take(self) -> ClipboardContents:
        """Return the pending operation and clear its path list.

        The mode is kept so a later ``contents()`` still reports it.
        """
        with self._lock:
            taken = ClipboardContents(op=self._op, paths=tuple(self._paths))
            self._paths = []
        return taken

    def clear(self) -> None:
        with self._lock:
            self._paths = []

    @property
    def is_empty(self) -> bool:
        with self._lock:
            return not self._paths


__all__ = [
    "FileOp",
    "ClipboardContents",
    "FileClipboard",
]

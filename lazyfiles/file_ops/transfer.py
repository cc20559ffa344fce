"""Recursive copy/move of file-system items with progress and cancellation.

Transfers report cumulative bytes to a progress callback after every chunk.
The callback answers with a ``TransferDecision``; ``ABORT`` stops the
transfer at the next chunk boundary, the file being written is removed, and
no later item is started. Failures are collected per source item.
"""

from __future__ import annotations

import errno
import logging
import os
import shutil
import stat
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

logger = logging.getLogger(__name__)

DEFAULT_BUFFER_SIZE = 64 * 1024


class TransferDecision(Enum):
    CONTINUE = "continue"
    ABORT = "abort"


class ConflictPolicy(Enum):
    """What to do when the destination name already exists.

    ``ERROR`` records a ``FileExistsError`` for the item, ``SKIP`` leaves it
    untouched, ``OVERWRITE`` replaces files and merges directories, and
    ``RENAME`` picks the first free ``name_N`` variant.
    """

    ERROR = "error"
    SKIP = "skip"
    OVERWRITE = "overwrite"
    RENAME = "rename"

    @classmethod
    def parse(cls, value: str) -> ConflictPolicy:
        normalized = str(value).strip().lower()
        for policy in cls:
            if policy.value == normalized:
                return policy
        raise ValueError(f"unknown conflict policy: {value!r}")


@dataclass(frozen=True)
class TransferOptions:
    conflict_policy: ConflictPolicy = ConflictPolicy.ERROR
    buffer_size: int = DEFAULT_BUFFER_SIZE


@dataclass(frozen=True)
class TransferProgress:
    """Snapshot handed to the progress callback."""

    copied_bytes: int
    total_bytes: int
    file_name: str
    file_bytes_copied: int
    file_total_bytes: int


ProgressCallback = Callable[[TransferProgress], TransferDecision]


@dataclass(frozen=True)
class ItemFailure:
    path: Path
    error: OSError

    def describe(self) -> str:
        reason = self.error.strerror or str(self.error)
        return f"{self.path}: {reason}"


@dataclass
class TransferResult:
    """Outcome of one copy/move batch, in source order."""

    completed: list[Path] = field(default_factory=list)
    targets: list[Path] = field(default_factory=list)
    skipped: list[Path] = field(default_factory=list)
    failures: list[ItemFailure] = field(default_factory=list)
    aborted: bool = False
    copied_bytes: int = 0
    total_bytes: int = 0


def remove_path(path: Path) -> None:
    """Remove ``path``: directories recursively, anything else as one file.

    Symlinks are unlinked, never followed.
    """
    st = os.lstat(path)
    if stat.S_ISDIR(st.st_mode):
        shutil.rmtree(path)
    else:
        os.unlink(path)


def tree_size(path: Path) -> int:
    """Total bytes of regular files at or below ``path``; unreadable parts count as zero."""
    try:
        st = os.lstat(path)
    except OSError:
        return 0
    if not stat.S_ISDIR(st.st_mode):
        return int(st.st_size) if stat.S_ISREG(st.st_mode) else 0
    total = 0
    for dirpath, _dirnames, filenames in os.walk(path):
        for name in filenames:
            try:
                child = os.lstat(os.path.join(dirpath, name))
            except OSError:
                continue
            if stat.S_ISREG(child.st_mode):
                total += int(child.st_size)
    return total


def unique_destination(target: Path, keep_suffix: bool = True) -> Path:
    """Return the first non-existing ``stem_N.suffix`` sibling of ``target``.

    Directories pass ``keep_suffix=False`` so a dotted name is numbered as a whole.
    """
    if keep_suffix:
        stem, suffix = target.stem, target.suffix
    else:
        stem, suffix = target.name, ""
    n = 1
    candidate = target.with_name(f"{stem}_{n}{suffix}")
    while os.path.lexists(candidate):
        n += 1
        candidate = target.with_name(f"{stem}_{n}{suffix}")
    return candidate


def _is_within(path: Path, root: Path) -> bool:
    try:
        return Path(os.path.realpath(path)).is_relative_to(os.path.realpath(root))
    except OSError:
        return False


class _Transfer:
    """Mutable bookkeeping for one batch."""

    def __init__(self, options: TransferOptions, progress: ProgressCallback | None) -> None:
        self.options = options
        self.progress = progress
        self.copied_bytes = 0
        self.total_bytes = 0
        self.aborted = False

    def report(self, file_name: str, file_done: int, file_total: int) -> bool:
        """Notify progress; return ``False`` once the callback asked to abort."""
        if self.progress is None:
            return True
        decision = self.progress(
            TransferProgress(
                copied_bytes=self.copied_bytes,
                total_bytes=self.total_bytes,
                file_name=file_name,
                file_bytes_copied=file_done,
                file_total_bytes=file_total,
            )
        )
        if decision is TransferDecision.ABORT:
            self.aborted = True
            return False
        return True

    def resolve_target(self, source: Path, destination: Path) -> Path | None:
        """Pick where ``source`` lands in ``destination``; ``None`` means skip."""
        os.lstat(source)
        target = destination / source.name
        source_is_dir = source.is_dir() and not source.is_symlink()
        if source_is_dir and _is_within(destination, source):
            raise OSError(errno.EINVAL, "cannot transfer a directory into itself", str(source))
        if not os.path.lexists(target):
            return target

        policy = self.options.conflict_policy
        if policy is ConflictPolicy.SKIP:
            return None
        if policy is ConflictPolicy.RENAME:
            return unique_destination(target, keep_suffix=not source_is_dir)
        if policy is ConflictPolicy.OVERWRITE:
            if os.path.exists(target) and os.path.samefile(source, target):
                raise shutil.SameFileError(f"{source} and {target} are the same file")
            return target
        raise FileExistsError(errno.EEXIST, "destination exists", str(target))

    def clear_for_overwrite(self, source: Path, target: Path) -> None:
        """Make room at ``target`` unless both sides are directories (merge)."""
        if not os.path.lexists(target):
            return
        target_is_dir = target.is_dir() and not target.is_symlink()
        source_is_dir = source.is_dir() and not source.is_symlink()
        if source_is_dir and target_is_dir:
            return
        remove_path(target)

    def copy_file(self, source: Path, target: Path) -> bool:
        file_total = int(os.lstat(source).st_size)
        file_done = 0
        reported = False
        try:
            with open(source, "rb") as src, open(target, "wb") as dst:
                while True:
                    chunk = src.read(self.options.buffer_size)
                    if not chunk:
                        break
                    dst.write(chunk)
                    file_done += len(chunk)
                    self.copied_bytes += len(chunk)
                    reported = True
                    if not self.report(source.name, file_done, file_total):
                        break
        except OSError:
            _discard_partial(target)
            raise
        if not reported:
            self.report(source.name, file_done, file_total)
        if self.aborted:
            _discard_partial(target)
            return False
        shutil.copystat(source, target)
        return True

    def copy_symlink(self, source: Path, target: Path) -> bool:
        os.symlink(os.readlink(source), target)
        if not self.report(source.name, 0, 0):
            _discard_partial(target)
            return False
        return True

    def copy_tree(self, source: Path, target: Path) -> bool:
        target.mkdir(exist_ok=True)
        with os.scandir(source) as children:
            ordered = sorted(children, key=lambda child: child.name)
        for child in ordered:
            child_source = Path(child.path)
            child_target = target / child.name
            if not self.copy_item(child_source, child_target):
                return False
        shutil.copystat(source, target)
        return True

    def copy_item(self, source: Path, target: Path) -> bool:
        """Copy one file, symlink or directory tree; ``False`` if aborted."""
        mode = os.lstat(source).st_mode
        if not (stat.S_ISLNK(mode) or stat.S_ISDIR(mode) or stat.S_ISREG(mode)):
            raise OSError(errno.EOPNOTSUPP, "cannot copy special file", str(source))
        self.clear_for_overwrite(source, target)
        if stat.S_ISLNK(mode):
            return self.copy_symlink(source, target)
        if stat.S_ISDIR(mode):
            return self.copy_tree(source, target)
        return self.copy_file(source, target)

    def move_item(self, source: Path, target: Path) -> bool:
        """Rename when possible, otherwise copy then remove the source."""
        if not os.path.lexists(target):
            size = tree_size(source)
            try:
                os.rename(source, target)
            except OSError as exc:
                if exc.errno != errno.EXDEV:
                    raise
                logger.debug("cross-device move of %s, falling back to copy", source)
            else:
                self.copied_bytes += size
                self.report(source.name, size, size)
                return True
        if not self.copy_item(source, target):
            return False
        remove_path(source)
        return True


def _discard_partial(target: Path) -> None:
    try:
        os.unlink(target)
    except FileNotFoundError:
        pass
    except OSError as exc:
        logger.warning("could not remove partial file %s: %s", target, exc)


def _run_batch(
    sources: Iterable[Path],
    destination: Path,
    options: TransferOptions,
    progress: ProgressCallback | None,
    move: bool,
) -> TransferResult:
    source_list = [Path(source) for source in sources]
    destination = Path(destination)
    transfer = _Transfer(options, progress)
    transfer.total_bytes = sum(tree_size(source) for source in source_list)
    result = TransferResult(total_bytes=transfer.total_bytes)
    verb = "move" if move else "copy"

    for source in source_list:
        if transfer.aborted:
            break
        try:
            target = transfer.resolve_target(source, destination)
            if target is None:
                logger.debug("skipping %s: destination exists", source)
                result.skipped.append(source)
                continue
            done = transfer.move_item(source, target) if move else transfer.copy_item(source, target)
        except OSError as exc:
            logger.warning("failed to %s %s into %s: %s", verb, source, destination, exc)
            result.failures.append(ItemFailure(path=source, error=exc))
            continue
        if done:
            result.completed.append(source)
            result.targets.append(target)
    result.aborted = transfer.aborted
    result.copied_bytes = transfer.copied_bytes
    return result


def copy_items(
    sources: Iterable[Path],
    destination: Path,
    options: TransferOptions | None = None,
    progress: ProgressCallback | None = None,
) -> TransferResult:
    """Copy every source into ``destination`` preserving directory structure."""
    return _run_batch(sources, destination, options or TransferOptions(), progress, move=False)


def move_items(
    sources: Iterable[Path],
    destination: Path,
    options: TransferOptions | None = None,
    progress: ProgressCallback | None = None,
) -> TransferResult:
    """Move every source into ``destination``, renaming in place when on one volume."""
    return _run_batch(sources, destination, options or TransferOptions(), progress, move=True)


__all__ = [
    "ConflictPolicy",
    "TransferDecision",
    "TransferOptions",
    "TransferProgress",
    "ProgressCallback",
    "ItemFailure",
    "TransferResult",
    "copy_items",
    "move_items",
    "remove_path",
    "tree_size",
    "unique_destination",
]

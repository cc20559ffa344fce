"""Metadata accessor: one ``lstat`` call per path with typed results."""

from __future__ import annotations

import os
from pathlib import Path

from .types import FileType, Metadata


def read_metadata(path: Path) -> Metadata:
    """Return a metadata snapshot for ``path`` without following symlinks.

    Raises ``FileNotFoundError``, ``PermissionError`` or another ``OSError``
    when the path cannot be inspected.
    """
    st = os.lstat(path)
    return metadata_from_stat(st)


def metadata_from_stat(st: os.stat_result) -> Metadata:
    """Build ``Metadata`` from an already-fetched stat result."""
    file_type = FileType.from_mode(st.st_mode)
    size = 0 if file_type is FileType.DIRECTORY else int(st.st_size)
    return Metadata(
        file_type=file_type,
        size=size,
        mode=int(st.st_mode),
        mtime_ns=int(st.st_mtime_ns),
    )


def safe_mtime_ns(path: Path) -> int | None:
    """Return ``st_mtime_ns`` for ``path`` or ``None`` on stat failure."""
    try:
        return int(os.stat(path).st_mtime_ns)
    except OSError:
        return None


__all__ = [
    "read_metadata",
    "metadata_from_stat",
    "safe_mtime_ns",
]

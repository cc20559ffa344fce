"""Resolve which paths a file command acts on."""

from __future__ import annotations

from pathlib import Path

from ..dir_model import DirList


def collect_selected_paths(dirlist: DirList | None) -> list[Path]:
    """Return selected paths in listing order, else the cursored path.

    An empty list means there is nothing to act on and the command is a no-op.
    """
    if dirlist is None:
        return []
    selected = [entry.path for entry in dirlist.selected_entries()]
    if selected:
        return selected
    curr_path = dirlist.curr_entry_path
    return [curr_path] if curr_path is not None else []


__all__ = ["collect_selected_paths"]

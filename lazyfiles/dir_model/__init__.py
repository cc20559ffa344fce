"""Domain model for cached directory listings.

This package contains non-UI primitives:
- entry and metadata datatypes compared by path
- the ``lstat``-based metadata accessor
- sort policies giving a strict total order over entries
- directory listings with cursor, selection and freshness state
- the path-keyed history cache with lazy refresh and eviction on failure
"""

from __future__ import annotations

from .types import DirEntry, FileType, Metadata
from .metadata import metadata_from_stat, read_metadata, safe_mtime_ns
from .sort import SortMethod, SortOption, natural_key
from .listing import DirList, Freshness, list_entries, rederive_cursor
from .history import DirectoryHistory, normalize_path

__all__ = [
    "DirEntry",
    "FileType",
    "Metadata",
    "read_metadata",
    "metadata_from_stat",
    "safe_mtime_ns",
    "SortMethod",
    "SortOption",
    "natural_key",
    "DirList",
    "Freshness",
    "list_entries",
    "rederive_cursor",
    "DirectoryHistory",
    "normalize_path",
]

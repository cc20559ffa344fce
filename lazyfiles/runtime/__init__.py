"""Runtime glue between the directory cache and the file-operation engine.

This package groups navigation state (`NavigationContext`), the background
paste runner, and persisted preferences.
"""

from __future__ import annotations

from .context import NavigationContext
from .paste_worker import PasteOutcome, PasteRequest, PasteWorker

__all__ = [
    "NavigationContext",
    "PasteOutcome",
    "PasteRequest",
    "PasteWorker",
]

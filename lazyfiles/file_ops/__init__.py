"""Clipboard and file-operation engine.

Cut/copy record a pending operation, paste transfers it with progress and
cooperative cancellation, delete removes the selection after confirmation.
Every command reports the directories whose cached listings went stale.
"""

from __future__ import annotations

from .clipboard import ClipboardContents, FileClipboard, FileOp
from .selection import collect_selected_paths
from .transfer import (
    ConflictPolicy,
    ItemFailure,
    ProgressCallback,
    TransferDecision,
    TransferOptions,
    TransferProgress,
    TransferResult,
    copy_items,
    move_items,
    remove_path,
)
from .operations import (
    ConfirmationProvider,
    FileOperations,
    OperationReport,
    format_bytes,
    is_affirmative,
    progress_message,
)

__all__ = [
    "ClipboardContents",
    "FileClipboard",
    "FileOp",
    "collect_selected_paths",
    "ConflictPolicy",
    "ItemFailure",
    "ProgressCallback",
    "TransferDecision",
    "TransferOptions",
    "TransferProgress",
    "TransferResult",
    "copy_items",
    "move_items",
    "remove_path",
    "ConfirmationProvider",
    "FileOperations",
    "OperationReport",
    "format_bytes",
    "is_affirmative",
    "progress_message",
]

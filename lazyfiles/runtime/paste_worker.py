"""Background worker that runs one paste while the input loop keeps polling."""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path
from queue import Empty, Queue

from ..file_ops import FileOperations, OperationReport, TransferDecision, TransferProgress

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PasteRequest:
    """One paste job."""

    request_id: int
    destination: Path


@dataclass(frozen=True)
class PasteOutcome:
    """Completed paste from the background worker.

    ``error`` is set when the paste raised instead of producing a report.
    """

    request: PasteRequest
    report: OperationReport | None
    error: Exception | None = None


class PasteWorker:
    """Single-threaded paste runner with cooperative cancellation.

    Only one paste runs at a time. ``cancel`` is observed by the progress
    callback at the next chunk boundary.
    """

    def __init__(
        self,
        operations: FileOperations,
        on_progress: Callable[[TransferProgress], None] | None = None,
    ) -> None:
        self._operations = operations
        self._on_progress = on_progress
        self._lock = threading.Lock()
        self._cancel = threading.Event()
        self._thread: threading.Thread | None = None
        self._next_request_id = 1
        self._latest_progress: TransferProgress | None = None
        self._results: Queue[PasteOutcome] = Queue()

    @property
    def is_running(self) -> bool:
        with self._lock:
            return self._thread is not None and self._thread.is_alive()

    @property
    def latest_progress(self) -> TransferProgress | None:
        with self._lock:
            return self._latest_progress

    def _progress(self, progress: TransferProgress) -> TransferDecision:
        with self._lock:
            self._latest_progress = progress
        if self._on_progress is not None:
            self._on_progress(progress)
        if self._cancel.is_set():
            return TransferDecision.ABORT
        return TransferDecision.CONTINUE

    def _worker(self, request: PasteRequest) -> None:
        try:
            report = self._operations.paste(request.destination, progress=self._progress)
        except Exception as exc:
            logger.exception("paste into %s failed", request.destination)
            self._results.put(PasteOutcome(request=request, report=None, error=exc))
            return
        self._results.put(PasteOutcome(request=request, report=report))

    def start(self, destination: Path) -> int | None:
        """Start pasting into ``destination``; ``None`` when a paste is already running."""
        with self._lock:
            if self._thread is not None and self._thread.is_alive():
                return None
            request = PasteRequest(request_id=self._next_request_id, destination=Path(destination))
            self._next_request_id += 1
            self._latest_progress = None
            self._cancel.clear()
            worker = threading.Thread(
                target=self._worker,
                args=(request,),
                name="lazyfiles-paste",
                daemon=True,
            )
            self._thread = worker
            worker.start()
        return request.request_id

    def cancel(self) -> None:
        self._cancel.set()

    def join(self, timeout: float | None = None) -> bool:
        """Wait for the running paste; return ``True`` once no paste is running."""
        with self._lock:
            worker = self._thread
        if worker is None:
            return True
        worker.join(timeout)
        return not worker.is_alive()

    def drain_results(self) -> list[PasteOutcome]:
        """Drain all completed paste outcomes."""
        out: list[PasteOutcome] = []
        while True:
            try:
                out.append(self._results.get_nowait())
            except Empty:
                break
        return out


__all__ = [
    "PasteRequest",
    "PasteOutcome",
    "PasteWorker",
]

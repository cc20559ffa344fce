"""Tests for the background paste worker."""

from __future__ import annotations

import tempfile
import threading
import unittest
from pathlib import Path
from unittest import mock

from lazyfiles.file_ops import FileOp, FileOperations, TransferOptions, TransferProgress
from lazyfiles.runtime import PasteWorker


class PasteWorkerTests(unittest.TestCase):
    def test_paste_runs_in_background_and_result_is_drained(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp).resolve()
            (root / "a.txt").write_text("payload", encoding="utf-8")
            (root / "dest").mkdir()
            operations = FileOperations()
            operations.clipboard.set(FileOp.COPY, [root / "a.txt"])
            seen: list[TransferProgress] = []
            worker = PasteWorker(operations, on_progress=seen.append)

            request_id = worker.start(root / "dest")

            self.assertEqual(request_id, 1)
            self.assertTrue(worker.join(timeout=5.0))
            self.assertFalse(worker.is_running)
            outcomes = worker.drain_results()
            self.assertEqual(len(outcomes), 1)
            outcome = outcomes[0]
            self.assertEqual(outcome.request.request_id, 1)
            self.assertIsNone(outcome.error)
            self.assertTrue(outcome.report.succeeded)
            self.assertEqual((root / "dest" / "a.txt").read_text(encoding="utf-8"), "payload")
            self.assertEqual(seen[-1].copied_bytes, len("payload"))
            self.assertIs(worker.latest_progress, seen[-1])
            self.assertEqual(worker.drain_results(), [])

    def test_cancel_aborts_at_next_chunk_and_second_start_is_refused(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp).resolve()
            big = root / "big.bin"
            big.write_bytes(b"\x05" * (256 * 1024))
            (root / "dest").mkdir()
            operations = FileOperations(options=TransferOptions(buffer_size=4096))
            operations.clipboard.set(FileOp.COPY, [big])
            first_chunk = threading.Event()
            release = threading.Event()

            def on_progress(_progress: TransferProgress) -> None:
                first_chunk.set()
                release.wait(timeout=5.0)

            worker = PasteWorker(operations, on_progress=on_progress)
            self.assertEqual(worker.start(root / "dest"), 1)
            self.assertTrue(first_chunk.wait(timeout=5.0))

            self.assertTrue(worker.is_running)
            self.assertIsNone(worker.start(root / "dest"))

            worker.cancel()
            release.set()
            self.assertTrue(worker.join(timeout=5.0))

            outcome = worker.drain_results()[0]
            self.assertTrue(outcome.report.aborted)
            self.assertFalse((root / "dest" / "big.bin").exists())
            self.assertTrue(operations.clipboard.is_empty)

            self.assertEqual(worker.start(root / "dest"), 2)
            self.assertTrue(worker.join(timeout=5.0))
            self.assertTrue(worker.drain_results()[0].report.is_noop)

    def test_unexpected_error_is_reported_as_outcome(self) -> None:
        operations = FileOperations()
        worker = PasteWorker(operations)

        with mock.patch.object(operations, "paste", side_effect=RuntimeError("boom")):
            worker.start(Path("/nowhere"))
            self.assertTrue(worker.join(timeout=5.0))

        outcome = worker.drain_results()[0]
        self.assertIsNone(outcome.report)
        self.assertIsInstance(outcome.error, RuntimeError)

    def test_join_without_start_returns_immediately(self) -> None:
        self.assertTrue(PasteWorker(FileOperations()).join(timeout=0.1))


if __name__ == "__main__":
    unittest.main()

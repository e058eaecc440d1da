"""Progress reporting and cooperative cancellation for chunked uploads.

The uploader consults a ``ProgressGate`` at every phase transition
(starting, continue, finishing) with a read-only ``UploadProgress``
snapshot. Returning False asks the uploader to cancel at that checkpoint;
a gate is never called while a chunk is being read or sent.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from dataclasses import dataclass
from typing import Protocol

from tqdm import tqdm


@dataclass(frozen=True)
class UploadProgress:
    """Snapshot of an upload at a phase transition.

    Attributes:
        upload_id: Session token of the upload.
        phase: Phase about to run: ``starting``, ``continue`` or ``finishing``.
        chunk_size: Configured chunk size in bytes.
        block_index: Index of the chunk about to be sent, starting at 0.
        offset: Last write offset reported by the server (0 before start).
    """

    upload_id: str
    phase: str
    chunk_size: int
    block_index: int
    offset: int


class ProgressGate(Protocol):
    """Decides at each checkpoint whether the upload may proceed."""

    def should_continue(self, progress: UploadProgress) -> bool:
        """Return True to proceed, False to cancel the upload."""
        ...


class AlwaysContinueGate:
    """Gate that never cancels."""

    def should_continue(self, progress: UploadProgress) -> bool:
        """Always proceed."""
        return True


class CallbackProgressGate:
    """Adapt a plain ``callback(progress) -> bool`` function to a gate."""

    def __init__(self, callback: Callable[[UploadProgress], bool]) -> None:
        """Wrap ``callback``."""
        self._callback = callback

    def should_continue(self, progress: UploadProgress) -> bool:
        """Delegate the decision to the callback."""
        return bool(self._callback(progress))


class LoggingProgressGate:
    """Log every checkpoint through a logger and always proceed."""

    def __init__(self, logger: logging.Logger, label: str) -> None:
        """Create a logger-backed gate."""
        self._logger = logger
        self._label = label

    def should_continue(self, progress: UploadProgress) -> bool:
        """Log the snapshot."""
        self._logger.info(
            "%s | %s: block=%d offset=%d",
            self._label,
            progress.phase,
            progress.block_index,
            progress.offset,
        )
        return True


class TqdmProgressGate:
    """Render committed bytes on a tqdm bar.

    The bar advances to the server-reported offset at each checkpoint, so it
    trails the bytes in flight by one chunk. Setting ``stop_event`` cancels
    the upload at the next checkpoint.
    """

    def __init__(
        self,
        total: int | None,
        desc: str,
        stop_event: threading.Event | None = None,
        disable: bool = False,
    ) -> None:
        """Create the progress bar.

        Args:
            total: Total bytes if known, else None.
            desc: Bar description, usually the file name.
            stop_event: Event that requests cancellation when set.
            disable: Hide the bar (for non-interactive output).
        """
        self.stop_event = stop_event or threading.Event()
        self.committed = 0
        self._bar = tqdm(
            total=total,
            desc=desc,
            unit="B",
            unit_scale=True,
            unit_divisor=1024,
            disable=disable,
        )

    def should_continue(self, progress: UploadProgress) -> bool:
        """Advance the bar and report whether cancellation was requested."""
        self._advance_to(progress.offset)
        self._bar.set_postfix_str(progress.phase, refresh=False)
        return not self.stop_event.is_set()

    def complete(self, total_bytes: int) -> None:
        """Move the bar to ``total_bytes`` once the upload has finished."""
        self._advance_to(total_bytes)

    def _advance_to(self, position: int) -> None:
        if position > self.committed:
            self._bar.update(position - self.committed)
            self.committed = position

    def close(self) -> None:
        """Close the progress bar."""
        self._bar.close()


def as_progress_gate(
    progress: ProgressGate | Callable[[UploadProgress], bool] | None,
) -> ProgressGate:
    """Return ``progress`` as a gate, wrapping plain callables."""
    if progress is None:
        return AlwaysContinueGate()
    if hasattr(progress, "should_continue"):
        return progress
    if callable(progress):
        return CallbackProgressGate(progress)
    raise TypeError(f"Unsupported progress gate: {progress!r}")

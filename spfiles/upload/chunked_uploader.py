"""Chunked (resumable session) uploads of large or unsized content.

Content that fits in one chunk is created with a single ``Files/Add`` call.
Anything larger goes through the upload session protocol:

1. create an empty file and ``StartUpload`` with the first chunk;
2. ``ContinueUpload`` with every further full chunk;
3. ``FinishUpload`` with the terminal chunk, which may be empty.

Every call after the first passes the offset the server returned from the
previous call. The progress gate is consulted before each of these steps
and may cancel the upload, in which case an open session is aborted with
``CancelUpload``. Remote failures are raised immediately and never retried
here; the caller may restart the whole upload.
"""

from __future__ import annotations

import io
import logging
import uuid
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum
from typing import Any, BinaryIO

import requests

from spfiles.core.const import DEFAULT_CHUNK_SIZE
from spfiles.core.exceptions import (
    RemoteCallError,
    SharePointError,
    UploadCancelledError,
    UploadStateError,
)
from spfiles.core.sp_types import FileInfo
from spfiles.upload.chunk_reader import Chunk, ChunkReader
from spfiles.upload.progress import ProgressGate, UploadProgress, as_progress_gate
from spfiles.upload.protocols import UploadSessionFile, UploadTarget

logger = logging.getLogger(__name__)

REMOTE_ERRORS = (SharePointError, requests.RequestException)


class UploadPhase(str, Enum):
    """Phases of a chunked upload.

    The values of ``STARTING``, ``TRANSFERRING`` and ``FINISHING`` are the
    phase names reported to progress gates.
    """

    IDLE = "idle"
    STARTING = "starting"
    TRANSFERRING = "continue"
    FINISHING = "finishing"
    COMPLETED = "completed"
    CANCELLED = "cancelled"
    FAILED = "failed"


@dataclass(frozen=True)
class ChunkedUploadOptions:
    """Settings for one chunked upload.

    Attributes:
        overwrite: Replace an existing file with the same name.
        chunk_size: Chunk size in bytes; 0 or None selects the default (10 MiB).
        progress: Gate (or plain ``callback(progress) -> bool``) consulted at
            every phase transition; None always continues.
    """

    overwrite: bool = True
    chunk_size: int | None = DEFAULT_CHUNK_SIZE
    progress: ProgressGate | Callable[[UploadProgress], bool] | None = None

    def __post_init__(self) -> None:
        if self.chunk_size is not None and self.chunk_size < 0:
            raise ValueError(f"chunk_size must not be negative, got {self.chunk_size}")

    @property
    def effective_chunk_size(self) -> int:
        """Chunk size with the default applied."""
        return self.chunk_size or DEFAULT_CHUNK_SIZE


class ChunkedUploader:
    """Drives one upload at a time through the session state machine.

    ``phase``, ``upload_id``, ``block_index`` and ``offset`` describe the
    current (or last) upload and are reset by every call to ``upload``.
    """

    def __init__(
        self, target: UploadTarget, options: ChunkedUploadOptions | None = None
    ):
        """Initialize the uploader.

        Args:
            target: Folder the file is created in.
            options: Upload settings; defaults are used when omitted.
        """
        self._target = target
        self._options = options or ChunkedUploadOptions()
        self._gate = as_progress_gate(self._options.progress)
        self.chunk_size = self._options.effective_chunk_size
        self._reset("")

    def _reset(self, upload_id: str) -> None:
        self.upload_id = upload_id
        self.phase = UploadPhase.IDLE
        self.block_index = 0
        self.offset = 0
        self._file: UploadSessionFile | None = None
        self._session_open = False

    def upload(self, name: str, stream: BinaryIO) -> FileInfo:
        """Upload ``stream`` as a file called ``name``.

        Args:
            name: Name of the file to create in the target folder.
            stream: Binary stream to read the content from. It is read
                sequentially and never seeked.

        Returns:
            Metadata of the uploaded file.

        Raises:
            UploadCancelledError: If the progress gate cancelled the upload.
            RemoteCallError: If a remote call failed.
            UploadStateError: If the uploader lost track of the remote file.
        """
        self._reset(str(uuid.uuid4()))
        reader = ChunkReader(stream, self.chunk_size)

        chunk = reader.read_chunk()
        if chunk.is_last:
            return self._upload_single_shot(name, chunk)

        while True:
            if self.block_index == 0:
                self._start(name, chunk)
            elif chunk.is_last:
                return self._finish(chunk)
            else:
                self._continue(chunk)
            self.block_index += 1
            chunk = reader.read_chunk()

    def _upload_single_shot(self, name: str, chunk: Chunk) -> FileInfo:
        logger.info(
            f"Content of {name} fits in one chunk ({len(chunk)} bytes), "
            "uploading in a single request"
        )
        info = self._call(
            "add", self._target.add, name, chunk.data, self._options.overwrite
        )
        self.phase = UploadPhase.COMPLETED
        return info

    def _start(self, name: str, chunk: Chunk) -> None:
        self._checkpoint(UploadPhase.STARTING)
        logger.info(f"Starting chunked upload {self.upload_id} of {name}")
        created = self._call(
            "add", self._target.add, name, None, self._options.overwrite
        )
        self._file = self._call(
            "get_file", self._target.get_file, created.server_relative_url
        )
        file = self._require_file("start_upload")
        self.offset = self._call(
            "start_upload", file.start_upload, self.upload_id, chunk.data
        )
        self._session_open = True
        logger.debug(f"Upload {self.upload_id} started at offset {self.offset}")

    def _continue(self, chunk: Chunk) -> None:
        self._checkpoint(UploadPhase.TRANSFERRING)
        file = self._require_file("continue_upload")
        self.offset = self._call(
            "continue_upload",
            file.continue_upload,
            self.upload_id,
            self.offset,
            chunk.data,
        )
        logger.debug(
            f"Upload {self.upload_id} block {self.block_index} "
            f"continued to offset {self.offset}"
        )

    def _finish(self, chunk: Chunk) -> FileInfo:
        self._checkpoint(UploadPhase.FINISHING)
        logger.info(
            f"Finishing upload {self.upload_id} at offset {self.offset} "
            f"with {len(chunk)} final bytes"
        )
        file = self._require_file("finish_upload")
        info = self._call(
            "finish_upload", file.finish_upload, self.upload_id, self.offset, chunk.data
        )
        self.phase = UploadPhase.COMPLETED
        return info

    def _checkpoint(self, phase: UploadPhase) -> None:
        """Enter ``phase`` and let the progress gate veto it."""
        self.phase = phase
        progress = UploadProgress(
            upload_id=self.upload_id,
            phase=phase.value,
            chunk_size=self.chunk_size,
            block_index=self.block_index,
            offset=self.offset,
        )
        if not self._gate.should_continue(progress):
            self._cancel()

    def _cancel(self) -> None:
        self.phase = UploadPhase.CANCELLED
        if not self._session_open:
            logger.info(f"Upload {self.upload_id} canceled before it started")
            raise UploadCancelledError(self.upload_id)

        file = self._require_file("cancel_upload")
        try:
            file.cancel_upload(self.upload_id)
        except REMOTE_ERRORS as exc:
            logger.warning(f"Error canceling upload {self.upload_id}: {exc}")
            raise UploadCancelledError(self.upload_id, cancel_error=exc) from exc
        logger.info(f"Upload {self.upload_id} was canceled")
        raise UploadCancelledError(self.upload_id)

    def _require_file(self, operation: str) -> UploadSessionFile:
        if self._file is None:
            self.phase = UploadPhase.FAILED
            raise UploadStateError(
                f"No file object for upload {self.upload_id} at {operation}"
            )
        return self._file

    def _call(self, operation: str, func: Callable[..., Any], *args: Any) -> Any:
        """Run a remote call, tagging failures with the current phase."""
        try:
            return func(*args)
        except REMOTE_ERRORS as exc:
            failed_phase = self.phase.value
            self.phase = UploadPhase.FAILED
            logger.error(
                f"Upload {self.upload_id}: {operation} failed during "
                f"{failed_phase}: {exc}"
            )
            raise RemoteCallError(failed_phase, operation, exc) from exc


def upload_chunked(
    target: UploadTarget,
    name: str,
    content: BinaryIO | bytes,
    options: ChunkedUploadOptions | None = None,
) -> FileInfo:
    """Upload ``content`` to ``target`` as ``name``, chunking when needed.

    Args:
        target: Folder the file is created in.
        name: File name.
        content: Binary stream, or bytes already in memory.
        options: Upload settings.

    Returns:
        Metadata of the uploaded file.
    """
    if isinstance(content, (bytes, bytearray)):
        content = io.BytesIO(content)
    return ChunkedUploader(target, options).upload(name, content)

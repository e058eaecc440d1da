"""Remote collaborators of the chunked uploader."""

from __future__ import annotations

from typing import Protocol

from spfiles.core.sp_types import FileInfo


class UploadSessionFile(Protocol):
    """A remote file that accepts a chunked upload session."""

    def start_upload(self, upload_id: str, chunk: bytes) -> int:
        """Open the session with the first chunk and return the server offset."""
        ...

    def continue_upload(self, upload_id: str, file_offset: int, chunk: bytes) -> int:
        """Append a chunk at ``file_offset`` and return the new server offset."""
        ...

    def finish_upload(
        self, upload_id: str, file_offset: int, chunk: bytes | None
    ) -> FileInfo:
        """Commit the session with the last chunk and return file metadata."""
        ...

    def cancel_upload(self, upload_id: str) -> None:
        """Abort the session."""
        ...


class UploadTarget(Protocol):
    """A destination container that files are created in."""

    def add(self, name: str, content: bytes | None, overwrite: bool) -> FileInfo:
        """Create a file, empty when ``content`` is None."""
        ...

    def get_file(self, server_relative_url: str) -> UploadSessionFile:
        """Return a handle to an existing file."""
        ...

"""Files API: folders, files and the chunked upload session endpoints.

``Folder`` creates files (``Files/Add``) and ``File`` drives the four upload
session methods. Together they implement the ``UploadTarget`` and
``UploadSessionFile`` protocols consumed by ``spfiles.upload``.
"""

from __future__ import annotations

import logging
from typing import Any
from urllib.parse import quote

from pydantic import ValidationError

from spfiles.core.exceptions import ResponseFormatError
from spfiles.core.http_client import SharePointClient
from spfiles.core.sp_types import FileInfo
from spfiles.core.utils.odata import parse_upload_offset

logger = logging.getLogger(__name__)


def escape_odata_string(value: str) -> str:
    """Escape a value for use inside a quoted OData string literal."""
    return quote(value.replace("'", "''"), safe="/'")


def _file_info(payload: Any) -> FileInfo:
    try:
        return FileInfo.from_response(payload)
    except ValidationError as exc:
        raise ResponseFormatError(f"Unexpected file metadata: {payload!r}") from exc


class Web:
    """Entry point to the folders and files of a site web."""

    def __init__(self, client: SharePointClient):
        """Initialize Web.

        Args:
            client: HTTP client bound to the site.
        """
        self.client = client

    def get_folder(self, server_relative_url: str) -> "Folder":
        """Return a handle to the folder at ``server_relative_url``."""
        return Folder(self.client, server_relative_url)

    def get_file(self, server_relative_url: str) -> "File":
        """Return a handle to the file at ``server_relative_url``."""
        return File(self.client, server_relative_url)


class Folder:
    """A document library folder that files can be added to."""

    def __init__(self, client: SharePointClient, server_relative_url: str):
        """Initialize Folder.

        Args:
            client: HTTP client bound to the site.
            server_relative_url: Server-relative URL of the folder.
        """
        self.client = client
        self.server_relative_url = server_relative_url
        self.endpoint = client.api_url(
            "web/GetFolderByServerRelativeUrl"
            f"('{escape_odata_string(server_relative_url)}')"
        )

    def add(self, name: str, content: bytes | None, overwrite: bool) -> FileInfo:
        """Create a file in this folder.

        Args:
            name: File name (leaf name, not a path).
            content: Full file content, or None to create an empty file.
            overwrite: Whether to replace an existing file with the same name.

        Returns:
            Metadata of the created file.
        """
        url = (
            f"{self.endpoint}/Files/Add(overwrite={str(overwrite).lower()},"
            f"url='{escape_odata_string(name)}')"
        )
        logger.info(
            "Adding file %s to %s (%d bytes)",
            name,
            self.server_relative_url,
            len(content) if content else 0,
        )
        return _file_info(self.client.post(url, content))

    def get_file(self, server_relative_url: str) -> "File":
        """Return a handle to the file at ``server_relative_url``."""
        return File(self.client, server_relative_url)


class File:
    """A single file, with the chunked upload session methods.

    All session calls share the ``upload_id`` (a GUID) chosen by the caller.
    ``start_upload`` and ``continue_upload`` return the offset the server
    has written up to, which must be passed to the next call.
    """

    def __init__(self, client: SharePointClient, server_relative_url: str):
        """Initialize File.

        Args:
            client: HTTP client bound to the site.
            server_relative_url: Server-relative URL of the file.
        """
        self.client = client
        self.server_relative_url = server_relative_url
        self.endpoint = client.api_url(
            "web/GetFileByServerRelativeUrl"
            f"('{escape_odata_string(server_relative_url)}')"
        )

    def get_info(self) -> FileInfo:
        """Fetch the file's metadata."""
        return _file_info(self.client.get(self.endpoint))

    def delete(self) -> None:
        """Delete the file."""
        self.client.post(f"{self.endpoint}/DeleteObject()")

    def start_upload(self, upload_id: str, chunk: bytes) -> int:
        """Open an upload session with the first chunk.

        Returns:
            Write offset reported by the server.
        """
        url = f"{self.endpoint}/StartUpload(uploadId=guid'{upload_id}')"
        return parse_upload_offset(self.client.post(url, chunk))

    def continue_upload(self, upload_id: str, file_offset: int, chunk: bytes) -> int:
        """Append a chunk at ``file_offset``.

        Returns:
            New write offset reported by the server.
        """
        url = (
            f"{self.endpoint}/ContinueUpload(uploadId=guid'{upload_id}',"
            f"fileOffset={file_offset})"
        )
        return parse_upload_offset(self.client.post(url, chunk))

    def finish_upload(
        self, upload_id: str, file_offset: int, chunk: bytes | None
    ) -> FileInfo:
        """Commit the session with the last (possibly empty) chunk.

        Returns:
            Metadata of the completed file.
        """
        url = (
            f"{self.endpoint}/FinishUpload(uploadId=guid'{upload_id}',"
            f"fileOffset={file_offset})"
        )
        return _file_info(self.client.post(url, chunk or b""))

    def cancel_upload(self, upload_id: str) -> None:
        """Abort the session and discard the uploaded chunks."""
        url = f"{self.endpoint}/CancelUpload(uploadId=guid'{upload_id}')"
        self.client.post(url)

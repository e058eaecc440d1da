"""Exception classes for the SharePoint files client and chunked uploads."""

from __future__ import annotations


class SharePointError(Exception):
    """Base error for failures talking to the remote document store."""


class SharePointHTTPError(SharePointError):
    """Raised when the server answers with a non-success status code."""

    def __init__(self, status_code: int, detail: str | None, url: str):
        """Initialize SharePointHTTPError.

        Args:
            status_code: HTTP status code returned by the server.
            detail: Error message extracted from the response body, if any.
            url: Request URL that failed.
        """
        message = f"HTTP {status_code} for {url}"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message)
        self.status_code = status_code
        self.detail = detail
        self.url = url


class ResponseFormatError(SharePointError):
    """Raised when a response body does not have the expected shape."""


class UploadError(Exception):
    """Base error for chunked upload failures."""


class UploadCancelledError(UploadError):
    """Raised when the progress gate asks to stop the upload.

    ``cancel_error`` holds the failure of the remote cancel call, if one was
    issued and failed. The upload is reported as cancelled either way.
    """

    def __init__(self, upload_id: str, cancel_error: Exception | None = None):
        """Initialize UploadCancelledError.

        Args:
            upload_id: Session token of the cancelled upload.
            cancel_error: Error raised by the remote cancel call, if any.
        """
        message = "file upload was canceled"
        if cancel_error is not None:
            message = f"{message} (cancel request failed: {cancel_error})"
        super().__init__(message)
        self.upload_id = upload_id
        self.cancel_error = cancel_error


class RemoteCallError(UploadError):
    """Raised when a remote call fails during an upload phase."""

    def __init__(self, phase: str, operation: str, original: Exception):
        """Initialize RemoteCallError.

        Args:
            phase: Upload phase that was active when the call failed.
            operation: Name of the remote operation that failed.
            original: The underlying transport or server error.
        """
        super().__init__(f"{operation} failed during {phase} phase: {original}")
        self.phase = phase
        self.operation = operation
        self.original = original


class UploadStateError(UploadError):
    """Raised when the uploader reaches a state its invariants rule out."""


class ConfigError(Exception):
    """Raised when client configuration is missing or invalid."""


class ProfileNotFound(ConfigError):
    """Raised when a requested profile cannot be found on disk."""


class ProfileAlreadyExist(ConfigError):
    """Raised when attempting to create a profile that already exists."""

"""spfiles: SharePoint document library client with chunked uploads."""

from .api.files import File, Folder, Web
from .core.config import SiteConfig, load_site_config
from .core.exceptions import (
    RemoteCallError,
    SharePointError,
    SharePointHTTPError,
    UploadCancelledError,
    UploadError,
    UploadStateError,
)
from .core.http_client import SharePointClient
from .core.sp_types import FileInfo
from .upload import (
    ChunkedUploader,
    ChunkedUploadOptions,
    UploadPhase,
    UploadProgress,
    upload_chunked,
)

__version__ = "0.1.0"

__all__ = [
    "ChunkedUploadOptions",
    "ChunkedUploader",
    "File",
    "FileInfo",
    "Folder",
    "RemoteCallError",
    "SharePointClient",
    "SharePointError",
    "SharePointHTTPError",
    "SiteConfig",
    "UploadCancelledError",
    "UploadError",
    "UploadPhase",
    "UploadProgress",
    "UploadStateError",
    "Web",
    "load_site_config",
    "upload_chunked",
]

"""SharePoint data types returned by the files API.

The server names fields in PascalCase; the models expose snake_case
attributes and accept either spelling on input.
"""

from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field

from spfiles.core.utils.odata import normalize_odata_item


class FileInfo(BaseModel):
    """Metadata of a file stored in a document library.

    Returned by single-shot uploads and by the finishing step of a chunked
    upload. ``length`` is reported as a string by the server in verbose mode
    and coerced to an integer here.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    name: str = Field(alias="Name")
    server_relative_url: str = Field(alias="ServerRelativeUrl")
    length: int = Field(default=0, alias="Length")
    unique_id: Optional[str] = Field(default=None, alias="UniqueId")
    etag: Optional[str] = Field(default=None, alias="ETag")
    ui_version_label: Optional[str] = Field(default=None, alias="UIVersionLabel")
    time_created: Optional[datetime] = Field(default=None, alias="TimeCreated")
    time_last_modified: Optional[datetime] = Field(
        default=None, alias="TimeLastModified"
    )

    @classmethod
    def from_response(cls, payload: Any) -> "FileInfo":
        """Build a FileInfo from a raw JSON response in any OData mode."""
        return cls.model_validate(normalize_odata_item(payload))

"""Pydantic models for spfiles site configuration."""

from pydantic import BaseModel, field_validator

from spfiles.core.config.helpers import parse_bytes
from spfiles.core.const import (
    DEFAULT_CHUNK_SIZE,
    HTTP_RETRIES,
    HTTP_TIMEOUT_SECONDS,
    ODATA_ACCEPT_HEADERS,
)


class SiteConfig(BaseModel):
    """Connection settings for one SharePoint site.

    Attributes:
        site_url: absolute URL of the site web, without a trailing slash.
        access_token: bearer token sent with every request.
        odata_mode: OData metadata verbosity requested from the server.
        chunk_size: default chunk size for chunked uploads, in bytes.
        timeout: per-request timeout, in seconds.
        retries: number of HTTP-level retries for transient failures.
        request_digest: whether POSTs carry an ``X-RequestDigest`` header.
    """

    site_url: str = ""
    access_token: str | None = None
    odata_mode: str = "verbose"
    chunk_size: int = DEFAULT_CHUNK_SIZE
    timeout: float = HTTP_TIMEOUT_SECONDS
    retries: int = HTTP_RETRIES
    request_digest: bool = True

    @field_validator("site_url")
    @classmethod
    def _strip_trailing_slash(cls, value: str) -> str:
        return value.rstrip("/")

    @field_validator("odata_mode")
    @classmethod
    def _check_odata_mode(cls, value: str) -> str:
        value = value.lower()
        if value not in ODATA_ACCEPT_HEADERS:
            raise ValueError(
                f"odata_mode must be one of {sorted(ODATA_ACCEPT_HEADERS)}, "
                f"got {value!r}"
            )
        return value

    @field_validator("chunk_size", mode="before")
    @classmethod
    def _parse_chunk_size(cls, value: int | str | None) -> int:
        if value is None:
            return DEFAULT_CHUNK_SIZE
        size = parse_bytes(value)
        if size < 0:
            raise ValueError("chunk_size must not be negative")
        return size or DEFAULT_CHUNK_SIZE

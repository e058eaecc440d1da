"""HTTP transport for the SharePoint REST API.

Wraps a ``requests.Session`` with the OData headers for the configured
metadata mode, bearer authentication, request digests for write calls and
transport-level retries for transient status codes. Non-success responses
are raised as ``SharePointHTTPError``.
"""

from __future__ import annotations

import logging
from typing import Any

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from spfiles.core.auth import Auth
from spfiles.core.config.site_config import SiteConfig
from spfiles.core.const import ODATA_ACCEPT_HEADERS, RETRYABLE_STATUS_CODES
from spfiles.core.exceptions import ResponseFormatError, SharePointHTTPError
from spfiles.core.utils.http_errors import extract_error_detail
from spfiles.core.utils.odata import normalize_odata_item

logger = logging.getLogger(__name__)


def build_session(retries: int) -> requests.Session:
    """Create a requests session that retries transient failures.

    Args:
        retries: Maximum number of retries per request.

    Returns:
        A configured ``requests.Session``.
    """
    session = requests.Session()
    retry = Retry(
        total=retries,
        backoff_factor=1.0,
        status_forcelist=RETRYABLE_STATUS_CODES,
        allowed_methods=frozenset(["GET", "POST"]),
        respect_retry_after_header=True,
        raise_on_status=False,
    )
    adapter = HTTPAdapter(max_retries=retry)
    session.mount("https://", adapter)
    session.mount("http://", adapter)
    return session


class SharePointClient:
    """Issues authenticated REST calls against one SharePoint site."""

    def __init__(
        self,
        config: SiteConfig,
        auth: Auth | None = None,
        session: requests.Session | None = None,
    ):
        """Initialize the client.

        Args:
            config: Site configuration.
            auth: Credentials; built from ``config.access_token`` when omitted.
            session: Optional pre-built session, mainly for tests.
        """
        self.config = config
        self.auth = auth or Auth(config.access_token)
        self._session = session or build_session(config.retries)
        self._accept = ODATA_ACCEPT_HEADERS[config.odata_mode]

    @property
    def site_url(self) -> str:
        """Absolute URL of the site web."""
        return self.config.site_url

    def api_url(self, path: str) -> str:
        """Return the absolute REST URL for ``path`` relative to ``/_api/``."""
        return f"{self.site_url}/_api/{path.lstrip('/')}"

    def get(self, url: str) -> Any:
        """Send a GET request and return the decoded JSON body."""
        return self._request("GET", url)

    def post(self, url: str, data: bytes | None = None) -> Any:
        """Send a POST request with an optional binary body.

        Args:
            url: Absolute endpoint URL.
            data: Raw request body; ``None`` sends an empty body.

        Returns:
            The decoded JSON body, or None when the response has no content.
        """
        return self._request("POST", url, data=data)

    def _headers(self, method: str) -> dict[str, str]:
        headers = {"Accept": self._accept, **self.auth.get_headers()}
        if method == "POST" and self.config.request_digest:
            headers["X-RequestDigest"] = self.auth.get_request_digest(
                self._fetch_context_info
            )
        return headers

    def _fetch_context_info(self) -> tuple[str, int]:
        """Fetch a form digest and its lifetime from the context info endpoint."""
        url = self.api_url("contextinfo")
        headers = {"Accept": self._accept, **self.auth.get_headers()}
        response = self._session.post(url, headers=headers, timeout=self.config.timeout)
        payload = self._decode(response)
        info = normalize_odata_item(payload) or {}
        info = info.get("GetContextWebInformation", info)
        try:
            return info["FormDigestValue"], int(info["FormDigestTimeoutSeconds"])
        except (KeyError, TypeError, ValueError) as exc:
            raise ResponseFormatError(
                f"Unexpected context info response: {payload!r}"
            ) from exc

    def _request(self, method: str, url: str, data: bytes | None = None) -> Any:
        headers = self._headers(method)
        if method == "POST":
            headers["Content-Type"] = "application/octet-stream"
        logger.debug(
            "%s %s (%d bytes)", method, url, len(data) if data is not None else 0
        )
        response = self._session.request(
            method,
            url,
            headers=headers,
            data=data if data is not None else b"",
            timeout=self.config.timeout,
        )
        logger.debug("%s %s response: status=%d", method, url, response.status_code)
        if response.status_code == 403 and "X-RequestDigest" in headers:
            self.auth.invalidate_digest()
        return self._decode(response)

    def _decode(self, response: requests.Response) -> Any:
        try:
            response.raise_for_status()
        except requests.HTTPError as exc:
            raise SharePointHTTPError(
                response.status_code, extract_error_detail(response), response.url
            ) from exc
        if not response.content:
            return None
        try:
            return response.json()
        except ValueError as exc:
            raise ResponseFormatError(
                f"Response from {response.url} is not valid JSON"
            ) from exc

    def close(self) -> None:
        """Close the underlying HTTP session."""
        self._session.close()

    def __enter__(self) -> "SharePointClient":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

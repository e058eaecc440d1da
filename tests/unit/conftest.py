import io

import pytest
import requests_mock

from spfiles.core.config.site_config import SiteConfig
from spfiles.core.http_client import SharePointClient

SITE_URL = "https://contoso.sharepoint.com/sites/team"
API_URL = f"{SITE_URL}/_api"
TEST_TOKEN = "test_token"
TEST_DIGEST = "0x1234,01 Jan 2024 00:00:00 -0000"


class ShortReadStream(io.RawIOBase):
    """Binary stream that returns at most ``max_read`` bytes per read call."""

    def __init__(self, data: bytes, max_read: int):
        self._data = data
        self._pos = 0
        self._max_read = max_read
        self.read_calls = 0

    def readable(self) -> bool:
        return True

    def read(self, size: int = -1) -> bytes:
        self.read_calls += 1
        if size is None or size < 0:
            size = len(self._data) - self._pos
        size = min(size, self._max_read)
        chunk = self._data[self._pos : self._pos + size]
        self._pos += len(chunk)
        return chunk


@pytest.fixture
def short_read_stream():
    """Factory for streams that deliver data in small pieces, like a pipe."""
    return ShortReadStream


@pytest.fixture
def site_url():
    return SITE_URL


@pytest.fixture
def api_url():
    return API_URL


@pytest.fixture
def temp_config_dir(tmp_path):
    """Fixture to create a temporary config directory."""
    config_dir = tmp_path / ".spfiles"
    config_dir.mkdir()
    return config_dir


@pytest.fixture
def site_config():
    return SiteConfig(site_url=SITE_URL, access_token=TEST_TOKEN)


@pytest.fixture
def mock_sp():
    """Mock the SharePoint site with a working context info endpoint."""
    with requests_mock.Mocker() as m:
        m.post(
            f"{API_URL}/contextinfo",
            json={
                "d": {
                    "GetContextWebInformation": {
                        "FormDigestValue": TEST_DIGEST,
                        "FormDigestTimeoutSeconds": 1800,
                    }
                }
            },
            status_code=200,
        )
        yield m


@pytest.fixture
def sp_client(site_config, mock_sp):
    with SharePointClient(site_config) as client:
        yield client

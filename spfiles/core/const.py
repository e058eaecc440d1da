import os
from pathlib import Path

BYTES_PER_MIB = 1024 * 1024
DEFAULT_CHUNK_SIZE = 10 * BYTES_PER_MIB

SITE_URL = os.getenv("SPFILES_SITE_URL", "")
ACCESS_TOKEN = os.getenv("SPFILES_ACCESS_TOKEN")
ODATA_MODE = os.getenv("SPFILES_ODATA_MODE", "verbose").lower()
HTTP_TIMEOUT_SECONDS = float(os.getenv("SPFILES_HTTP_TIMEOUT", "60"))
HTTP_RETRIES = int(os.getenv("SPFILES_HTTP_RETRIES", "3"))
CONFIG_DIR = Path(os.getenv("SPFILES_CONFIG_DIR", str(Path.home() / ".spfiles")))

ODATA_ACCEPT_HEADERS = {
    "verbose": "application/json;odata=verbose",
    "minimalmetadata": "application/json;odata=minimalmetadata",
    "nometadata": "application/json;odata=nometadata",
}
RETRYABLE_STATUS_CODES = (429, 500, 502, 503, 504)

"""HTTP error helpers for extracting SharePoint error details."""

from __future__ import annotations

from typing import Any

import requests


def extract_error_detail(response: requests.Response) -> str | None:
    """Extract the error message from a SharePoint error response.

    Handles the verbose ``{"error": ...}`` and the light-weight
    ``{"odata.error": ...}`` envelopes, whose ``message`` is either a string
    or a ``{"lang": ..., "value": ...}`` object. Falls back to the raw text.
    """
    try:
        payload: Any = response.json()
    except ValueError:
        return response.text or None

    if not isinstance(payload, dict):
        return str(payload)

    error_payload = payload.get("error", payload.get("odata.error"))
    if not isinstance(error_payload, dict):
        return str(error_payload) if error_payload is not None else str(payload)

    message = error_payload.get("message")
    if isinstance(message, dict):
        message = message.get("value")
    code = error_payload.get("code")
    if message and code:
        return f"{code}: {message}"
    return message or code

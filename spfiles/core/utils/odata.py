"""Normalisation of OData response bodies across metadata verbosity modes.

SharePoint answers the same request with differently shaped JSON depending
on the ``odata=`` parameter of the ``Accept`` header. ``verbose`` wraps the
payload in a ``{"d": ...}`` envelope and names scalar results after the
method (``{"d": {"StartUpload": "1024"}}``); ``minimalmetadata`` and
``nometadata`` return ``{"value": 1024}`` or a bare scalar.
"""

from __future__ import annotations

from typing import Any

from spfiles.core.exceptions import ResponseFormatError

OFFSET_FIELDS = ("StartUpload", "ContinueUpload", "value")


def normalize_odata_item(payload: Any) -> Any:
    """Strip the verbose ``d`` envelope (and ``d.results``) from a payload."""
    if isinstance(payload, dict) and "d" in payload:
        payload = payload["d"]
        if isinstance(payload, dict) and "results" in payload:
            payload = payload["results"]
    return payload


def _as_offset(value: Any) -> int | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str) and value.strip().isdecimal():
        return int(value)
    return None


def parse_upload_offset(payload: Any) -> int:
    """Return the write offset from a StartUpload/ContinueUpload response.

    Accepts a bare integer (or numeric string) and objects keyed by
    ``StartUpload``, ``ContinueUpload`` or ``value``, with or without the
    verbose envelope.

    Raises:
        ResponseFormatError: If no offset can be found in the payload.
    """
    payload = normalize_odata_item(payload)

    offset = _as_offset(payload)
    if offset is not None:
        return offset

    if isinstance(payload, dict):
        for field_name in OFFSET_FIELDS:
            if field_name in payload:
                offset = _as_offset(payload[field_name])
                if offset is not None:
                    return offset

    raise ResponseFormatError(f"Unexpected upload offset response: {payload!r}")

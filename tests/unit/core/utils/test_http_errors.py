import requests

from spfiles.core.utils.http_errors import extract_error_detail


def _response(status_code: int, body: bytes) -> requests.Response:
    response = requests.Response()
    response.status_code = status_code
    response._content = body
    return response


def test_verbose_error_envelope():
    response = _response(
        404,
        b'{"error": {"code": "-2130575338, System.IO.FileNotFoundException",'
        b' "message": {"lang": "en-US", "value": "File Not Found."}}}',
    )

    assert extract_error_detail(response) == (
        "-2130575338, System.IO.FileNotFoundException: File Not Found."
    )


def test_light_weight_error_envelope():
    response = _response(
        400,
        b'{"odata.error": {"code": "-1", "message": {"value": "Bad offset"}}}',
    )

    assert extract_error_detail(response) == "-1: Bad offset"


def test_plain_string_message():
    response = _response(401, b'{"error": {"message": "Unauthorized"}}')

    assert extract_error_detail(response) == "Unauthorized"


def test_non_json_body_returns_text():
    response = _response(502, b"Bad Gateway")

    assert extract_error_detail(response) == "Bad Gateway"


def test_empty_body_returns_none():
    assert extract_error_detail(_response(500, b"")) is None

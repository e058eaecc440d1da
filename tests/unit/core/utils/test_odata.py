import pytest

from spfiles.core.exceptions import ResponseFormatError
from spfiles.core.utils.odata import normalize_odata_item, parse_upload_offset


@pytest.mark.parametrize(
    "payload, expected",
    [
        (1048576, 1048576),
        ("1048576", 1048576),
        ({"d": {"StartUpload": "10485760"}}, 10485760),
        ({"d": {"ContinueUpload": "20971520"}}, 20971520),
        ({"StartUpload": 512}, 512),
        ({"value": "1024"}, 1024),
        ({"value": 2048}, 2048),
        ({"@odata.context": "https://x/$metadata#Edm.Int64", "value": 4096}, 4096),
        ({"d": 7}, 7),
    ],
)
def test_parse_upload_offset_shapes(payload, expected):
    assert parse_upload_offset(payload) == expected


@pytest.mark.parametrize(
    "payload",
    [
        None,
        {},
        {"d": {}},
        {"value": "abc"},
        {"value": None},
        {"value": "\u00b2"},
        "\u2460",
        True,
        "1.5",
        [1],
    ],
)
def test_parse_upload_offset_rejects_other_shapes(payload):
    with pytest.raises(ResponseFormatError):
        parse_upload_offset(payload)


def test_normalize_odata_item_strips_envelopes():
    assert normalize_odata_item({"d": {"Name": "a"}}) == {"Name": "a"}
    assert normalize_odata_item({"d": {"results": [1, 2]}}) == [1, 2]
    assert normalize_odata_item({"Name": "a"}) == {"Name": "a"}
    assert normalize_odata_item(5) == 5

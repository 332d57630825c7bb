import json

import pytest

from aws_ip_ranges.ranges import DecodeError, PrefixEntry, RangeDocument, parse_ranges

FEED = {
    "syncToken": "1717588800",
    "createDate": "2024-06-05-12-00-00",
    "prefixes": [
        {"ip_prefix": "3.5.140.0/22", "region": "ap-northeast-2", "service": "AMAZON", "network_border_group": "ap-northeast-2"},
        {"ip_prefix": "10.0.0.0/8", "region": "us-east-1", "service": "EC2", "network_border_group": "us-east-1"},
        {"ip_prefix": "52.94.76.0/22", "region": "us-west-2", "service": "AMAZON", "network_border_group": "us-west-2"},
    ],
    "ipv6_prefixes": [
        {"ipv6_prefix": "2600:1f00::/24", "region": "us-east-1", "service": "EC2"},
    ],
}


def test_parse_preserves_document_order_and_metadata():
    document = parse_ranges(json.dumps(FEED).encode("utf-8"))

    assert isinstance(document, RangeDocument)
    assert document.sync_token == "1717588800"
    assert document.create_date == "2024-06-05-12-00-00"
    assert len(document) == 3
    assert document.prefixes[1] == PrefixEntry(ip_prefix="10.0.0.0/8", region="us-east-1", service="EC2")
    assert [entry.ip_prefix for entry in document] == ["3.5.140.0/22", "10.0.0.0/8", "52.94.76.0/22"]
    assert document.services() == ["AMAZON", "EC2"]


def test_parse_accepts_text():
    assert len(parse_ranges(json.dumps(FEED))) == 3


def test_missing_fields_decode_to_empty_values():
    document = parse_ranges(b'{"prefixes": [{"ip_prefix": "10.0.0.0/8"}]}')
    assert document.sync_token == ""
    assert document.create_date == ""
    assert document.prefixes == (PrefixEntry(ip_prefix="10.0.0.0/8", region="", service=""),)


def test_missing_prefixes_yields_empty_document():
    document = parse_ranges(b'{"syncToken": "1", "createDate": "x"}')
    assert document.prefixes == ()


@pytest.mark.parametrize(
    "payload",
    [
        b"",
        b"not json",
        b'{"prefixes": [',
        b"\xff\xfe\x00",
        b"[]",
        b'"just a string"',
        b'{"prefixes": {}}',
        b'{"prefixes": ["10.0.0.0/8"]}',
        b'{"prefixes": [{"ip_prefix": 10, "region": "us-east-1", "service": "EC2"}]}',
        b'{"syncToken": 17, "prefixes": []}',
    ],
)
def test_malformed_payloads_raise_decode_error(payload):
    with pytest.raises(DecodeError):
        parse_ranges(payload)


def test_decode_error_is_value_error():
    assert issubclass(DecodeError, ValueError)

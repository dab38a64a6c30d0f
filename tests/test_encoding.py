"""Unit tests for Accept-Encoding negotiation and gzip encoding."""

import gzip

import pytest

from encoding import Encoding, encode_body, negotiate_encoding


@pytest.mark.parametrize(
    ("header", "expected"),
    [
        ("gzip", Encoding.GZIP),
        ("identity, gzip", Encoding.GZIP),
        ("  GZip  ", Encoding.GZIP),
        ("br, deflate, gzip", Encoding.GZIP),
        ("identity", None),
        ("invalid-encoding-1, invalid-encoding-2", None),
        ("", None),
    ],
)
def test_negotiate_encoding(header: str, expected: Encoding | None) -> None:
    assert negotiate_encoding(header) is expected


def test_gzip_encoding_is_decompressible() -> None:
    body = b"abc" * 100

    encoded = encode_body(body, Encoding.GZIP)

    assert encoded != body
    assert gzip.decompress(encoded) == body


def test_gzip_encodes_empty_body() -> None:
    assert gzip.decompress(encode_body(b"", Encoding.GZIP)) == b""

"""Unit tests for HTTP request parsing."""

import pytest

from encoding import Encoding
from request import (
    HTTPRequest,
    HTTPRequestParseError,
    InvalidFramingError,
    MalformedStartLineError,
    Method,
    UnsupportedMethodError,
)


def test_parse_get_with_recognized_headers() -> None:
    raw = (
        b"GET /user-agent HTTP/1.1\r\n"
        b"Host: localhost:4221\r\n"
        b"User-Agent: foo/1.0\r\n"
        b"Accept: */*\r\n"
        b"X-Ignored: yes\r\n"
        b"\r\n"
    )

    request = HTTPRequest.from_bytes(raw)

    assert request.method is Method.GET
    assert request.path == "/user-agent"
    assert request.http_version == "HTTP/1.1"
    assert request.host == "localhost:4221"
    assert request.user_agent == "foo/1.0"
    assert request.accept == "*/*"
    assert request.accept_encoding is None
    assert request.body == b""


def test_missing_headers_default_to_empty() -> None:
    request = HTTPRequest.from_bytes(b"GET / HTTP/1.1\r\n\r\n")

    assert request.host == ""
    assert request.user_agent == ""
    assert request.accept == ""


def test_method_is_matched_case_insensitively() -> None:
    request = HTTPRequest.from_bytes(b"post /files/a HTTP/1.1\r\nContent-Length: 0\r\n\r\n")

    assert request.method is Method.POST


def test_header_names_are_case_insensitive() -> None:
    raw = b"GET / HTTP/1.1\r\nUSER-AGENT: curl/8\r\naccept-ENCODING: gzip\r\n\r\n"

    request = HTTPRequest.from_bytes(raw)

    assert request.user_agent == "curl/8"
    assert request.accept_encoding is Encoding.GZIP


def test_accept_encoding_picks_first_supported_entry() -> None:
    raw = b"GET / HTTP/1.1\r\nAccept-Encoding: identity, GZIP , br\r\n\r\n"

    request = HTTPRequest.from_bytes(raw)

    assert request.accept_encoding is Encoding.GZIP


def test_accept_encoding_without_supported_entry_is_none() -> None:
    raw = b"GET / HTTP/1.1\r\nAccept-Encoding: deflate, br\r\n\r\n"

    request = HTTPRequest.from_bytes(raw)

    assert request.accept_encoding is None


def test_body_uses_content_length_exactly() -> None:
    payload = b"\x00\xff\r\nbinary\n"
    raw = (
        b"POST /files/blob HTTP/1.1\r\n"
        + f"Content-Length: {len(payload)}\r\n".encode("ascii")
        + b"\r\n"
        + payload
        + b"trailing-garbage"
    )

    request = HTTPRequest.from_bytes(raw)

    assert request.body == payload


def test_body_without_content_length_is_rebuilt_from_lines() -> None:
    raw = b"POST /files/note HTTP/1.1\r\nHost: localhost\r\n\r\nline one\r\nline two\n"

    request = HTTPRequest.from_bytes(raw)

    assert request.body == b"line one\nline two"


@pytest.mark.parametrize(
    "start_line",
    [b"GET /\r\n", b"GET\r\n", b"\r\n", b"GET / HTTP/1.1 extra\r\n", b"GET nope HTTP/1.1\r\n"],
)
def test_malformed_start_line_raises(start_line: bytes) -> None:
    with pytest.raises(MalformedStartLineError) as excinfo:
        HTTPRequest.from_bytes(start_line + b"Host: localhost\r\n\r\n")

    assert excinfo.value.status_code == 400


def test_unknown_method_raises_unsupported_method() -> None:
    with pytest.raises(UnsupportedMethodError, match="Invalid HTTP method") as excinfo:
        HTTPRequest.from_bytes(b"PATCH / HTTP/1.1\r\n\r\n")

    assert excinfo.value.status_code == 405


def test_missing_separator_raises_parse_error() -> None:
    with pytest.raises(InvalidFramingError):
        HTTPRequest.from_bytes(b"GET / HTTP/1.1\r\nHost: localhost\r\n")


def test_invalid_content_length_raises_value_error() -> None:
    raw = b"POST /files/a HTTP/1.1\r\nContent-Length: abc\r\n\r\nname=test"

    with pytest.raises(ValueError, match="Invalid Content-Length"):
        HTTPRequest.from_bytes(raw)


def test_short_body_raises_parse_error() -> None:
    raw = b"POST /files/a HTTP/1.1\r\nContent-Length: 10\r\n\r\nabc"

    with pytest.raises(HTTPRequestParseError, match="shorter"):
        HTTPRequest.from_bytes(raw)


def test_bare_line_feed_line_endings_are_accepted() -> None:
    raw = b"GET /echo/hi HTTP/1.1\nHost: x\nUser-Agent: lf/1.0\n\n"

    request = HTTPRequest.from_bytes(raw)

    assert request.path == "/echo/hi"
    assert request.host == "x"
    assert request.user_agent == "lf/1.0"
    assert request.body == b""


def test_repeated_equal_content_length_is_accepted() -> None:
    raw = b"POST /files/a HTTP/1.1\r\nContent-Length: 3\r\nContent-Length: 3\r\n\r\nabc"

    assert HTTPRequest.from_bytes(raw).body == b"abc"


def test_conflicting_content_length_raises_parse_error() -> None:
    raw = b"POST /files/a HTTP/1.1\r\nContent-Length: 10\r\nContent-Length: 3\r\n\r\n0123456789"

    with pytest.raises(InvalidFramingError, match="Conflicting") as excinfo:
        HTTPRequest.from_bytes(raw)

    assert excinfo.value.status_code == 400

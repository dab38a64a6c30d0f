"""HTTP request model and parser."""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum

from encoding import Encoding, negotiate_encoding

# Lines may end in CRLF or a bare LF; the head ends at the first empty line.
HEAD_TERMINATOR = re.compile(rb"\r?\n\r?\n")
LINE_BREAK = re.compile(r"\r?\n")
HEAD_CHARSET = "iso-8859-1"


class Method(Enum):
    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    DELETE = "DELETE"

    @classmethod
    def parse(cls, token: str) -> Method:
        try:
            return cls(token.upper())
        except ValueError as exc:
            raise UnsupportedMethodError(f"Invalid HTTP method: {token}") from exc


class HTTPRequestParseError(ValueError):
    """Request parse error carrying an HTTP status code."""

    def __init__(self, message: str, *, status_code: int = 400) -> None:
        super().__init__(message)
        self.status_code = status_code


class InvalidFramingError(HTTPRequestParseError):
    """Raised when the request framing or Content-Length is invalid."""


class MalformedStartLineError(HTTPRequestParseError):
    """Raised when the request line is not `METHOD PATH VERSION`."""


class UnsupportedMethodError(HTTPRequestParseError):
    def __init__(self, message: str) -> None:
        super().__init__(message, status_code=405)


@dataclass(slots=True)
class HTTPRequest:
    method: Method
    path: str
    http_version: str
    host: str = ""
    user_agent: str = ""
    accept: str = ""
    accept_encoding: Encoding | None = None
    body: bytes = b""

    @classmethod
    def from_bytes(cls, raw: bytes) -> HTTPRequest:
        """Parse raw HTTP request bytes into a structured request object."""
        bounds = find_head_end(raw)
        if bounds is None:
            raise InvalidFramingError("Missing blank line after request headers")
        head_end, body_start = bounds
        remainder = raw[body_start:]

        lines = split_head_lines(raw[:head_end])
        method, path, http_version = _parse_start_line(lines[0])

        request = cls(method=method, path=path, http_version=http_version)
        content_length = declared_content_length(lines)
        for line in lines[1:]:
            name, _sep, value = line.partition(": ")
            header_name = name.lower()
            if header_name == "host":
                request.host = value
            elif header_name == "user-agent":
                request.user_agent = value
            elif header_name == "accept":
                request.accept = value
            elif header_name == "accept-encoding":
                request.accept_encoding = negotiate_encoding(value)

        if content_length is None:
            request.body = _text_body(remainder)
        else:
            if len(remainder) < content_length:
                raise InvalidFramingError("Body shorter than Content-Length")
            request.body = remainder[:content_length]
        return request


def find_head_end(buffer: bytes | bytearray) -> tuple[int, int] | None:
    """Return (end of head, start of body) once the blank line has arrived."""
    match = HEAD_TERMINATOR.search(buffer)
    if match is None:
        return None
    return match.start(), match.end()


def split_head_lines(header_bytes: bytes | bytearray) -> list[str]:
    return LINE_BREAK.split(bytes(header_bytes).decode(HEAD_CHARSET))


def declared_content_length(lines: list[str]) -> int | None:
    """Content-Length from the header lines; repeated headers must agree."""
    content_length: int | None = None
    for line in lines[1:]:
        name, _sep, value = line.partition(": ")
        if name.lower() != "content-length":
            continue
        length = parse_content_length(value)
        if content_length is not None and length != content_length:
            raise InvalidFramingError("Conflicting Content-Length headers")
        content_length = length
    return content_length


def parse_content_length(value: str) -> int:
    try:
        length = int(value.strip())
    except ValueError as exc:
        raise InvalidFramingError("Invalid Content-Length") from exc
    if length < 0:
        raise InvalidFramingError("Negative Content-Length is invalid")
    return length


def _parse_start_line(line: str) -> tuple[Method, str, str]:
    parts = line.split()
    if len(parts) != 3:
        raise MalformedStartLineError("Invalid request line")

    method_token, path, http_version = parts
    if not path.startswith("/"):
        raise MalformedStartLineError("Request target must start with '/'")
    return Method.parse(method_token), path, http_version


def _text_body(remainder: bytes) -> bytes:
    # Without Content-Length the body is treated as text lines: line breaks
    # fold to LF and a single trailing line feed is dropped.
    return b"\n".join(remainder.splitlines())

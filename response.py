"""HTTP response model and serializer."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from encoding import Encoding, encode_body

REASON_PHRASES: dict[int, str] = {
    200: "OK",
    201: "Created",
    400: "Bad Request",
    404: "Not Found",
    405: "Method Not Allowed",
    408: "Request Timeout",
    413: "Payload Too Large",
    431: "Request Header Fields Too Large",
    500: "Internal Server Error",
    503: "Service Unavailable",
}

NOT_FOUND_BODY = b"Not Found"
METHOD_NOT_ALLOWED_BODY = b"Method not allowed"


class ContentType(Enum):
    TEXT = "text/plain"
    HTML = "text/html"
    JSON = "application/json"
    OCTET_STREAM = "application/octet-stream"

    @property
    def mime(self) -> str:
        return self.value


@dataclass(slots=True)
class HTTPResponse:
    status_code: int
    status_message: str | None = None
    content_type: ContentType = ContentType.TEXT
    accept_encoding: Encoding | None = None
    body: bytes | str = b""
    encoded: bool = field(default=False, init=False)

    def __post_init__(self) -> None:
        if isinstance(self.body, str):
            self.body = self.body.encode("utf-8")
        if self.status_message is None:
            self.status_message = REASON_PHRASES.get(self.status_code, "Unknown")
        if "\r" in self.status_message or "\n" in self.status_message:
            raise ValueError("status message cannot contain CR or LF")

    def apply_encoding(self) -> None:
        """Replace the body with its encoded form; runs at most once."""
        if self.encoded or self.accept_encoding is None:
            return
        self.body = encode_body(self.body, self.accept_encoding)
        self.encoded = True

    def to_bytes(self) -> bytes:
        """Serialize the response into HTTP/1.1 wire format bytes."""
        self.apply_encoding()
        header_lines = [
            f"HTTP/1.1 {self.status_code} {self.status_message}",
            f"Content-Type: {self.content_type.mime}",
            f"Content-length: {len(self.body)}",
        ]
        if self.encoded and self.accept_encoding is not None:
            header_lines.append(f"Content-Encoding: {self.accept_encoding.value}")
        head = "\r\n".join(header_lines).encode("iso-8859-1") + b"\r\n\r\n"
        return head + self.body


def not_found() -> HTTPResponse:
    return HTTPResponse(status_code=404, body=NOT_FOUND_BODY)


def method_not_allowed() -> HTTPResponse:
    return HTTPResponse(status_code=405, body=METHOD_NOT_ALLOWED_BODY)


def error_response(status_code: int) -> HTTPResponse:
    """Plain-text response whose body repeats the reason phrase."""
    reason = REASON_PHRASES.get(status_code, "Error")
    return HTTPResponse(status_code=status_code, status_message=reason, body=reason)



"""Low-level socket read/write utilities."""

from __future__ import annotations

import socket

from config import MAX_BODY_BYTES, MAX_HEADER_BYTES, READ_CHUNK_SIZE
from request import (
    HTTPRequestParseError,
    declared_content_length,
    find_head_end,
    split_head_lines,
)
from response import HTTPResponse


class HTTPReadError(Exception):
    """Raised when a client request cannot be safely read from the socket."""

    status_code = 400


class MalformedRequestError(HTTPReadError):
    """Raised when socket bytes do not form a complete HTTP request."""


class HeaderTooLargeError(HTTPReadError):
    """Raised when HTTP headers exceed configured maximum size."""

    status_code = 431


class PayloadTooLargeError(HTTPReadError):
    """Raised when request body exceeds configured maximum size."""

    status_code = 413


class SocketTimeoutError(HTTPReadError):
    """Raised when a client times out while sending request bytes."""

    status_code = 408


def _declared_content_length(header_bytes: bytes) -> int | None:
    try:
        return declared_content_length(split_head_lines(header_bytes))
    except HTTPRequestParseError as exc:
        raise MalformedRequestError(str(exc)) from exc


def read_http_request(
    client_socket: socket.socket,
    *,
    max_header_bytes: int = MAX_HEADER_BYTES,
    max_body_bytes: int = MAX_BODY_BYTES,
) -> bytes:
    """Read one request: the head up to the first empty line, then Content-Length body bytes.

    Returns ``b""`` when the client closes without sending anything.
    """
    buffer = bytearray()
    while True:
        bounds = find_head_end(buffer)
        if bounds is not None:
            break
        if len(buffer) > max_header_bytes:
            raise HeaderTooLargeError("Headers exceeded MAX_HEADER_BYTES")
        chunk = _recv(client_socket)
        if not chunk:
            if not buffer:
                return b""
            raise MalformedRequestError("Connection closed before headers completed")
        buffer.extend(chunk)

    header_end, body_start = bounds
    if body_start > max_header_bytes:
        raise HeaderTooLargeError("Headers exceeded MAX_HEADER_BYTES")

    content_length = _declared_content_length(bytes(buffer[:header_end]))
    if content_length is None:
        # No framing for the body: keep whatever arrived with the head.
        return bytes(buffer)
    if content_length > max_body_bytes:
        raise PayloadTooLargeError("Body exceeded MAX_BODY_BYTES")

    request_length = body_start + content_length
    while len(buffer) < request_length:
        chunk = _recv(client_socket)
        if not chunk:
            raise MalformedRequestError("Connection closed before body completed")
        buffer.extend(chunk)

    return bytes(buffer[:request_length])


def _recv(client_socket: socket.socket) -> bytes:
    try:
        return client_socket.recv(READ_CHUNK_SIZE)
    except socket.timeout as exc:
        raise SocketTimeoutError("Timed out waiting for request bytes") from exc


def write_http_response(client_socket: socket.socket, response: HTTPResponse) -> int:
    """Serialize and write the complete response; returns bytes written."""
    payload = response.to_bytes()
    client_socket.sendall(payload)
    return len(payload)

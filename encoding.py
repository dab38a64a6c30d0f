"""Content-Encoding negotiation and body compression."""

from __future__ import annotations

import gzip
from enum import Enum

GZIP_COMPRESS_LEVEL = 6


class Encoding(Enum):
    GZIP = "gzip"

    @classmethod
    def from_token(cls, token: str) -> Encoding | None:
        normalized = token.strip().lower()
        for encoding in cls:
            if encoding.value == normalized:
                return encoding
        return None


def negotiate_encoding(accept_encoding: str) -> Encoding | None:
    """Return the first supported entry of a comma-separated Accept-Encoding value."""
    for token in accept_encoding.split(","):
        encoding = Encoding.from_token(token)
        if encoding is not None:
            return encoding
    return None


def encode_body(body: bytes, encoding: Encoding) -> bytes:
    if encoding is Encoding.GZIP:
        return gzip.compress(body, compresslevel=GZIP_COMPRESS_LEVEL)
    raise ValueError(f"Unsupported encoding: {encoding!r}")

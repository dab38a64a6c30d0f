"""Configuration constants for the HTTP server."""

HOST: str = "127.0.0.1"
PORT: int = 4221
READ_CHUNK_SIZE: int = 4096
MAX_HEADER_BYTES: int = 16_384
MAX_BODY_BYTES: int = 10_485_760
SOCKET_TIMEOUT_SECS: float | None = None
ACCEPT_POLL_SECS: float = 0.2
MAX_ACTIVE_CONNECTIONS: int | None = 256
LISTEN_BACKLOG: int = 128
LOG_FORMAT: str = "plain"
FILES_DIRECTORY: str | None = None

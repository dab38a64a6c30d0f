"""Main HTTP server entry point and connection lifecycle orchestration."""

from __future__ import annotations

import argparse
import json
import logging
import os
import socket
import threading
import time

from config import (
    ACCEPT_POLL_SECS,
    FILES_DIRECTORY,
    HOST,
    LISTEN_BACKLOG,
    LOG_FORMAT,
    MAX_ACTIVE_CONNECTIONS,
    MAX_BODY_BYTES,
    MAX_HEADER_BYTES,
    PORT,
    SOCKET_TIMEOUT_SECS,
)
from file_store import FileStore
from handlers.routes import build_router
from request import HTTPRequest, HTTPRequestParseError, Method
from response import HTTPResponse, error_response, method_not_allowed, not_found
from router import Router
from socket_handler import HTTPReadError, read_http_request, write_http_response

logger = logging.getLogger(__name__)


class HTTPServer:
    def __init__(
        self,
        host: str = HOST,
        port: int = PORT,
        router: Router | None = None,
        *,
        files_directory: str | None = FILES_DIRECTORY,
        max_active_connections: int | None = MAX_ACTIVE_CONNECTIONS,
        max_header_bytes: int = MAX_HEADER_BYTES,
        max_body_bytes: int = MAX_BODY_BYTES,
        socket_timeout_secs: float | None = SOCKET_TIMEOUT_SECS,
        log_format: str = LOG_FORMAT,
    ) -> None:
        self.host = host
        self.port = port
        self.store = FileStore(files_directory or os.getcwd())
        self.router = router or build_router(self.store)
        self.max_active_connections = max_active_connections
        self.max_header_bytes = max_header_bytes
        self.max_body_bytes = max_body_bytes
        self.socket_timeout_secs = socket_timeout_secs
        self.log_format = log_format

        self._server_socket: socket.socket | None = None
        self._connection_slots: threading.BoundedSemaphore | None = None
        if max_active_connections:
            self._connection_slots = threading.BoundedSemaphore(max_active_connections)
        self._running = False

    def start(self) -> None:
        """Bind, listen and hand every accepted connection to its own thread."""
        with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as server_socket:
            self._server_socket = server_socket
            server_socket.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
            server_socket.bind((self.host, self.port))
            server_socket.listen(LISTEN_BACKLOG)
            server_socket.settimeout(ACCEPT_POLL_SECS)
            self.port = server_socket.getsockname()[1]
            logger.info(
                "Listening on %s:%s, serving files from %s",
                self.host,
                self.port,
                self.store.base_dir,
            )

            self._running = True
            while self._running:
                try:
                    client_socket, address = server_socket.accept()
                except socket.timeout:
                    continue
                except OSError:
                    break

                if self._connection_slots is not None and not self._connection_slots.acquire(
                    blocking=False
                ):
                    self._send_busy_response(client_socket, address)
                    continue

                worker = threading.Thread(
                    target=self._run_connection,
                    args=(client_socket, address),
                    name=f"http-conn-{address[0]}:{address[1]}",
                    daemon=True,
                )
                worker.start()

    def stop(self) -> None:
        self._running = False
        if self._server_socket is not None:
            self._server_socket.close()
            self._server_socket = None

    def _run_connection(self, client_socket: socket.socket, address: tuple[str, int]) -> None:
        try:
            self._handle_client(client_socket, address)
        except Exception:
            logger.exception("Unhandled error on connection from %s:%s", *address)
        finally:
            if self._connection_slots is not None:
                self._connection_slots.release()

    def _send_busy_response(self, client_socket: socket.socket, address: tuple[str, int]) -> None:
        with client_socket:
            started_at = time.perf_counter()
            response = error_response(503)
            try:
                bytes_sent = write_http_response(client_socket, response)
            except OSError:
                return
            self._log_access(address, "-", "-", response, 0, bytes_sent, started_at)

    def _handle_client(self, client_socket: socket.socket, address: tuple[str, int]) -> None:
        """Read one request, answer it and close the connection."""
        with client_socket:
            logger.debug("accepted connection from %s:%s", *address)
            client_socket.settimeout(self.socket_timeout_secs)
            started_at = time.perf_counter()
            method = "-"
            path = "-"
            raw_request = b""

            try:
                raw_request = read_http_request(
                    client_socket,
                    max_header_bytes=self.max_header_bytes,
                    max_body_bytes=self.max_body_bytes,
                )
            except HTTPReadError as exc:
                logger.info("Rejected request from %s: %s", address[0], exc)
                response = error_response(exc.status_code)
            except OSError as exc:
                logger.debug("Read failed for %s: %s", address[0], exc)
                return
            else:
                if not raw_request:
                    return
                try:
                    request = HTTPRequest.from_bytes(raw_request)
                except HTTPRequestParseError as exc:
                    logger.info("Unparseable request from %s: %s", address[0], exc)
                    response = error_response(exc.status_code)
                else:
                    method = request.method.value
                    path = request.path
                    response = self._dispatch(request)

            try:
                bytes_sent = write_http_response(client_socket, response)
            except OSError as exc:
                logger.debug("Write failed for %s: %s", address[0], exc)
                return

            self._log_access(
                address, method, path, response, len(raw_request), bytes_sent, started_at
            )

    def _dispatch(self, request: HTTPRequest) -> HTTPResponse:
        if request.method in (Method.PUT, Method.DELETE):
            return method_not_allowed()

        resolved = self.router.resolve(request.method, request.path)
        if resolved is None:
            return not_found()

        handler, suffix = resolved
        try:
            return handler(request, suffix)
        except Exception:
            logger.exception("Unhandled error in route handler")
            return error_response(500)

    def _log_access(
        self,
        address: tuple[str, int],
        method: str,
        path: str,
        response: HTTPResponse,
        bytes_in: int,
        bytes_out: int,
        started_at: float,
    ) -> None:
        duration_ms = (time.perf_counter() - started_at) * 1000
        if self.log_format == "json":
            event = {
                "client": address[0],
                "method": method,
                "path": path,
                "status": response.status_code,
                "bytes_in": bytes_in,
                "bytes_out": bytes_out,
                "latency_ms": round(duration_ms, 3),
                "content_encoding": (
                    response.accept_encoding.value if response.encoded else None
                ),
            }
            logger.info(json.dumps(event, sort_keys=True))
            return

        logger.info(
            "client=%s method=%s path=%s status=%s bytes_in=%s bytes_out=%s duration_ms=%.2f",
            address[0],
            method,
            path,
            response.status_code,
            bytes_in,
            bytes_out,
            duration_ms,
        )


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Run the HTTP file/echo server")
    parser.add_argument(
        "--directory",
        default=FILES_DIRECTORY,
        help="base directory for /files/ (defaults to the current directory)",
    )
    parser.add_argument("--host", default=HOST)
    parser.add_argument("--port", type=int, default=PORT)
    parser.add_argument("--max-connections", type=int, default=MAX_ACTIVE_CONNECTIONS)
    parser.add_argument("--log-format", choices=["plain", "json"], default=LOG_FORMAT)
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default="INFO",
    )
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> None:
    args = _parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    server = HTTPServer(
        host=args.host,
        port=args.port,
        files_directory=args.directory,
        max_active_connections=args.max_connections,
        log_format=args.log_format,
    )
    try:
        server.start()
    except KeyboardInterrupt:
        server.stop()


if __name__ == "__main__":
    main()

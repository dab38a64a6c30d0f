"""Route handlers for the index, echo, user-agent and file endpoints."""

from __future__ import annotations

import logging

from file_store import FileReadError, FileStore, StorageWriteError
from request import HEAD_CHARSET, HTTPRequest, Method
from response import ContentType, HTTPResponse, not_found
from router import Router
from utils import resolve_file_path

logger = logging.getLogger(__name__)

CREATE_FAILED_BODY = "Error while creating the file"


def index(request: HTTPRequest, _suffix: str) -> HTTPResponse:
    return HTTPResponse(
        status_code=200,
        content_type=ContentType.HTML,
        accept_encoding=request.accept_encoding,
    )


def echo(request: HTTPRequest, suffix: str) -> HTTPResponse:
    return HTTPResponse(
        status_code=200,
        content_type=ContentType.TEXT,
        accept_encoding=request.accept_encoding,
        body=suffix.encode(HEAD_CHARSET),
    )


def user_agent(request: HTTPRequest, _suffix: str) -> HTTPResponse:
    return HTTPResponse(
        status_code=200,
        content_type=ContentType.TEXT,
        accept_encoding=request.accept_encoding,
        body=request.user_agent.encode(HEAD_CHARSET),
    )


class FileHandlers:
    def __init__(self, store: FileStore) -> None:
        self.store = store

    def get_file(self, request: HTTPRequest, name: str) -> HTTPResponse:
        if resolve_file_path(self.store.base_dir, name) is None:
            logger.warning("rejected file name %r", name)
            return not_found()
        try:
            data = self.store.read(name)
        except FileReadError:
            return not_found()
        return HTTPResponse(
            status_code=200,
            content_type=ContentType.OCTET_STREAM,
            accept_encoding=request.accept_encoding,
            body=data,
        )

    def post_file(self, request: HTTPRequest, name: str) -> HTTPResponse:
        if resolve_file_path(self.store.base_dir, name) is None:
            logger.warning("rejected file name %r", name)
            return not_found()
        try:
            self.store.write(name, request.body)
        except StorageWriteError:
            logger.exception("failed to store %r", name)
            return HTTPResponse(status_code=500, body=CREATE_FAILED_BODY)
        return HTTPResponse(
            status_code=201,
            content_type=ContentType.TEXT,
            accept_encoding=request.accept_encoding,
        )


def build_router(store: FileStore) -> Router:
    files = FileHandlers(store)
    router = Router()
    router.add_route(Method.GET, "/", index)
    router.add_route(Method.GET, "/index.html", index)
    router.add_prefix_route(Method.GET, "/echo/", echo)
    router.add_route(Method.GET, "/user-agent", user_agent)
    router.add_prefix_route(Method.GET, "/files/", files.get_file)
    router.add_prefix_route(Method.POST, "/files/", files.post_file)
    return router

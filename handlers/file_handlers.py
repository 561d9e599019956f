"""Handlers for reading and writing files under the files directory."""

import logging
from dataclasses import dataclass

from file_store import FileStore, FileStoreIOError, FileStoreNotFoundError
from request import HTTPRequest
from response import HTTPResponse, not_found

logger = logging.getLogger(__name__)

FILES_PREFIX = "/files/"


def _file_name(request: HTTPRequest) -> str:
    return request.path.removeprefix(FILES_PREFIX)


@dataclass
class ReadFile:
    store: FileStore

    def __call__(self, request: HTTPRequest) -> HTTPResponse:
        try:
            data = self.store.read(_file_name(request))
        except FileStoreNotFoundError:
            return not_found()
        return HTTPResponse(
            status_code=200,
            headers={
                "Content-Type": "application/octet-stream",
                "Content-Length": str(len(data)),
            },
            body=data,
        )


@dataclass
class CreateFile:
    store: FileStore

    def __call__(self, request: HTTPRequest) -> HTTPResponse:
        name = _file_name(request)
        try:
            self.store.create(name, request.body)
        except FileStoreNotFoundError:
            return not_found()
        except FileStoreIOError:
            logger.exception("Could not create file %r", name)
            return HTTPResponse(status_code=500)
        return HTTPResponse(status_code=201)

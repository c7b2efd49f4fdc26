"""
=============================================================================
FILE HANDLER
=============================================================================

Reads and writes files under the configured base directory.

    ┌────────┬──────────────────────────┬────────────────────────────────┐
    │ Method │ Success                  │ Failure                        │
    ├────────┼──────────────────────────┼────────────────────────────────┤
    │ GET    │ 200 + file bytes         │ 404 (any read error)           │
    │        │ application/octet-stream │                                │
    │ POST   │ 201, empty body          │ 500 (any write error, logged)  │
    │ other  │                          │ 501                            │
    └────────┴──────────────────────────┴────────────────────────────────┘

The file name is the last "/" segment of the path:
    /files/report.txt      → report.txt
    /api/files/report.txt  → report.txt

POST writes exactly the body the parser extracted. The Content-Length
header is logged for accounting but does not truncate or pad the write.

=============================================================================
"""

import logging

from ..http.request import HTTPRequest
from ..http.response import (
    HTTPResponse, ResponseBuilder,
    created, internal_error, not_found, not_implemented,
)
from ..http.router import last_segment
from ..storage import FileStorage


logger = logging.getLogger(__name__)


class FileHandler:
    """
    Serves GET/POST on /files/<name> from a FileStorage.

    Usage:
        files = FileHandler(FileStorage("/tmp/data"))
        router.add_route("/files/", files.handle, RouteType.CONTAINS)
    """

    def __init__(self, storage: FileStorage):
        self.storage = storage

    def handle(self, request: HTTPRequest) -> HTTPResponse:
        file_name = last_segment(request.path)

        if request.method == "GET":
            return self._read(file_name)
        if request.method == "POST":
            return self._write(file_name, request)

        logger.debug(f"Method {request.method} not implemented for files")
        return not_implemented()

    __call__ = handle

    def _read(self, file_name: str) -> HTTPResponse:
        try:
            content = self.storage.read(file_name)
        except OSError as e:
            logger.debug(f"File {file_name!r} not readable: {e}")
            return not_found()
        return ResponseBuilder().octet_stream(content).build()

    def _write(self, file_name: str, request: HTTPRequest) -> HTTPResponse:
        try:
            written = self.storage.write(file_name, request.body)
        except OSError as e:
            logger.error(f"Failed to write {file_name!r}: {e}")
            return internal_error()

        logger.info(
            f"Written {written} bytes to {file_name!r} "
            f"(Content-Length: {request.content_length})"
        )
        return created()

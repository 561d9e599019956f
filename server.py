"""Main HTTP server entry point and connection lifecycle orchestration."""

from __future__ import annotations

import argparse
import functools
import json
import logging
import socket
import time

from config import (
    ACCEPT_TIMEOUT_SECS,
    FILES_DIRECTORY,
    HOST,
    LISTEN_BACKLOG,
    LOG_FORMAT,
    PORT,
    REQUEST_QUEUE_SIZE,
    SOCKET_TIMEOUT_SECS,
    WORKER_COUNT,
)
from encoding import apply_content_encoding
from file_store import FileStore
from handlers.basic_handlers import ECHO_PREFIX, echo, root, user_agent
from handlers.file_handlers import FILES_PREFIX, CreateFile, ReadFile
from request import HTTPRequest, HTTPRequestParseError
from response import HTTPResponse, not_found
from router import ANY_METHOD, Router
from socket_handler import (
    HeaderTooLargeError,
    MalformedRequestError,
    PayloadTooLargeError,
    SocketTimeoutError,
    read_http_request,
    write_http_response,
)
from thread_pool import ThreadPool

logger = logging.getLogger(__name__)


class BindError(OSError):
    """Raised when the listening socket cannot be set up."""


def build_default_router(file_store: FileStore) -> Router:
    router = Router()
    router.add_route(ANY_METHOD, "/", root)
    router.add_route(ANY_METHOD, "/user-agent", user_agent)
    router.add_prefix_route(ANY_METHOD, ECHO_PREFIX, echo)
    router.add_prefix_route("GET", FILES_PREFIX, ReadFile(file_store))
    router.add_prefix_route("POST", FILES_PREFIX, CreateFile(file_store))
    return router


class HTTPServer:
    def __init__(
        self,
        host: str = HOST,
        port: int = PORT,
        router: Router | None = None,
        worker_count: int = WORKER_COUNT,
        request_queue_size: int = REQUEST_QUEUE_SIZE,
        *,
        files_directory: str | None = FILES_DIRECTORY,
        socket_timeout_secs: float | None = SOCKET_TIMEOUT_SECS,
        log_format: str = LOG_FORMAT,
    ) -> None:
        self.host = host
        self.port = port
        self.file_store = FileStore(files_directory)
        self.router = router or build_default_router(self.file_store)
        self.worker_count = worker_count
        self.request_queue_size = request_queue_size
        self.socket_timeout_secs = socket_timeout_secs
        self.log_format = log_format

        self._server_socket: socket.socket | None = None
        self._pool: ThreadPool | None = None
        self._running = False

    def start(self) -> None:
        """Bind, then accept connections and hand each one to the worker pool."""
        self._running = True
        server_socket = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
        try:
            server_socket.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
            server_socket.bind((self.host, self.port))
            server_socket.listen(LISTEN_BACKLOG)
        except OSError as exc:
            server_socket.close()
            logger.error("Could not bind %s:%s: %s", self.host, self.port, exc)
            raise BindError(f"could not bind {self.host}:{self.port}") from exc

        with server_socket:
            self._server_socket = server_socket
            server_socket.settimeout(ACCEPT_TIMEOUT_SECS)
            self.port = server_socket.getsockname()[1]
            self._pool = ThreadPool(
                worker_count=self.worker_count,
                queue_size=self.request_queue_size,
            )
            self._pool.start()
            logger.info(
                "Listening on %s:%s workers=%s files_directory=%s",
                self.host,
                self.port,
                self.worker_count,
                self.file_store.root,
            )

            try:
                while self._running:
                    try:
                        client_socket, address = server_socket.accept()
                    except socket.timeout:
                        continue
                    except OSError as exc:
                        if not self._running or server_socket.fileno() == -1:
                            break
                        logger.warning("Accept failed: %s", exc)
                        continue

                    job = functools.partial(self._handle_client, client_socket, address)
                    pool = self._pool
                    if pool is None or not pool.execute(job):
                        self._send_queue_full_response(client_socket, address)
            finally:
                self._running = False
                self._shutdown_pool()

    def stop(self) -> None:
        self._running = False
        server_socket, self._server_socket = self._server_socket, None
        if server_socket is not None:
            server_socket.close()
        self._shutdown_pool()

    def _shutdown_pool(self) -> None:
        pool, self._pool = self._pool, None
        if pool is not None:
            pool.shutdown()

    def _send_queue_full_response(
        self,
        client_socket: socket.socket,
        address: tuple[str, int],
    ) -> None:
        logger.warning("Rejecting %s: request queue is full", address[0])
        with client_socket:
            self._respond(
                client_socket,
                address,
                HTTPResponse(status_code=503),
                started_at=time.perf_counter(),
            )

    def _handle_client(self, client_socket: socket.socket, address: tuple[str, int]) -> None:
        with client_socket:
            client_socket.settimeout(self.socket_timeout_secs)
            started_at = time.perf_counter()
            try:
                raw_request = read_http_request(client_socket)
            except PayloadTooLargeError:
                self._respond(client_socket, address, HTTPResponse(status_code=413), started_at)
                return
            except HeaderTooLargeError:
                self._respond(client_socket, address, HTTPResponse(status_code=431), started_at)
                return
            except SocketTimeoutError:
                self._respond(client_socket, address, HTTPResponse(status_code=408), started_at)
                return
            except MalformedRequestError:
                self._respond(client_socket, address, not_found(), started_at)
                return
            except OSError:
                return

            if not raw_request:
                return

            try:
                request = HTTPRequest.from_bytes(raw_request)
            except HTTPRequestParseError as exc:
                logger.info("Unparseable request from %s: %s", address[0], exc)
                self._respond(
                    client_socket,
                    address,
                    not_found(),
                    started_at,
                    bytes_in=len(raw_request),
                )
                return

            response = apply_content_encoding(request, self._dispatch(request))
            self._respond(
                client_socket,
                address,
                response,
                started_at,
                method=request.method,
                path=request.path,
                bytes_in=len(raw_request),
            )

    def _dispatch(self, request: HTTPRequest) -> HTTPResponse:
        handler = self.router.resolve(request.method, request.path)
        if handler is None:
            allowed = self.router.allowed_methods(request.path)
            if allowed and ANY_METHOD not in allowed:
                return HTTPResponse(status_code=405, headers={"Allow": ", ".join(allowed)})
            return not_found()

        try:
            return handler(request)
        except Exception:
            logger.exception("Unhandled error in route handler")
            return HTTPResponse(status_code=500)

    def _respond(
        self,
        client_socket: socket.socket,
        address: tuple[str, int],
        response: HTTPResponse,
        started_at: float,
        *,
        method: str = "-",
        path: str = "-",
        bytes_in: int = 0,
    ) -> None:
        try:
            bytes_sent = write_http_response(client_socket, response)
        except OSError as exc:
            logger.warning("Write to %s failed: %s", address[0], exc)
            return
        self._log_access(
            address=address,
            method=method,
            path=path,
            status_code=response.status_code,
            bytes_in=bytes_in,
            bytes_out=bytes_sent,
            started_at=started_at,
        )

    def _log_access(
        self,
        *,
        address: tuple[str, int],
        method: str,
        path: str,
        status_code: int,
        bytes_in: int,
        bytes_out: int,
        started_at: float,
    ) -> None:
        duration_ms = (time.perf_counter() - started_at) * 1000
        event = {
            "client": address[0],
            "method": method,
            "path": path,
            "status": status_code,
            "bytes_in": bytes_in,
            "bytes_out": bytes_out,
            "latency_ms": round(duration_ms, 3),
        }
        if self.log_format == "json":
            logger.info(json.dumps(event, sort_keys=True))
            return

        logger.info(
            "client=%s method=%s path=%s status=%s bytes_in=%s bytes_out=%s duration_ms=%.2f",
            event["client"],
            event["method"],
            event["path"],
            event["status"],
            event["bytes_in"],
            event["bytes_out"],
            duration_ms,
        )


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Run the HTTP server")
    parser.add_argument("--directory", default=FILES_DIRECTORY)
    parser.add_argument("--host", default=HOST)
    parser.add_argument("--port", type=int, default=PORT)
    parser.add_argument("--workers", type=int, default=WORKER_COUNT)
    parser.add_argument("--queue-size", type=int, default=REQUEST_QUEUE_SIZE)
    parser.add_argument("--log-format", choices=["plain", "json"], default=LOG_FORMAT)
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> None:
    args = _parse_args(argv)
    logging.basicConfig(level=logging.INFO)
    server = HTTPServer(
        host=args.host,
        port=args.port,
        worker_count=args.workers,
        request_queue_size=args.queue_size,
        files_directory=args.directory,
        log_format=args.log_format,
    )
    try:
        server.start()
    except KeyboardInterrupt:
        server.stop()


if __name__ == "__main__":
    main()

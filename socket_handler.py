"""Low-level socket read/write utilities."""

from __future__ import annotations

import socket

from config import MAX_BODY_BYTES, MAX_HEADER_BYTES, READ_CHUNK_SIZE
from response import HTTPResponse


class HTTPReadError(Exception):
    """Raised when a client request cannot be safely read from the socket."""


class MalformedRequestError(HTTPReadError):
    """Raised when socket bytes do not form a complete HTTP request."""


class HeaderTooLargeError(HTTPReadError):
    """Raised when HTTP headers exceed configured maximum size."""


class PayloadTooLargeError(HTTPReadError):
    """Raised when request body exceeds configured maximum size."""


class SocketTimeoutError(HTTPReadError):
    """Raised when a client times out while sending request bytes."""


def _extract_content_length(header_bytes: bytes) -> int:
    for line in header_bytes.decode("iso-8859-1").split("\r\n")[1:]:
        name, separator, value = line.partition(":")
        if not separator or name.strip().lower() != "content-length":
            continue
        try:
            parsed_length = int(value.strip())
        except ValueError as exc:
            raise MalformedRequestError("Invalid Content-Length header") from exc
        if parsed_length < 0:
            raise MalformedRequestError("Negative Content-Length header")
        return parsed_length
    return 0


def _check_request_line(buffer: bytearray) -> None:
    line_end = buffer.find(b"\r\n")
    if line_end != -1 and len(bytes(buffer[:line_end]).split()) != 3:
        raise MalformedRequestError("Invalid request line")


def _recv(client_socket: socket.socket, size: int) -> bytes:
    try:
        return client_socket.recv(size)
    except socket.timeout as exc:
        raise SocketTimeoutError("Timed out waiting for request bytes") from exc


def read_http_request(
    client_socket: socket.socket,
    *,
    read_chunk_size: int = READ_CHUNK_SIZE,
    max_header_bytes: int = MAX_HEADER_BYTES,
    max_body_bytes: int = MAX_BODY_BYTES,
) -> bytes:
    """Read one HTTP/1.1 request: headers up to CRLFCRLF, then Content-Length body bytes.

    A peer that closes before sending a blank line gets whatever it sent, so
    the parser can still answer a bare request line. A request line that is
    already complete but does not hold exactly three tokens fails at once
    instead of waiting for the rest of the head. Returns b"" when the peer
    closed without sending anything.
    """
    buffer = bytearray()

    while True:
        header_end_index = buffer.find(b"\r\n\r\n")
        if header_end_index != -1:
            break
        _check_request_line(buffer)
        if len(buffer) > max_header_bytes:
            raise HeaderTooLargeError("Headers exceeded MAX_HEADER_BYTES")
        chunk = _recv(client_socket, read_chunk_size)
        if not chunk:
            return bytes(buffer)
        buffer.extend(chunk)

    body_start = header_end_index + 4
    if body_start > max_header_bytes:
        raise HeaderTooLargeError("Headers exceeded MAX_HEADER_BYTES")

    expected_body_length = _extract_content_length(bytes(buffer[:header_end_index]))
    if expected_body_length > max_body_bytes:
        raise PayloadTooLargeError("Body exceeded MAX_BODY_BYTES")

    request_length = body_start + expected_body_length
    while len(buffer) < request_length:
        chunk = _recv(client_socket, read_chunk_size)
        if not chunk:
            raise MalformedRequestError("Connection closed before request completed")
        buffer.extend(chunk)

    return bytes(buffer[:request_length])


def write_http_response(client_socket: socket.socket, response: HTTPResponse) -> int:
    """Write the serialized response and return the number of bytes sent."""
    payload = response.to_bytes()
    client_socket.sendall(payload)
    return len(payload)

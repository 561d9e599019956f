"""HTTP request model and parser."""

from dataclasses import dataclass, field

CRLF = b"\r\n"
HEADER_TERMINATOR = b"\r\n\r\n"
HEADER_SEPARATOR = ": "


class HTTPRequestParseError(ValueError):
    """Raised when request bytes cannot be turned into an HTTPRequest."""


class MalformedRequestLineError(HTTPRequestParseError):
    """The request line does not hold exactly method, path and version."""


class MalformedHeaderLineError(HTTPRequestParseError):
    """A header line lacks the ``": "`` separator."""


@dataclass(frozen=True, slots=True)
class HTTPRequest:
    method: str
    path: str
    http_version: str
    headers: dict[str, str] = field(default_factory=dict)
    body: bytes = b""

    @classmethod
    def from_bytes(cls, raw: bytes) -> "HTTPRequest":
        """Parse raw HTTP request bytes into a structured request object.

        The head is decoded as ISO-8859-1 so every byte survives as one
        character. A missing blank line leaves headers empty and the body
        unset; otherwise the body is the verbatim remainder and is not
        checked against Content-Length.
        """
        request_line_bytes, _sep, rest = raw.partition(CRLF)

        tokens = request_line_bytes.decode("iso-8859-1").split()
        if len(tokens) != 3:
            raise MalformedRequestLineError("Invalid request line")
        method, path, http_version = tokens

        if rest.startswith(CRLF):
            header_block, body = b"", rest[len(CRLF) :]
        elif HEADER_TERMINATOR in rest:
            header_block, body = rest.split(HEADER_TERMINATOR, 1)
        else:
            header_block, body = b"", b""

        return cls(
            method=method,
            path=path,
            http_version=http_version,
            headers=parse_header_block(header_block),
            body=body,
        )

    def header(self, name: str, default: str | None = None) -> str | None:
        return self.headers.get(name.lower(), default)


def parse_header_block(header_block: bytes) -> dict[str, str]:
    headers: dict[str, str] = {}
    if not header_block:
        return headers

    for line in header_block.decode("iso-8859-1").split("\r\n"):
        name, separator, value = line.partition(HEADER_SEPARATOR)
        if not separator or not name:
            raise MalformedHeaderLineError(f"Malformed header line: {line!r}")
        headers[name.lower()] = value
    return headers

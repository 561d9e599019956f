"""HTTP response model and serializer."""

from dataclasses import dataclass, field

REASON_PHRASES: dict[int, str] = {
    200: "OK",
    201: "Created",
    400: "Bad Request",
    404: "Not Found",
    405: "Method Not Allowed",
    408: "Request Timeout",
    413: "Payload Too Large",
    431: "Request Header Fields Too Large",
    500: "Internal Server Error",
    503: "Service Unavailable",
}


@dataclass(slots=True)
class HTTPResponse:
    status_code: int
    reason_phrase: str | None = None
    headers: dict[str, str] = field(default_factory=dict)
    body: bytes | str = b""

    def __post_init__(self) -> None:
        if isinstance(self.body, str):
            self.body = self.body.encode("utf-8")

    @property
    def status_line(self) -> str:
        reason = self.reason_phrase or REASON_PHRASES.get(self.status_code, "Unknown")
        return f"HTTP/1.1 {self.status_code} {reason}"

    def to_bytes(self) -> bytes:
        """Serialize the response into HTTP/1.1 wire format bytes.

        Content-Length always reflects the final body, so a body rewritten
        after the handler ran (for example by compression) stays framed.
        """
        body = self.body
        normalized_headers = dict(self.headers)
        normalized_headers["Content-Length"] = str(len(body))

        header_lines = [self.status_line]
        header_lines.extend(f"{key}: {value}" for key, value in normalized_headers.items())
        head = "\r\n".join(header_lines).encode("iso-8859-1") + b"\r\n\r\n"
        return head + body


def not_found() -> HTTPResponse:
    return HTTPResponse(status_code=404)


def text_plain(body: bytes) -> HTTPResponse:
    return HTTPResponse(
        status_code=200,
        headers={"Content-Type": "text/plain", "Content-Length": str(len(body))},
        body=body,
    )

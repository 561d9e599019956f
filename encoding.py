"""Content-Encoding negotiation applied after routing."""

import gzip

from config import GZIP_COMPRESS_LEVEL
from request import HTTPRequest
from response import HTTPResponse

GZIP = "gzip"


def accepted_encodings(request: HTTPRequest) -> list[str]:
    """Return the comma-separated Accept-Encoding tokens, stripped of whitespace."""
    raw = request.headers.get("accept-encoding", "")
    return [token.strip() for token in raw.split(",") if token.strip()]


def apply_content_encoding(
    request: HTTPRequest,
    response: HTTPResponse,
    *,
    compress_level: int = GZIP_COMPRESS_LEVEL,
) -> HTTPResponse:
    """Gzip the response body when the client lists ``gzip``.

    Token matching is exact and case-sensitive. The body is really
    compressed and Content-Length is recomputed from the compressed bytes.
    """
    if GZIP not in accepted_encodings(request):
        return response
    if "Content-Encoding" in response.headers:
        return response

    response.body = gzip.compress(response.body, compresslevel=compress_level, mtime=0)
    response.headers["Content-Encoding"] = GZIP
    response.headers["Content-Length"] = str(len(response.body))
    return response

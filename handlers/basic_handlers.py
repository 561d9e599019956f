"""Root, echo and user-agent route handlers."""

from request import HTTPRequest
from response import HTTPResponse, text_plain

ECHO_PREFIX = "/echo/"


def root(request: HTTPRequest) -> HTTPResponse:
    return HTTPResponse(status_code=200)


def user_agent(request: HTTPRequest) -> HTTPResponse:
    agent = request.headers.get("user-agent", "")
    return text_plain(agent.encode("iso-8859-1"))


def echo(request: HTTPRequest) -> HTTPResponse:
    message = request.path.removeprefix(ECHO_PREFIX)
    return text_plain(message.encode("iso-8859-1"))

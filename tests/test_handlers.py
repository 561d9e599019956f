"""Tests for the route handlers."""

from pathlib import Path

from file_store import FileStore
from handlers.basic_handlers import echo, root, user_agent
from handlers.file_handlers import CreateFile, ReadFile
from request import HTTPRequest


def _request(
    path: str,
    *,
    method: str = "GET",
    headers: dict[str, str] | None = None,
    body: bytes = b"",
) -> HTTPRequest:
    return HTTPRequest(
        method=method,
        path=path,
        http_version="HTTP/1.1",
        headers=headers or {},
        body=body,
    )


def test_root_returns_empty_200_regardless_of_headers() -> None:
    response = root(_request("/", headers={"user-agent": "x", "accept-encoding": "gzip"}))

    assert response.status_code == 200
    assert response.body == b""


def test_echo_returns_rest_of_path() -> None:
    response = echo(_request("/echo/hello/world"))

    assert response.status_code == 200
    assert response.headers == {"Content-Type": "text/plain", "Content-Length": "11"}
    assert response.body == b"hello/world"


def test_echo_content_length_counts_bytes() -> None:
    path = "/echo/café".encode("utf-8").decode("iso-8859-1")

    response = echo(_request(path))

    assert response.body == "café".encode("utf-8")
    assert response.headers["Content-Length"] == "5"


def test_user_agent_reflects_header() -> None:
    response = user_agent(_request("/user-agent", headers={"user-agent": "foo"}))

    assert response.body == b"foo"
    assert response.headers["Content-Length"] == "3"
    assert response.headers["Content-Type"] == "text/plain"


def test_user_agent_without_header_is_empty() -> None:
    response = user_agent(_request("/user-agent"))

    assert response.status_code == 200
    assert response.body == b""
    assert response.headers["Content-Length"] == "0"


def test_read_file_returns_octet_stream(tmp_path: Path) -> None:
    (tmp_path / "data.bin").write_bytes(b"\x00\xffbytes")

    response = ReadFile(FileStore(tmp_path))(_request("/files/data.bin"))

    assert response.status_code == 200
    assert response.headers["Content-Type"] == "application/octet-stream"
    assert response.headers["Content-Length"] == "7"
    assert response.body == b"\x00\xffbytes"


def test_read_missing_file_is_404(tmp_path: Path) -> None:
    response = ReadFile(FileStore(tmp_path))(_request("/files/nope"))

    assert response.status_code == 404
    assert response.body == b""


def test_read_with_unset_directory_is_404() -> None:
    response = ReadFile(FileStore(None))(_request("/files/anything"))

    assert response.status_code == 404


def test_create_file_writes_body_verbatim(tmp_path: Path) -> None:
    response = CreateFile(FileStore(tmp_path))(
        _request("/files/new.txt", method="POST", body=b"line1\r\nline2")
    )

    assert response.status_code == 201
    assert response.body == b""
    assert (tmp_path / "new.txt").read_bytes() == b"line1\r\nline2"


def test_create_file_with_unset_directory_is_500() -> None:
    response = CreateFile(FileStore(None))(_request("/files/x", method="POST", body=b"x"))

    assert response.status_code == 500
    assert response.body == b""


def test_create_file_outside_directory_is_404(tmp_path: Path) -> None:
    root_dir = tmp_path / "root"
    root_dir.mkdir()

    response = CreateFile(FileStore(root_dir))(
        _request("/files/../escape", method="POST", body=b"x")
    )

    assert response.status_code == 404
    assert not (tmp_path / "escape").exists()


def test_null_byte_file_name_is_404_for_read_and_create(tmp_path: Path) -> None:
    store = FileStore(tmp_path)

    read_response = ReadFile(store)(_request("/files/a%00b"))
    create_response = CreateFile(store)(_request("/files/a%00b", method="POST", body=b"x"))

    assert read_response.status_code == 404
    assert read_response.body == b""
    assert create_response.status_code == 404
    assert list(tmp_path.iterdir()) == []

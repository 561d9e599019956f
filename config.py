"""Configuration constants for the HTTP server."""

HOST: str = "127.0.0.1"
PORT: int = 4221
READ_CHUNK_SIZE: int = 4096
MAX_HEADER_BYTES: int = 16_384
MAX_BODY_BYTES: int = 1_048_576
SOCKET_TIMEOUT_SECS: float | None = 5.0
ACCEPT_TIMEOUT_SECS: float = 0.2
LISTEN_BACKLOG: int = 128
WORKER_COUNT: int = 4
REQUEST_QUEUE_SIZE: int = 64
FILES_DIRECTORY: str | None = None
GZIP_COMPRESS_LEVEL: int = 6
LOG_FORMAT: str = "plain"

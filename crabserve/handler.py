"""Request parsing, routing and response building for the static file server."""

from __future__ import annotations

import gzip
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import BinaryIO

_FALLBACK_INDEX = (
    "<html><body><h1>Make sure that that index.html exists</h1></body></html>"
)
_FILES_PREFIX = "/files/"


def _log_error(message: str) -> None:
    print(message, file=sys.stderr)


@dataclass
class HttpResponse:
    """An HTTP/1.1 response with a status line, headers and a body."""

    status: str
    headers: dict[str, str] = field(default_factory=dict)
    body: bytes = b""

    def add_header(self, key: str, value: str) -> None:
        """Set a header, replacing any earlier value under the same name."""
        self.headers[key] = value

    def set_body(self, body: bytes) -> None:
        """Replace the body and set Content-Length to match it."""
        self.body = bytes(body)
        self.headers["Content-Length"] = str(len(self.body))

    def to_bytes(self) -> bytes:
        """Serialise the response, gzip-compressing the body when asked to."""
        body = self.body
        headers = dict(self.headers)
        if headers.get("Content-Encoding") == "gzip":
            body = gzip.compress(body, compresslevel=6, mtime=0)
            headers["Content-Length"] = str(len(body))
        head = f"HTTP/1.1 {self.status}\r\n"
        head += "".join(f"{key}: {value}\r\n" for key, value in headers.items())
        head += "\r\n"
        return head.encode("utf-8") + body


@dataclass
class Request:
    """A parsed HTTP request."""

    method: str
    path: str
    headers: dict[str, str] = field(default_factory=dict)
    body: bytes = b""


def read_request(reader: BinaryIO) -> Request:
    """Read one request from a binary stream.

    Raises EOFError if the stream ends before a request line arrives and
    ValueError if the request line is malformed.
    """
    raw_line = reader.readline()
    if not raw_line:
        raise EOFError("connection closed before a request line was received")
    request_line = raw_line.decode("utf-8").strip()
    print(f"request: {request_line}")

    parts = request_line.split()
    if len(parts) < 2:
        raise ValueError(f"malformed request line: {request_line!r}")
    method, path = parts[0], parts[1]

    headers: dict[str, str] = {}
    content_length = 0
    while True:
        line = reader.readline().decode("utf-8").strip()
        if not line:
            break
        key, sep, value = line.partition(": ")
        if not sep:
            continue
        if key.lower() == "content-length":
            try:
                content_length = int(value)
            except ValueError:
                content_length = 0
            if content_length < 0:
                content_length = 0
        headers[key] = value

    body = b""
    if content_length > 0:
        data = reader.read(content_length)
        if data is not None and len(data) == content_length:
            body = data

    return Request(method=method, path=path, headers=headers, body=body)


def is_restricted(filename: str) -> bool:
    """Return True for names that must not be served: dot and underscore files."""
    if filename.startswith((".", "_")):
        _log_error(
            f"[file_restrictor] Request Denied for: {filename} as it begins with a '.'"
        )
        return True
    return False


def landing_page() -> HttpResponse:
    """Serve index.html from the working directory, or a hint when it is missing."""
    response = HttpResponse("200 OK")
    response.add_header("Content-Type", "text/html")
    try:
        page = Path("index.html").read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError):
        _log_error("[landing_page] Error reading index.html")
        page = _FALLBACK_INDEX
    response.set_body(page.encode("utf-8"))
    return response


def echo_handler(path: str) -> HttpResponse:
    """Answer with the path segment after /echo/."""
    segments = path.split("/")
    echo = segments[2] if len(segments) > 2 else ""
    response = HttpResponse("200 OK")
    response.add_header("Content-Type", "text/plain")
    response.set_body(echo.encode("utf-8"))
    return response


def agent_handler(headers: dict[str, str]) -> HttpResponse:
    """Answer with the client's User-Agent header."""
    user_agent = headers.get("User-Agent", "Unknown")
    response = HttpResponse("200 OK")
    response.add_header("Content-Type", "text/plain")
    response.set_body(user_agent.encode("utf-8"))
    return response


def file_handler(
    path: str, method: str, directory: str, body: bytes, allow_write: bool
) -> HttpResponse:
    """Read (GET) or write (POST) a file below the served directory."""
    if not path.startswith(_FILES_PREFIX):
        _log_error(f"[file_handler] Invalid path format: {path}")
        return HttpResponse("400 Bad Request")
    filename = path[len(_FILES_PREFIX):]
    file_path = Path(directory) / filename

    if is_restricted(filename):
        return HttpResponse("403 Forbidden")

    if method == "GET":
        try:
            contents = file_path.read_bytes()
        except OSError:
            _log_error("[file_handler] File not found")
            return HttpResponse("404 Not Found")
        response = HttpResponse("200 OK")
        response.add_header("Content-Type", "application/octet-stream")
        response.set_body(contents)
        return response

    if method == "POST":
        if not allow_write:
            _log_error("[file_handler] Write access denied")
            return HttpResponse("403 Forbidden")
        try:
            file_path.parent.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            _log_error(f"[file_handler] Failed to create directories: {exc}")
            return HttpResponse("500 Internal Server Error")
        try:
            file_path.write_bytes(body)
        except OSError as exc:
            _log_error(f"[file_handler] Error writing file: {exc}")
            return HttpResponse("500 Internal Server Error")
        return HttpResponse("201 Created")

    _log_error(f"[file_handler] Method not allowed: {method}")
    return HttpResponse("405 Method Not Allowed")


def _wants_close(headers: dict[str, str]) -> bool:
    return headers.get("Connection", "").lower() == "close"


def route(request: Request, directory: str | None, allow_write: bool) -> HttpResponse:
    """Build the full response for a request, including encoding and connection headers."""
    path = request.path
    if path == "/":
        response = landing_page()
    elif path.startswith("/echo/"):
        response = echo_handler(path)
    elif path.startswith("/user-agent"):
        response = agent_handler(request.headers)
    elif path.startswith(_FILES_PREFIX) and directory is not None:
        response = file_handler(
            path, request.method, directory, request.body, allow_write
        )
    else:
        response = HttpResponse("404 Not Found")

    encoding = request.headers.get("Accept-Encoding")
    if encoding is not None:
        response.add_header("Accept-Encoding", encoding)
        if "gzip" in encoding:
            response.add_header("Content-Encoding", "gzip")

    response.add_header(
        "Connection", "close" if _wants_close(request.headers) else "keep-alive"
    )
    return response


def handle_request(
    reader: BinaryIO, writer: BinaryIO, directory: str | None, allow_write: bool
) -> bool:
    """Serve one request; return True when the client asked to close the connection."""
    request = read_request(reader)
    response = route(request, directory, allow_write)
    writer.write(response.to_bytes())
    writer.flush()
    return _wants_close(request.headers)
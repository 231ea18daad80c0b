"""Command line entry point and threaded TCP server."""

from __future__ import annotations

import argparse
import socketserver
import sys
from dataclasses import dataclass

from crabserve.handler import handle_request

__version__ = "0.1.1"

_GREEN = "\x1b[32m"
_RESET = "\x1b[0m"


@dataclass
class Options:
    """Settings taken from the command line."""

    port: int = 8080
    directory: str | None = "."
    allow_write: bool = False
    timeout: int = 2


def _port(value: str) -> int:
    number = int(value)
    if not 0 <= number <= 65535:
        raise argparse.ArgumentTypeError(f"{value} is not in 0..=65535")
    return number


def _seconds(value: str) -> int:
    number = int(value)
    if number < 0:
        raise argparse.ArgumentTypeError(f"{value} is not a non-negative integer")
    return number


def parse_args(argv: list[str] | None = None) -> Options:
    """Parse command line arguments into Options."""
    parser = argparse.ArgumentParser(
        prog="crabserve",
        description="A lightweight HTTP server for serving static files",
    )
    parser.add_argument("-p", "--port", type=_port, default=8080)
    parser.add_argument("-d", "--directory", default=".")
    parser.add_argument("--allow-write", action="store_true")
    parser.add_argument("-t", "--timeout", type=_seconds, default=2)
    parser.add_argument("-V", "--version", action="version", version=__version__)
    args = parser.parse_args(argv)
    return Options(
        port=args.port,
        directory=args.directory,
        allow_write=args.allow_write,
        timeout=args.timeout,
    )


class _ConnectionHandler(socketserver.StreamRequestHandler):
    def setup(self) -> None:
        self.timeout = self.server.connection_timeout
        super().setup()
        print(f"{_GREEN}Accepted new connection{_RESET}")

    def handle(self) -> None:
        server = self.server
        while True:
            try:
                should_close = handle_request(
                    self.rfile, self.wfile, server.directory, server.allow_write
                )
            except (EOFError, ValueError, OSError):
                break
            if should_close:
                break


class _Server(socketserver.ThreadingTCPServer):
    allow_reuse_address = True
    daemon_threads = True

    def __init__(
        self,
        address: tuple[str, int],
        directory: str | None,
        allow_write: bool,
        connection_timeout: float,
    ) -> None:
        self.directory = directory
        self.allow_write = allow_write
        self.connection_timeout = connection_timeout
        super().__init__(address, _ConnectionHandler)


def create_server(
    port: int,
    directory: str | None = ".",
    allow_write: bool = False,
    timeout: float = 2,
    host: str = "0.0.0.0",
) -> socketserver.ThreadingTCPServer:
    """Bind a threaded server; each connection gets its own read/write timeout."""
    if timeout <= 0:
        raise ValueError("timeout must be a positive number of seconds")
    return _Server((host, port), directory, allow_write, timeout)


def serve(
    port: int, directory: str | None = ".", allow_write: bool = False, timeout: float = 2
) -> None:
    """Run the server on all interfaces until interrupted."""
    print(f"🚀 Starting server on port: {port}")
    with create_server(port, directory, allow_write, timeout) as server:
        try:
            server.serve_forever()
        except KeyboardInterrupt:
            pass


def main(argv: list[str] | None = None) -> int:
    """Parse arguments and start serving."""
    options = parse_args(argv)
    try:
        serve(options.port, options.directory, options.allow_write, options.timeout)
    except (OSError, ValueError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1
    return 0
# crabserve

A small threaded HTTP/1.1 server for serving, and optionally receiving,
files from one directory.

## Installation

```
pip install .
```

For the tests:

```
pip install .[test]
pytest
```

## Usage

```
crabserve [-p PORT] [-d DIR] [--allow-write] [-t SECONDS]
crabserve --version
```

| Option              | Default | Meaning                                                   |
|---------------------|---------|-----------------------------------------------------------|
| `-p`, `--port`      | `8080`  | TCP port to listen on, on all interfaces (0 to 65535)     |
| `-d`, `--directory` | `.`     | Directory that `/files/` is served from                   |
| `--allow-write`     | off     | Accept `POST /files/<name>` uploads                       |
| `-t`, `--timeout`   | `2`     | Socket timeout in seconds for each connection             |
| `-V`, `--version`   |         | Print the version and exit                                |

The timeout must be greater than zero; `--timeout 0` makes the command print
an error and exit with status 1, as does a port that cannot be bound.
Ctrl-C stops the server.

Every accepted connection is handled in its own thread and prints
`Accepted new connection`; each request line is printed as it arrives.
A connection is kept open for further requests until the client sends
`Connection: close`, the timeout expires, the client disconnects, or a
request line cannot be parsed.

## Routes

- `/` returns `index.html` from the current working directory as
  `text/html`. If that file cannot be read, a short placeholder page is
  returned instead.
- `/echo/<text>` returns `<text>` (the path segment after `/echo/`, up to the
  next `/`) as `text/plain`.
- Paths starting with `/user-agent` return the request's `User-Agent` header
  as `text/plain`, or `Unknown` if there is none.
- `GET /files/<name>` returns the file's contents as
  `application/octet-stream`. A file that cannot be read gives
  `404 Not Found`.
- `POST /files/<name>` writes the request body (read according to
  `Content-Length`) to the file, creating parent directories as needed, and
  answers `201 Created`. Without `--allow-write` the answer is
  `403 Forbidden`; a failure to write gives `500 Internal Server Error`.
- Any other method on `/files/` gives `405 Method Not Allowed`. Any other
  path gives `404 Not Found`.

File names that begin with `.` or `_` are refused with `403 Forbidden`.

If the request carries an `Accept-Encoding` header, it is echoed back in the
response; if it mentions `gzip`, the body is gzip-compressed and
`Content-Encoding: gzip` is set. Every response carries a `Connection`
header of `close` or `keep-alive`.

## Example

```
crabserve --port 8081 --directory ./public --allow-write
curl -X POST --data 'hello' http://localhost:8081/files/greeting.txt
curl http://localhost:8081/files/greeting.txt
curl http://localhost:8081/echo/hi
```

## Using it from Python

```python
from crabserve.cli import create_server

server = create_server(8081, "./public", allow_write=False, timeout=2, host="127.0.0.1")
server.serve_forever()
```

- `crabserve.cli.parse_args(argv)` returns an `Options` dataclass with
  `port`, `directory`, `allow_write` and `timeout`.
- `crabserve.cli.serve(port, directory, allow_write, timeout)` runs a server
  on all interfaces until interrupted.
- `crabserve.handler.read_request(reader)` parses one `Request` (`method`,
  `path`, `headers`, `body`) from a binary stream; it raises `EOFError` when
  the stream ends first and `ValueError` for a malformed request line.
- `crabserve.handler.route(request, directory, allow_write)` turns a
  `Request` into an `HttpResponse`; `HttpResponse.to_bytes()` serialises it.
- `crabserve.handler.handle_request(reader, writer, directory, allow_write)`
  reads one request, writes the response and returns `True` when the client
  asked to close the connection.

## What it does not do

- It does not list directories or guess content types; every file is sent
  as `application/octet-stream`.
- The only check on file names is their first character; names are
  otherwise joined to the served directory as given.
- There is no TLS, no authentication, no range requests and no chunked
  request bodies.
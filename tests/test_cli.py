import socket
import threading

import pytest

from crabserve.cli import Options, create_server, parse_args


def test_parse_args_defaults():
    assert parse_args([]) == Options(port=8080, directory=".", allow_write=False, timeout=2)


def test_parse_args_all_flags():
    options = parse_args(
        ["--port", "8081", "--directory", "/srv", "--allow-write", "--timeout", "5"]
    )
    assert options == Options(port=8081, directory="/srv", allow_write=True, timeout=5)


def test_parse_args_short_flags():
    options = parse_args(["-p", "9000", "-d", "data", "-t", "3"])
    assert (options.port, options.directory, options.timeout) == (9000, "data", 3)


@pytest.mark.parametrize("argv", [["--port", "70000"], ["--port", "x"], ["--timeout", "-1"]])
def test_parse_args_rejects_bad_values(argv):
    with pytest.raises(SystemExit) as info:
        parse_args(argv)
    assert info.value.code == 2


def test_create_server_rejects_zero_timeout():
    with pytest.raises(ValueError):
        create_server(0, ".", False, 0, "127.0.0.1")


@pytest.fixture
def server(tmp_path, monkeypatch):
    (tmp_path / "index.html").write_text("<h1>home</h1>")
    monkeypatch.chdir(tmp_path)
    srv = create_server(0, str(tmp_path), True, 5, "127.0.0.1")
    thread = threading.Thread(target=srv.serve_forever, daemon=True)
    thread.start()
    yield srv
    srv.shutdown()
    srv.server_close()
    thread.join(timeout=5)


def send_request(srv, request: str) -> str:
    with socket.create_connection(srv.server_address, timeout=5) as conn:
        conn.sendall(request.encode())
        conn.shutdown(socket.SHUT_WR)
        chunks = []
        while True:
            chunk = conn.recv(4096)
            if not chunk:
                break
            chunks.append(chunk)
    return b"".join(chunks).decode()


def test_landing_page(server):
    response = send_request(
        server, "GET / HTTP/1.1\r\nHost: localhost\r\nConnection: close\r\n\r\n"
    )
    assert "HTTP/1.1 200 OK" in response
    assert response.endswith("<h1>home</h1>")


def test_echo_handler(server):
    response = send_request(
        server, "GET /echo/hello HTTP/1.1\r\nHost: localhost\r\nConnection: close\r\n\r\n"
    )
    assert "HTTP/1.1 200 OK" in response
    assert response.endswith("hello")


def test_user_agent(server):
    response = send_request(
        server,
        "GET /user-agent HTTP/1.1\r\nHost: localhost\r\nUser-Agent: TestClient\r\n"
        "Connection: close\r\n\r\n",
    )
    assert "HTTP/1.1 200 OK" in response
    assert response.endswith("TestClient")


def test_file_write_and_read(server, tmp_path):
    post_body = "Sample file content"
    post_response = send_request(
        server,
        f"POST /files/testfile.txt HTTP/1.1\r\nHost: localhost\r\n"
        f"Content-Length: {len(post_body)}\r\nConnection: close\r\n\r\n{post_body}",
    )
    assert "HTTP/1.1 201 Created" in post_response
    assert (tmp_path / "testfile.txt").read_text() == post_body

    get_response = send_request(
        server,
        "GET /files/testfile.txt HTTP/1.1\r\nHost: localhost\r\nConnection: close\r\n\r\n",
    )
    assert "HTTP/1.1 200 OK" in get_response
    assert get_response.endswith(post_body)


def test_keep_alive_serves_several_requests(server):
    response = send_request(
        server,
        "GET /echo/one HTTP/1.1\r\n\r\nGET /echo/two HTTP/1.1\r\nConnection: close\r\n\r\n",
    )
    assert response.count("HTTP/1.1 200 OK") == 2
    assert "Connection: keep-alive" in response
    assert response.endswith("two")
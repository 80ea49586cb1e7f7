import subprocess
import threading
import urllib.error
import urllib.request
from contextlib import contextmanager
from http.server import ThreadingHTTPServer
from unittest import mock

import pytest

from gxpages import server
from gxpages.server import (
    GENERATE_COMMAND,
    NO_CACHE_HEADERS,
    WASM_PATH,
    build_addr,
    build_parser,
    find_parent,
    main,
    make_handler,
    run_go_generate,
)


@contextmanager
def serving(handler):
    httpd = ThreadingHTTPServer(("127.0.0.1", 0), handler)
    thread = threading.Thread(target=httpd.serve_forever, daemon=True)
    thread.start()
    try:
        yield f"http://127.0.0.1:{httpd.server_address[1]}"
    finally:
        httpd.shutdown()
        httpd.server_close()
        thread.join()


@pytest.fixture
def site(tmp_path):
    (tmp_path / "hello.txt").write_text("hello pages")
    (tmp_path / "res").mkdir()
    (tmp_path / "res" / "main.wasm").write_bytes(b"\x00asm")
    return tmp_path


def test_find_parent_returns_start_when_marker_present(tmp_path):
    (tmp_path / "go.mod").write_text("module x\n")
    assert find_parent("go.mod", tmp_path) == tmp_path.resolve()


def test_find_parent_walks_upwards(tmp_path):
    (tmp_path / ".git").mkdir()
    nested = tmp_path / "a" / "b" / "c"
    nested.mkdir(parents=True)
    assert find_parent(".git", nested) == tmp_path.resolve()


def test_find_parent_uses_cwd_by_default(tmp_path, monkeypatch):
    (tmp_path / "marker-file").write_text("")
    nested = tmp_path / "sub"
    nested.mkdir()
    monkeypatch.chdir(nested)
    assert find_parent("marker-file") == tmp_path.resolve()


def test_find_parent_missing_raises(tmp_path):
    name = "no-such-marker-for-gxpages-tests"
    with pytest.raises(FileNotFoundError, match=f"parent {name} not found"):
        find_parent(name, tmp_path)


def test_build_addr_local_and_public():
    assert build_addr(8080, True) == "localhost:8080"
    assert build_addr(8080, False) == ":8080"


def test_build_addr_local_prefix_invariant():
    for port in (1, 80, 65535):
        assert build_addr(port, True) == "localhost" + build_addr(port, False)


def test_run_go_generate_runs_in_module_root(tmp_path, capsys):
    (tmp_path / "go.mod").write_text("module x\n")
    nested = tmp_path / "internal"
    nested.mkdir()
    completed = subprocess.CompletedProcess(list(GENERATE_COMMAND), 0, stdout="generated")
    with mock.patch("subprocess.run", return_value=completed) as run:
        output = run_go_generate(nested)
    assert output == "generated"
    args, kwargs = run.call_args
    assert args[0] == list(GENERATE_COMMAND)
    assert kwargs["cwd"] == tmp_path.resolve()
    assert "generated" in capsys.readouterr().out


def test_run_go_generate_failure_raises(tmp_path):
    (tmp_path / "go.mod").write_text("module x\n")
    completed = subprocess.CompletedProcess(list(GENERATE_COMMAND), 2, stdout="broken build")
    with mock.patch("subprocess.run", return_value=completed):
        with pytest.raises(subprocess.CalledProcessError) as info:
            run_go_generate(tmp_path)
    assert info.value.returncode == 2
    assert info.value.output == "broken build"


def test_run_go_generate_without_module(tmp_path):
    with pytest.raises(FileNotFoundError, match="parent go.mod not found"):
        run_go_generate(tmp_path)


def test_handler_serves_files_without_cache(site):
    handler = make_handler(site, log_queries=False, generate=lambda: None)
    with serving(handler) as base:
        with urllib.request.urlopen(base + "/hello.txt") as response:
            body = response.read()
            headers = response.headers
    assert body == b"hello pages"
    for name, value in NO_CACHE_HEADERS.items():
        assert headers[name] == value


def test_handler_generates_before_serving_wasm(site):
    calls = []
    handler = make_handler(site, log_queries=False, generate=lambda: calls.append(1))
    with serving(handler) as base:
        with urllib.request.urlopen(base + "/hello.txt") as response:
            response.read()
        assert calls == []
        with urllib.request.urlopen(base + WASM_PATH) as response:
            body = response.read()
    assert calls == [1]
    assert body == b"\x00asm"


def test_handler_reports_generate_failure(site):
    def failing():
        raise RuntimeError("boom")

    handler = make_handler(site, log_queries=False, generate=failing)
    with serving(handler) as base:
        with pytest.raises(urllib.error.HTTPError) as info:
            urllib.request.urlopen(base + WASM_PATH)
        body = info.value.read()
    assert info.value.code == 500
    assert body == b"cannot generate WASM file: boom\n"


def test_handler_rejects_head(site):
    handler = make_handler(site, log_queries=False, generate=lambda: None)
    with serving(handler) as base:
        request = urllib.request.Request(base + "/hello.txt", method="HEAD")
        with pytest.raises(urllib.error.HTTPError) as info:
            urllib.request.urlopen(request)
    assert info.value.code == 405


@pytest.mark.parametrize("log_queries", [True, False])
def test_handler_logging_switch(site, capsys, log_queries):
    handler = make_handler(site, log_queries=log_queries, generate=lambda: None)
    with serving(handler) as base:
        with urllib.request.urlopen(base + "/hello.txt") as response:
            response.read()
    logged = capsys.readouterr().err
    assert ("GET /hello.txt" in logged) is log_queries


def test_parser_defaults():
    args = build_parser().parse_args([])
    assert (args.port, args.local, args.logq) == (8080, True, True)


def test_parser_overrides():
    args = build_parser().parse_args(["--port", "9000", "--no-local", "--no-logq"])
    assert (args.port, args.local, args.logq) == (9000, False, False)


def test_main_reports_server_failure(tmp_path, monkeypatch, capsys):
    (tmp_path / ".git").mkdir()
    monkeypatch.chdir(tmp_path)
    with mock.patch.object(server, "ThreadingHTTPServer", side_effect=OSError("address in use")):
        status = main(["--port", "9999"])
    captured = capsys.readouterr()
    assert status == 1
    assert "Listening on localhost:9999" in captured.out
    assert "cannot run HTTP server: address in use" in captured.err


def test_main_binds_public_address(tmp_path, monkeypatch, capsys):
    (tmp_path / ".git").mkdir()
    monkeypatch.chdir(tmp_path)
    with mock.patch.object(server, "ThreadingHTTPServer", side_effect=OSError("denied")) as cls:
        status = main(["--port", "9999", "--no-local"])
    assert status == 1
    assert cls.call_args[0][0] == ("", 9999)
    assert "Listening on :9999" in capsys.readouterr().out
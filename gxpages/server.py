"""Development HTTP server for the lesson pages."""

from __future__ import annotations

import argparse
import functools
import os
import subprocess
import sys
from collections.abc import Callable, Sequence
from http.server import SimpleHTTPRequestHandler, ThreadingHTTPServer
from pathlib import Path
from urllib.parse import urlsplit

WASM_PATH = "/res/main.wasm"
GENERATE_COMMAND = ("go", "generate", "./...")

NO_CACHE_HEADERS = {
    "Expires": "Thu, 01 Jan 1970 00:00:00 UTC",
    "Cache-Control": "no-cache, no-store, no-transform, must-revalidate, private, max-age=0",
    "Pragma": "no-cache",
    "X-Accel-Expires": "0",
}

_ETAG_HEADERS = (
    "ETag",
    "If-Modified-Since",
    "If-Match",
    "If-None-Match",
    "If-Range",
    "If-Unmodified-Since",
)


def find_parent(name: str, start: str | os.PathLike[str] | None = None) -> Path:
    """Return the closest directory, from start upwards, that contains name.

    The filesystem root itself is not searched.
    """
    current = Path(start if start is not None else os.getcwd()).resolve()
    while current != current.parent:
        if (current / name).exists():
            return current
        current = current.parent
    raise FileNotFoundError(f"parent {name} not found")


def build_addr(port: int = 8080, local: bool = True) -> str:
    """Return the listening address in host:port form."""
    addr = f":{port}"
    if local:
        addr = "localhost" + addr
    return addr


def run_go_generate(start: str | os.PathLike[str] | None = None) -> str:
    """Run the code generators of the module containing start.

    Prints and returns the combined output; raises CalledProcessError on failure.
    """
    module_root = find_parent("go.mod", start)
    result = subprocess.run(
        list(GENERATE_COMMAND),
        cwd=module_root,
        stdout=subprocess.PIPE,
        stderr=subprocess.STDOUT,
        text=True,
    )
    output = result.stdout or ""
    if output:
        print(output)
    if result.returncode != 0:
        raise subprocess.CalledProcessError(result.returncode, result.args, output=output)
    return output


def make_handler(
    root: str | os.PathLike[str],
    log_queries: bool = True,
    generate: Callable[[], object] | None = None,
) -> type[SimpleHTTPRequestHandler]:
    """Build a request handler serving files under root without caching.

    A request for the WASM binary first runs generate, which defaults to
    running the code generators of the module holding root.
    """
    directory = os.fspath(root)
    if generate is None:
        generate = functools.partial(run_go_generate, directory)

    class PagesHandler(SimpleHTTPRequestHandler):
        def __init__(self, *args, **kwargs) -> None:
            super().__init__(*args, directory=directory, **kwargs)

        def do_GET(self) -> None:
            for name in _ETAG_HEADERS:
                del self.headers[name]
            if urlsplit(self.path).path == WASM_PATH:
                try:
                    generate()
                except Exception as err:
                    self._send_text(500, f"cannot generate WASM file: {err}")
                    return
            super().do_GET()

        def do_HEAD(self) -> None:
            self.send_error(405)

        def end_headers(self) -> None:
            for name, value in NO_CACHE_HEADERS.items():
                self.send_header(name, value)
            super().end_headers()

        def log_message(self, format: str, *args) -> None:
            if log_queries:
                super().log_message(format, *args)

        def _send_text(self, status: int, message: str) -> None:
            body = (message + "\n").encode("utf-8")
            self.send_response(status)
            self.send_header("Content-Type", "text/plain; charset=utf-8")
            self.send_header("X-Content-Type-Options", "nosniff")
            self.send_header("Content-Length", str(len(body)))
            self.end_headers()
            self.wfile.write(body)

    return PagesHandler


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Serve the lesson pages.")
    parser.add_argument("-port", "--port", type=int, default=8080, help="http port")
    parser.add_argument(
        "-local",
        "--local",
        action=argparse.BooleanOptionalAction,
        default=True,
        help="local connections only",
    )
    parser.add_argument(
        "-logq",
        "--logq",
        dest="logq",
        action=argparse.BooleanOptionalAction,
        default=True,
        help="log queries",
    )
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    try:
        root = find_parent(".git")
    except FileNotFoundError as err:
        print(err, file=sys.stderr)
        return 1
    handler = make_handler(root, log_queries=args.logq)
    addr = build_addr(args.port, args.local)
    print(f"Listening on {addr}")
    host = "localhost" if args.local else ""
    try:
        with ThreadingHTTPServer((host, args.port), handler) as server:
            server.serve_forever()
    except KeyboardInterrupt:
        return 0
    except OSError as err:
        print(f"cannot run HTTP server: {err}", file=sys.stderr)
        return 1
    return 0
# gxpages

A small development server and page model for an interactive lesson site:
each lesson pairs a short HTML text with a code sample that the reader can
edit.

## Modules

- `gxpages.server`: an HTTP server for the files of the project root.
  - `find_parent(name, start=None)` returns the closest directory, from
    `start` (default: the working directory) upwards, that contains `name`.
    The filesystem root is not searched; `FileNotFoundError` is raised when
    nothing is found.
  - `build_addr(port=8080, local=True)` returns `"localhost:8080"` or
    `":8080"`.
  - `run_go_generate(start=None)` runs `go generate ./...` in the nearest
    parent directory holding `go.mod`, prints and returns the combined
    output, and raises `subprocess.CalledProcessError` on failure.
  - `make_handler(root, log_queries=True, generate=None)` returns a request
    handler class that serves files under `root`, adds no-cache headers,
    ignores conditional request headers, answers `HEAD` with 405, and
    optionally logs each request. A `GET` of `/res/main.wasm` first calls
    `generate` (by default `run_go_generate` from `root`); if that raises,
    the reply is a 500 with `cannot generate WASM file: <error>`.
  - `build_parser()` and `main(argv=None)` make up the command line.
- `gxpages.lessons`: the built-in chapters and lessons. `new_chapters()`
  returns a fresh list of `Chapter` objects (`title`, `content`), each
  holding `Lesson` objects (`chapter`, `text`, `code`).
- `gxpages.dom`: a lightweight in-memory document tree.
  - `Node` with `append_child`, `remove_child`, `set_attribute`,
    `get_attribute`, `add_event_listener`, `dispatch`, `set_inner_html`
    (parses markup) and `inner_html` (serializes it back).
  - `Document` with a `body` node and `create_element`, `create_div`,
    `create_br`, `create_button` and `find_element_by_class`, which raises
    `ElementLookupError` unless exactly one element has the class.
  - Element options `css_class`, `prop`, `listener`, `inner_html`, and text
    helpers `iter_leaves`, `first_leaf`, `text_content`.
- `gxpages.editor`: the lesson panels built on that tree.
  - `format_line(line)` escapes a source line, turns spaces into
    non-breaking spaces and wraps keywords and type names in coloured
    `<span>` elements.
  - `format_output(text)` escapes text and turns newlines into `<br>`.
  - `SourceEditor` keeps one div per source line, with `set`,
    `extract_source` and `on_source_change`, and a Run button.
  - `OutputPanel.set(text)` and `TextPanel.set_content(lesson)`.

## Installing

```
pip install .
```

## Running the server

From anywhere inside the project checkout (a directory tree with `.git`):

```
gxpages
```

Options (each may also be written with a single dash):

- `--port N`: port to listen on (default 8080).
- `--local` / `--no-local`: listen on `localhost` only (default) or on all
  interfaces.
- `--logq` / `--no-logq`: log each request (default on).

The server prints `Listening on <address>` and serves until interrupted.
If no `.git` directory is found, or the server cannot start, it prints the
error and exits with status 1.

## Using the page model

```python
from gxpages.dom import Document
from gxpages.editor import SourceEditor, TextPanel
from gxpages.lessons import new_chapters

doc = Document()
root = doc.create_div(doc.body)
first = new_chapters()[0].content[0]

TextPanel(doc, root).set_content(first)
editor = SourceEditor(doc, root, on_run=print)
editor.set(first.code)
print(editor.extract_source())
editor.run_button.dispatch("click", None)  # calls on_run with the source
```

## What it does not do

The package does not compile or run lesson code. `SourceEditor` only hands
the current source to the `on_run` and `on_change` callbacks it is given;
anything that builds or executes the code, and writes a result into an
`OutputPanel`, must be supplied by the caller. Building `/res/main.wasm`
relies on an installed `go` toolchain.

## Running the tests

```
pip install .[test]
pytest
```
"""Source editor, output and text panels of the lesson page."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

from .dom import Document, Node, css_class, inner_html, listener, prop, text_content
from .lessons import Lesson

_NBSP = "\u00a0"

_KEYWORD_COLORS: tuple[tuple[str, tuple[str, ...]], ...] = (
    (
        "var(--language-keyword)",
        ("var", "const", "return", "struct", "func", "package", "import"),
    ),
    (
        "var(--type-keyword)",
        ("bool", "string", "int32", "int64", "bfloat64", "float32", "float64"),
    ),
)

_ESCAPES = str.maketrans(
    {"&": "&amp;", "'": "&#39;", "<": "&lt;", ">": "&gt;", '"': "&#34;"}
)


def _escape(text: str) -> str:
    return text.translate(_ESCAPES)


def format_line(line: str) -> str:
    """Turn one source line into HTML with highlighted keywords."""
    line = _escape(line.replace(" ", _NBSP))
    for color, words in _KEYWORD_COLORS:
        for word in words:
            line = line.replace(word, f'<span style="color:{color};">{word}</span>')
    return line


def format_output(text: str) -> str:
    """Escape program output and keep its line breaks."""
    return _escape(text).replace("\n", "<br>")


class OutputPanel:
    """Panel displaying the result of compiling or running code."""

    def __init__(self, document: Document, parent: Node) -> None:
        self.div = document.create_div(parent, css_class("code_output_container"))

    def set(self, text: str) -> None:
        self.div.set_inner_html(format_output(text))


class TextPanel:
    """Panel displaying the text of a lesson."""

    def __init__(self, document: Document, parent: Node) -> None:
        self.div = document.create_div(parent, css_class("text_container"))

    def set_content(self, lesson: Lesson) -> None:
        self.div.set_inner_html(lesson.text)


class SourceEditor:
    """Editable source area with one div per line and a Run button."""

    def __init__(
        self,
        document: Document,
        parent: Node,
        on_run: Callable[[str], Any] | None = None,
        on_change: Callable[[str], Any] | None = None,
    ) -> None:
        self._document = document
        self._on_run = on_run
        self._on_change = on_change
        self.last_src = ""
        self.container = document.create_div(parent, css_class("code_source_container"))
        self.input = document.create_div(
            parent,
            css_class("code_source_textinput_container"),
            prop("contenteditable", "true"),
            listener("input", self.on_source_change),
        )
        self.control = document.create_div(parent, css_class("code_source_controls_container"))
        self.run_button = document.create_button(self.control, "Run", self._run)

    def set(self, src: str) -> None:
        """Replace the editor content with src, one formatted div per line."""
        self.last_src = src
        for child in list(self.input.children):
            self.input.remove_child(child)
        for line in src.split("\n"):
            markup = format_line(line) if line else "<br>"
            self._document.create_div(self.input, inner_html(markup))

    def extract_source(self) -> str:
        """Read the plain source text back from the editor lines."""
        src = "\n".join(text_content(child) for child in self.input.children)
        return src.replace(_NBSP, " ")

    def on_source_change(self, event: Any) -> None:
        current = self.extract_source()
        if current == self.last_src:
            return
        self.set(current)
        if self._on_change is not None:
            self._on_change(current)

    def _run(self, event: Any) -> None:
        if self._on_run is not None:
            self._on_run(self.last_src)
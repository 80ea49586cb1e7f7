"""A small in-memory document tree with element options and text helpers."""

from __future__ import annotations

import html
from collections import defaultdict
from collections.abc import Callable, Iterator
from html.parser import HTMLParser
from typing import Any

ElementOption = Callable[["Node"], None]
EventListener = Callable[[Any], None]

_VOID_TAGS = frozenset({"br", "hr", "img", "input", "meta", "link", "wbr"})
TEXT_TAG = "#text"


class ElementLookupError(LookupError):
    """Raised when a class lookup does not find exactly one element."""


class Node:
    """An element or text node in a document tree."""

    def __init__(self, tag: str, data: str | None = None) -> None:
        self.tag = tag.lower() if tag != TEXT_TAG else tag
        self.data = data
        self.attributes: dict[str, str] = {}
        self.children: list[Node] = []
        self.parent: Node | None = None
        self._listeners: defaultdict[str, list[EventListener]] = defaultdict(list)

    @classmethod
    def text(cls, data: str) -> Node:
        return cls(TEXT_TAG, data)

    def __repr__(self) -> str:
        if self.tag == TEXT_TAG:
            return f"Node(text={self.data!r})"
        return f"Node({self.tag!r}, {self.attributes!r})"

    def append_child(self, child: Node) -> Node:
        if child.parent is not None:
            child.parent.remove_child(child)
        child.parent = self
        self.children.append(child)
        return child

    def remove_child(self, child: Node) -> Node:
        for index, existing in enumerate(self.children):
            if existing is child:
                del self.children[index]
                child.parent = None
                return child
        raise ValueError("node is not a child of this node")

    def set_attribute(self, name: str, value: str) -> None:
        self.attributes[name] = value

    def get_attribute(self, name: str) -> str | None:
        return self.attributes.get(name)

    def add_event_listener(self, event_type: str, listener: EventListener) -> None:
        self._listeners[event_type].append(listener)

    def dispatch(self, event_type: str, event: Any) -> None:
        """Call every listener registered for the event type, in order."""
        for callback in list(self._listeners.get(event_type, ())):
            callback(event)

    def set_inner_html(self, markup: str) -> None:
        for child in list(self.children):
            self.remove_child(child)
        builder = _TreeBuilder(self)
        builder.feed(markup)
        builder.close()

    def inner_html(self) -> str:
        return "".join(_serialize(child) for child in self.children)

    def _set_text(self, text: str) -> None:
        for child in list(self.children):
            self.remove_child(child)
        self.append_child(Node.text(text))

    def _walk(self) -> Iterator[Node]:
        for child in self.children:
            yield child
            yield from child._walk()


def _escape_text(text: str) -> str:
    return (
        text.replace("&", "&amp;")
        .replace("<", "&lt;")
        .replace(">", "&gt;")
        .replace("\u00a0", "&nbsp;")
    )


def _escape_attr(value: str) -> str:
    return value.replace("&", "&amp;").replace('"', "&quot;").replace("\u00a0", "&nbsp;")


def _serialize(node: Node) -> str:
    if node.tag == TEXT_TAG:
        return _escape_text(node.data or "")
    attrs = "".join(f' {name}="{_escape_attr(value)}"' for name, value in node.attributes.items())
    if node.tag in _VOID_TAGS:
        return f"<{node.tag}{attrs}>"
    return f"<{node.tag}{attrs}>{node.inner_html()}</{node.tag}>"


class _TreeBuilder(HTMLParser):
    def __init__(self, root: Node) -> None:
        super().__init__(convert_charrefs=True)
        self._stack = [root]

    def _open(self, tag: str, attrs: list[tuple[str, str | None]]) -> Node:
        element = Node(tag)
        for name, value in attrs:
            element.set_attribute(name, value or "")
        self._stack[-1].append_child(element)
        return element

    def handle_starttag(self, tag: str, attrs: list[tuple[str, str | None]]) -> None:
        element = self._open(tag, attrs)
        if tag not in _VOID_TAGS:
            self._stack.append(element)

    def handle_startendtag(self, tag: str, attrs: list[tuple[str, str | None]]) -> None:
        self._open(tag, attrs)

    def handle_endtag(self, tag: str) -> None:
        if tag in _VOID_TAGS:
            # A stray closing void tag such as </br> acts as an opening one.
            self._open(tag, [])
            return
        for depth in range(len(self._stack) - 1, 0, -1):
            if self._stack[depth].tag == tag:
                del self._stack[depth:]
                return

    def handle_data(self, data: str) -> None:
        if data:
            self._stack[-1].append_child(Node.text(data))


def css_class(name: str) -> ElementOption:
    """Option setting the element's class attribute."""
    return lambda element: element.set_attribute("class", name)


def prop(name: str, value: str) -> ElementOption:
    """Option setting an arbitrary attribute."""
    return lambda element: element.set_attribute(name, value)


def listener(event_type: str, callback: EventListener) -> ElementOption:
    """Option registering an event listener."""
    return lambda element: element.add_event_listener(event_type, callback)


def inner_html(markup: str) -> ElementOption:
    """Option replacing the element's content with parsed markup."""
    return lambda element: element.set_inner_html(markup)


def iter_leaves(node: Node) -> Iterator[Node]:
    """Yield the nodes without children under node, depth first."""
    if not node.children:
        yield node
        return
    for child in node.children:
        yield from iter_leaves(child)


def first_leaf(node: Node) -> Node | None:
    return next(iter_leaves(node), None)


def text_content(node: Node) -> str:
    """Concatenate the text of all leaves, with HTML entities unescaped."""
    text = "".join(leaf.data for leaf in iter_leaves(node) if leaf.data is not None)
    return html.unescape(text)


class Document:
    """Owner of a document tree, creating and looking up elements."""

    def __init__(self) -> None:
        self.body = Node("body")

    def create_element(self, tag: str, parent: Node, *args: ElementOption) -> Node:
        element = Node(tag)
        parent.append_child(element)
        for option in args:
            option(element)
        return element

    def create_div(self, parent: Node, *args: ElementOption) -> Node:
        return self.create_element("div", parent, *args)

    def create_br(self, parent: Node, *args: ElementOption) -> Node:
        return self.create_element("br", parent, *args)

    def create_button(
        self, parent: Node, text: str, callback: EventListener, *args: ElementOption
    ) -> Node:
        button = Node("button")
        button._set_text(text)
        parent.append_child(button)
        for option in args:
            option(button)
        button.add_event_listener("click", callback)
        return button

    def find_element_by_class(self, class_name: str) -> Node:
        found = [
            node
            for node in self.body._walk()
            if class_name in (node.get_attribute("class") or "").split()
        ]
        if not found:
            raise ElementLookupError(f"no element of class {class_name} found")
        if len(found) > 1:
            raise ElementLookupError(f"too many elements of class {class_name} found")
        return found[0]
"""Lesson content shown by the tutorial pages."""

from __future__ import annotations

from dataclasses import dataclass, field

_DATA: tuple[tuple[str, tuple[tuple[str, str], ...]], ...] = (
    (
        "Chapter 1",
        (
            (
                "Lesson 1.1</br>Some other</br>text.",
                "package main\n\nfunc Main() float32 {\n  return 2+3\n}\n",
            ),
            ("Lesson 1.2", "Some code for 1.2"),
        ),
    ),
    (
        "Chapter 2",
        (
            ("Lesson 2.1", "Some code for 2.1"),
            ("Lesson 2.2", "Some code for 2.2"),
        ),
    ),
)


@dataclass
class Lesson:
    """One lesson: HTML text to read and code to edit."""

    chapter: Chapter = field(repr=False, compare=False)
    text: str
    code: str


@dataclass
class Chapter:
    """A titled sequence of lessons."""

    title: str
    content: list[Lesson] = field(default_factory=list)


def new_chapters() -> list[Chapter]:
    """Build a fresh list of chapters, each lesson linked to its chapter."""
    chapters = []
    for title, lessons in _DATA:
        chapter = Chapter(title=title)
        chapter.content = [Lesson(chapter=chapter, text=text, code=code) for text, code in lessons]
        chapters.append(chapter)
    return chapters
"""Span categories and the highlighter protocol."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Protocol


class Category(str, Enum):
    COMMENT = "comment"
    STRING = "string"
    NUMERIC = "numeric"
    KEYWORD = "keyword"
    PLAIN = "plain"


# Tailwind classes understood by the editor's live preview pane.
CATEGORY_CLASSES: dict[Category, str] = {
    Category.COMMENT: "text-gray-500 dark:text-gray-400 italic",
    Category.STRING: "text-green-400",
    Category.NUMERIC: "text-blue-300",
    Category.KEYWORD: "text-blue-400 font-semibold",
}


def span_open(category: Category) -> str | None:
    """Opening tag for *category*, or None for plain text, which is never wrapped."""
    classes = CATEGORY_CLASSES.get(category)
    if classes is None:
        return None
    return f'<span class="{classes}">'


def wrap(category: Category, text: str) -> str:
    opening = span_open(category)
    if opening is None:
        return text
    return f"{opening}{text}</span>"


def has_span(line: str, category: Category) -> bool:
    """Return True if *line* already carries a span of *category*."""
    opening = span_open(category)
    return opening is not None and opening in line


@dataclass(frozen=True, slots=True)
class Span:
    text: str
    category: Category = Category.PLAIN

    def to_html(self) -> str:
        return wrap(self.category, self.text)


class Highlighter(Protocol):
    def highlight(self, code: str) -> str:  # pragma: no cover - structural protocol
        """Return *code* with every recognised token wrapped in a category span."""

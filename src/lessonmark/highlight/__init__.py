"""Highlighter package."""

from .base import CATEGORY_CLASSES, Category, Highlighter, Span
from .solidity import SOLIDITY_KEYWORDS, SolidityHighlighter, highlight

__all__ = [
    "CATEGORY_CLASSES",
    "Category",
    "Highlighter",
    "Span",
    "SOLIDITY_KEYWORDS",
    "SolidityHighlighter",
    "highlight",
]

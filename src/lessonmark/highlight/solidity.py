"""Line-oriented Solidity highlighter.

Rules run per line in a fixed order: line comment, block comment, string
literals, numbers, keywords. A line that holds a comment is finished after the
comment rule. A line that holds a string gets neither numbers nor keywords,
even outside the quoted part. Block comments are only recognised when they
open and close on the same line.
"""

from __future__ import annotations

import re

from .base import Category, Span, has_span

SOLIDITY_KEYWORDS: tuple[str, ...] = (
    "contract", "pragma", "solidity", "function", "modifier", "event", "struct", "enum",
    "mapping", "address", "uint", "uint8", "uint16", "uint32", "uint64", "uint128", "uint256",
    "int", "int8", "int16", "int32", "int64", "int128", "int256", "bool", "string", "bytes",
    "bytes1", "bytes2", "bytes4", "bytes8", "bytes16", "bytes32",
    "public", "private", "internal", "external", "pure", "view", "payable", "nonpayable",
    "memory", "storage", "calldata", "constant", "immutable",
    "if", "else", "for", "while", "do", "break", "continue", "return", "try", "catch",
    "require", "assert", "revert", "throw",
    "msg", "tx", "block", "now", "this", "super",
    "wei", "gwei", "ether", "seconds", "minutes", "hours", "days", "weeks", "years",
    "true", "false", "null", "undefined",
)

_LINE_COMMENT_RE = re.compile(r"(//.*$)")
_BLOCK_COMMENT_RE = re.compile(r"(/\*.*?\*/)", re.DOTALL)
_DOUBLE_QUOTED_RE = re.compile(r'(".*?")')
_SINGLE_QUOTED_RE = re.compile(r"('.*?')")
_NUMBER_RE = re.compile(r"\b(\d+\.?\d*)\b", re.ASCII)
_KEYWORD_RES: tuple[tuple[str, re.Pattern[str]], ...] = tuple(
    (keyword, re.compile(rf"\b({re.escape(keyword)})\b", re.ASCII)) for keyword in SOLIDITY_KEYWORDS
)


def _wrapper(category: Category):
    def _replace(match: re.Match[str]) -> str:
        return Span(match.group(1), category).to_html()

    return _replace


_as_comment = _wrapper(Category.COMMENT)
_as_string = _wrapper(Category.STRING)
_as_numeric = _wrapper(Category.NUMERIC)
_as_keyword = _wrapper(Category.KEYWORD)


class SolidityHighlighter:
    """Wrap Solidity tokens in styled ``<span>`` markers, one line at a time."""

    def __init__(self, keywords: tuple[str, ...] = SOLIDITY_KEYWORDS) -> None:
        if keywords is SOLIDITY_KEYWORDS:
            self._keyword_res = _KEYWORD_RES
        else:
            self._keyword_res = tuple((kw, re.compile(rf"\b({re.escape(kw)})\b", re.ASCII)) for kw in keywords)

    def highlight(self, code: str) -> str:
        return "\n".join(self.highlight_line(line) for line in code.split("\n"))

    def highlight_line(self, line: str) -> str:
        line, found = _LINE_COMMENT_RE.subn(_as_comment, line)
        if found:
            return line

        line, found = _BLOCK_COMMENT_RE.subn(_as_comment, line)
        if found:
            return line

        line = _DOUBLE_QUOTED_RE.sub(_as_string, line)
        line = _SINGLE_QUOTED_RE.sub(_as_string, line)
        if has_span(line, Category.STRING):
            return line

        line = _NUMBER_RE.sub(_as_numeric, line)

        for keyword, pattern in self._keyword_res:
            if keyword in line:
                line = pattern.sub(_as_keyword, line)
        return line


def highlight(code: str) -> str:
    """Highlight a Solidity snippet. Never raises."""
    return SolidityHighlighter().highlight(code)

"""Render lesson markdown into HTML for the editor preview.

The renderer is a fixed sequence of regex passes over the whole document.
Fenced code is lifted out into placeholders first and put back last, so no
line-oriented pass ever sees code content.
"""

from __future__ import annotations

import html
import logging
import re
from collections.abc import Callable

from lessonmark.highlight.base import Highlighter
from lessonmark.highlight.solidity import SolidityHighlighter
from lessonmark.renderer.blocks import CodeBlocks

logger = logging.getLogger(__name__)

Stage = Callable[[str], str]


# ---------------------------------------------------------------------------
# Fenced code
# ---------------------------------------------------------------------------

# A fence with no closing marker runs to the end of the document.
_SOLIDITY_FENCE_RE = re.compile(r"```solidity\n?(.*?)(?:```|\Z)", re.DOTALL)
_GENERIC_FENCE_RE = re.compile(r"```(\w+)?\n?(.*?)(?:```|\Z)", re.DOTALL)


def _code_fragment(code: str, language: str, *, line_height: str, font_size: str) -> str:
    return (
        '<pre class="bg-gray-900 text-gray-100 p-4 rounded-lg overflow-x-auto my-4" '
        f'style="line-height: {line_height} !important; margin: 0 !important; '
        f'padding: 1rem !important; font-size: {font_size} !important;">'
        f'<code class="language-{language}" '
        f'style="line-height: {line_height} !important; margin: 0 !important; '
        f'padding: 0 !important; display: block !important; font-size: {font_size} !important;">'
        f"{code}</code></pre>"
    )


def _extract(
    text: str,
    pattern: re.Pattern[str],
    blocks: CodeBlocks,
    build: Callable[[re.Match[str]], tuple[str, str | None, str]],
) -> tuple[str, CodeBlocks]:
    pieces: list[str] = []
    last = 0
    for match in pattern.finditer(text):
        raw, language, fragment = build(match)
        blocks, token = blocks.add(raw, language, fragment)
        pieces.append(text[last:match.start()])
        pieces.append(token)
        last = match.end()
    pieces.append(text[last:])
    return "".join(pieces), blocks


def extract_solidity_fences(
    text: str, blocks: CodeBlocks, highlighter: Highlighter | None = None
) -> tuple[str, CodeBlocks]:
    """Highlight ```` ```solidity ```` fences and replace them with placeholders."""
    highlighter = highlighter or SolidityHighlighter()

    def build(match: re.Match[str]) -> tuple[str, str | None, str]:
        raw = match.group(1).strip()
        code = highlighter.highlight(html.escape(raw, quote=False))
        return raw, "solidity", _code_fragment(code, "solidity", line_height="1.5", font_size="16px")

    return _extract(text, _SOLIDITY_FENCE_RE, blocks, build)


def extract_generic_fences(text: str, blocks: CodeBlocks) -> tuple[str, CodeBlocks]:
    """Replace every remaining fence with a placeholder; content is escaped, not highlighted."""

    def build(match: re.Match[str]) -> tuple[str, str | None, str]:
        language = match.group(1)
        raw = match.group(2).strip()
        code = html.escape(raw, quote=False)
        return raw, language, _code_fragment(code, language or "text", line_height="1.0", font_size="14px")

    return _extract(text, _GENERIC_FENCE_RE, blocks, build)


def restore_code_blocks(text: str, blocks: CodeBlocks) -> str:
    return blocks.restore(text)


# ---------------------------------------------------------------------------
# Headings
# ---------------------------------------------------------------------------

_HEADING_RES = {level: re.compile(rf"^{'#' * level}\s+(.*)$", re.MULTILINE) for level in range(1, 7)}

_HEADING_CLASSES = {
    6: "text-sm font-bold text-gray-900 dark:text-white mb-2 mt-4",
    5: "text-base font-bold text-gray-900 dark:text-white mb-2 mt-4",
    4: "text-lg font-bold text-gray-900 dark:text-white mb-2 mt-4",
    3: "text-xl font-bold text-gray-900 dark:text-white mb-2 mt-4",
    2: "text-2xl font-bold text-gray-900 dark:text-white mb-3 mt-6",
    1: "text-3xl font-bold text-gray-900 dark:text-white mb-4 mt-8",
}

_QUOTE_HEADING_CLASSES = {
    6: "text-sm font-bold text-gray-700 dark:text-gray-300 mb-1",
    5: "text-base font-bold text-gray-700 dark:text-gray-300 mb-1",
    4: "text-lg font-bold text-gray-700 dark:text-gray-300 mb-1",
    3: "text-xl font-bold text-gray-700 dark:text-gray-300 mb-1",
    2: "text-2xl font-bold text-gray-700 dark:text-gray-300 mb-2",
    1: "text-3xl font-bold text-gray-700 dark:text-gray-300 mb-2",
}


def _headings(text: str, classes: dict[int, str]) -> str:
    # Longest prefix first.
    for level in range(6, 0, -1):
        text = _HEADING_RES[level].sub(rf'<h{level} class="{classes[level]}">\1</h{level}>', text)
    return text


def render_headings(text: str) -> str:
    return _headings(text, _HEADING_CLASSES)


# ---------------------------------------------------------------------------
# Blockquotes
# ---------------------------------------------------------------------------

_BLOCKQUOTE_RE = re.compile(r"^(> .*(?:\n> .*)*)$", re.MULTILINE)
_QUOTE_PREFIX_RE = re.compile(r"^> ", re.MULTILINE)
_QUOTE_ITEM_RES = (
    (re.compile(r"^\* (.*)$", re.MULTILINE), r'<li class="ml-4">\1</li>'),
    (re.compile(r"^- (.*)$", re.MULTILINE), r'<li class="ml-4">\1</li>'),
    (re.compile(r"^(\d+)\. (.*)$", re.MULTILINE), r'<li class="ml-4">\2</li>'),
)
_QUOTE_LIST_RUN_RE = re.compile(r"(?:<li.*</li>\s*)+")
_QUOTE_PARAGRAPH_RE = re.compile(r"^(?!<[hlu])(.*)$", re.MULTILINE)


def _render_quote_body(content: str) -> str:
    content = _headings(content, _QUOTE_HEADING_CLASSES)

    for pattern, replacement in _QUOTE_ITEM_RES:
        content = pattern.sub(replacement, content)
    # Every list inside a quote is rendered as a bullet list, numbered or not.
    content = _QUOTE_LIST_RUN_RE.sub(r'<ul class="list-disc list-inside mb-2 space-y-1">\g<0></ul>', content)

    content = _BOLD_RE.sub(r'<strong class="font-bold">\1</strong>', content)
    content = _ITALIC_RE.sub(r'<em class="italic">\1</em>', content)

    return _QUOTE_PARAGRAPH_RE.sub(r'<p class="mb-2 text-gray-700 dark:text-gray-300">\1</p>', content)


def render_blockquotes(text: str) -> str:
    """Render runs of ``> `` lines with a reduced pass set (no images, links or code)."""

    def replace(match: re.Match[str]) -> str:
        content = _QUOTE_PREFIX_RE.sub("", match.group(0)).strip()
        return (
            '<blockquote class="border-l-4 border-amber-400 pl-4 py-2 my-4 '
            'bg-amber-50 dark:bg-amber-900/20 rounded-r-md">'
            f"{_render_quote_body(content)}</blockquote>"
        )

    return _BLOCKQUOTE_RE.sub(replace, text)


# ---------------------------------------------------------------------------
# Inline elements
# ---------------------------------------------------------------------------

_INLINE_CODE_RE = re.compile(r"`([^`]+)`")
_LINKED_IMAGE_RE = re.compile(r"\[!\[([^\]]*)\]\(([^)]+)\)\]\(([^)]+)\)")
_IMAGE_RE = re.compile(r"!\[([^\]]*)\]\(([^)]+)\)")
_LINK_RE = re.compile(r"\[([^\]]+)\]\(([^)]+)\)")
_BOLD_RE = re.compile(r"\*\*([^*]+)\*\*")
_ITALIC_RE = re.compile(r"\*([^*]+)\*")


def render_inline_code(text: str) -> str:
    return _INLINE_CODE_RE.sub(
        r'<code class="bg-gray-200 dark:bg-gray-700 px-2 py-1 rounded text-sm font-mono">\1</code>', text
    )


def render_linked_images(text: str) -> str:
    """Render ``[![alt](img)](href)`` (video thumbnails) as a clickable image."""
    return _LINKED_IMAGE_RE.sub(
        r'<a href="\3" target="_blank" rel="noopener noreferrer" class="inline-block my-4">'
        r'<img src="\2" alt="\1" class="max-w-full h-auto rounded-lg shadow-md hover:shadow-lg '
        r'transition-shadow cursor-pointer border-2 border-transparent hover:border-amber-400" /></a>',
        text,
    )


def render_images(text: str) -> str:
    return _IMAGE_RE.sub(r'<img src="\2" alt="\1" class="max-w-full h-auto rounded-lg my-4 shadow-md" />', text)


def render_links(text: str) -> str:
    return _LINK_RE.sub(
        r'<a href="\2" target="_blank" rel="noopener noreferrer" '
        r'class="text-amber-600 dark:text-amber-400 hover:text-amber-700 dark:hover:text-amber-300 '
        r'underline font-medium">\1</a>',
        text,
    )


def render_emphasis(text: str) -> str:
    # Double asterisks must go first or the single-asterisk rule splits bold pairs.
    text = _BOLD_RE.sub(r'<strong class="font-bold text-gray-900 dark:text-white">\1</strong>', text)
    return _ITALIC_RE.sub(r'<em class="italic text-gray-800 dark:text-gray-200">\1</em>', text)


# ---------------------------------------------------------------------------
# Lists
# ---------------------------------------------------------------------------

_LIST_ITEM = r'<li class="mb-1">\1</li>'
_BULLET_RES = (re.compile(r"^\* (.*)$", re.MULTILINE), re.compile(r"^- (.*)$", re.MULTILINE))
_NUMBERED_RE = re.compile(r"^\d+\. (.*)$", re.MULTILINE)
_UL_OPEN = '<ul class="list-disc list-inside mb-4 ml-4 space-y-1">'
_OL_OPEN = '<ol class="list-decimal list-inside mb-4 ml-4 space-y-1">'
_ITEM_RUN_RE = re.compile(r'(?:<li class="mb-1">.*</li>\s*)+')
_ORDERED_RUN_RE = re.compile(r'(<ul class="list-disc[^"]*">)?(?:<li class="mb-1">.*</li>\s*)+')


def render_unordered_lists(text: str) -> str:
    for pattern in _BULLET_RES:
        text = pattern.sub(_LIST_ITEM, text)
    return _ITEM_RUN_RE.sub(lambda m: f"{_UL_OPEN}{m.group(0)}</ul>", text)


def render_ordered_lists(text: str) -> str:
    text = _NUMBERED_RE.sub(_LIST_ITEM, text)

    def wrap(match: re.Match[str]) -> str:
        if match.group(1):
            return match.group(0)
        return f"{_OL_OPEN}{match.group(0)}</ol>"

    return _ORDERED_RUN_RE.sub(wrap, text)


# ---------------------------------------------------------------------------
# Paragraphs and cleanup
# ---------------------------------------------------------------------------

_PARAGRAPH_RE = re.compile(r"^(?!<(?:[hlupo]|blockquote)|__CODE_BLOCK_\d+__$)(.+)$", re.MULTILINE)
_PARAGRAPH_BEFORE_LIST_RE = re.compile(r'(<p class="mb-4[^"]*">[^<]*</p>)\s*(<ul|<ol)')
_EMPTY_PARAGRAPH_RE = re.compile(r"<p[^>]*>\s*</p>")
_BLANK_LINES_RE = re.compile(r"\n\s*\n")


def wrap_paragraphs(text: str) -> str:
    return _PARAGRAPH_RE.sub(r'<p class="mb-4 text-gray-700 dark:text-gray-300 leading-relaxed">\1</p>', text)


def tighten_paragraphs_before_lists(text: str) -> str:
    return _PARAGRAPH_BEFORE_LIST_RE.sub(lambda m: m.group(1).replace("mb-4", "mb-2", 1) + m.group(2), text)


def clean_up(text: str) -> str:
    text = _EMPTY_PARAGRAPH_RE.sub("", text)
    return _BLANK_LINES_RE.sub("\n", text)


# ---------------------------------------------------------------------------
# Pipeline
# ---------------------------------------------------------------------------

TEXT_STAGES: tuple[Stage, ...] = (
    render_inline_code,
    render_headings,
    render_blockquotes,
    render_linked_images,
    render_images,
    render_links,
    render_unordered_lists,
    render_ordered_lists,
    render_emphasis,
    wrap_paragraphs,
    tighten_paragraphs_before_lists,
    clean_up,
)


class MarkdownRenderer:
    """Turn lesson markdown into an HTML fragment.

    Rendering is not idempotent: feeding the output back in as markdown is not
    supported.
    """

    def __init__(self, highlighter: Highlighter | None = None) -> None:
        self._highlighter = highlighter or SolidityHighlighter()

    def render(self, markdown: str) -> str:
        if not markdown:
            return ""

        text = markdown.replace("\r\n", "\n").replace("\r", "\n")
        text, blocks = extract_solidity_fences(text, CodeBlocks(), self._highlighter)
        text, blocks = extract_generic_fences(text, blocks)
        logger.debug("Extracted %d code block(s)", len(blocks))

        for stage in TEXT_STAGES:
            text = stage(text)

        return restore_code_blocks(text, blocks).strip()


def render(markdown: str, *, highlighter: Highlighter | None = None) -> str:
    """Render *markdown* to an HTML fragment. Never raises."""
    return MarkdownRenderer(highlighter).render(markdown)

"""Tests for the markdown renderer.

Covers:
- Fenced code (Solidity highlighting, generic escaping, unterminated fences)
- Headings, blockquotes, images, linked images, links
- Unordered and ordered lists, emphasis, paragraphs and cleanup
- Code block accumulator and individual stages
- Totality over odd input

Rendering is not idempotent: feeding rendered HTML back in as markdown is
unsupported, so no test asserts anything about it.
"""

from __future__ import annotations

import html
import re

import pytest

from lessonmark.renderer.blocks import CodeBlocks, ExtractedBlock, placeholder
from lessonmark.renderer.markdown_renderer import (
    MarkdownRenderer,
    extract_generic_fences,
    extract_solidity_fences,
    render,
    render_headings,
    render_ordered_lists,
    restore_code_blocks,
)

PARAGRAPH = '<p class="mb-4 text-gray-700 dark:text-gray-300 leading-relaxed">'
UL = '<ul class="list-disc list-inside mb-4 ml-4 space-y-1">'
OL = '<ol class="list-decimal list-inside mb-4 ml-4 space-y-1">'
KEYWORD = '<span class="text-blue-400 font-semibold">'


def _solidity_body(rendered: str) -> str:
    match = re.search(r'<code class="language-solidity"[^>]*>(.*?)</code></pre>', rendered, re.DOTALL)
    assert match is not None
    return match.group(1)


# ---------------------------------------------------------------------------
# Fenced code
# ---------------------------------------------------------------------------

def test_solidity_fence_is_highlighted() -> None:
    source = "contract Token {\n    uint256 total = 1000; // supply\n}"
    out = render(f"```solidity\n{source}\n```")

    assert '<code class="language-solidity"' in out
    assert "font-size: 16px" in out
    body = _solidity_body(out)
    assert f"{KEYWORD}contract</span>" in body
    assert html.unescape(re.sub(r"</?span[^>]*>", "", body)) == source


def test_solidity_fence_content_is_escaped() -> None:
    out = render("```solidity\nif (a < b) {}\n```")
    assert "a &lt; b" in _solidity_body(out)


def test_generic_fence_is_not_highlighted() -> None:
    out = render("```python\n# not a heading\nprint('x')\n```")

    assert '<code class="language-python"' in out
    assert "font-size: 14px" in out
    assert "# not a heading" in out
    assert "print('x')" in out
    assert "<h1" not in out
    assert "<span" not in out


def test_fence_without_language_uses_text() -> None:
    out = render("```\n<b>raw</b>\n```")
    assert '<code class="language-text"' in out
    assert "&lt;b&gt;raw&lt;/b&gt;" in out


def test_fence_contents_skip_line_passes() -> None:
    out = render("```\n* item\n> quote\n1. step\n**bold**\n```")
    assert out.startswith("<pre")
    for tag in ("<li", "<ul", "<ol", "<blockquote", "<strong", "<p "):
        assert tag not in out


def test_specialized_fence_is_extracted_before_generic() -> None:
    out = render("```js\nlet a;\n```\n\n```solidity\ncontract A {}\n```")
    assert out.count("<pre") == 2
    assert out.index("language-js") < out.index("language-solidity")
    assert f"{KEYWORD}contract</span>" in out


def test_unterminated_fence_swallows_rest_of_document() -> None:
    out = render("Intro\n```js\nlet a = 1;\n* not a list")
    assert out.startswith(f"{PARAGRAPH}Intro</p>")
    assert "* not a list" in out
    assert "<li" not in out


def test_unterminated_solidity_fence_is_highlighted_to_end() -> None:
    out = render("Intro\n```solidity\ncontract A {\n* not a list")

    assert out.startswith(f"{PARAGRAPH}Intro</p>")
    body = _solidity_body(out)
    assert f"{KEYWORD}contract</span>" in body
    assert html.unescape(re.sub(r"</?span[^>]*>", "", body)) == "contract A {\n* not a list"
    assert "<li" not in out


@pytest.mark.parametrize(
    "markdown",
    [
        "```js\nlet a = 1;\n\n```solidity\ncontract A {}\n```",
        "Intro\n```\n```solidity\ncontract A {}\n```",
    ],
)
def test_unterminated_fence_around_extracted_block_leaves_no_placeholder(markdown: str) -> None:
    out = render(markdown)

    assert "__CODE_BLOCK_" not in out
    assert f"{KEYWORD}contract</span>" in out


# ---------------------------------------------------------------------------
# Headings and blockquotes
# ---------------------------------------------------------------------------

def test_heading_level_one() -> None:
    assert render("# Hello") == '<h1 class="text-3xl font-bold text-gray-900 dark:text-white mb-4 mt-8">Hello</h1>'


@pytest.mark.parametrize("level", range(1, 7))
def test_heading_levels(level: int) -> None:
    out = render(f"{'#' * level} Title")
    assert out.startswith(f"<h{level} ")
    assert out.endswith(f">Title</h{level}>")


def test_hash_without_space_is_not_a_heading() -> None:
    assert render("#hashtag") == f"{PARAGRAPH}#hashtag</p>"


def test_blockquote_with_bold() -> None:
    out = render("> **Note**")
    assert out.count("<blockquote") == 1
    assert '<strong class="font-bold">Note</strong>' in out
    assert out.index("<blockquote") < out.index("<strong")
    assert not out.startswith("<p")


def test_blockquote_lines_are_one_block() -> None:
    out = render("> first\n> second\n\nafter")
    assert out.count("<blockquote") == 1
    assert '<p class="mb-2 text-gray-700 dark:text-gray-300">first</p>' in out
    assert '<p class="mb-2 text-gray-700 dark:text-gray-300">second</p>' in out
    assert f"{PARAGRAPH}after</p>" in out


def test_blockquote_lists_are_all_bullets() -> None:
    out = render("> * one\n> 1. two")
    assert out.count('<li class="ml-4">') == 2
    assert '<ul class="list-disc list-inside mb-2 space-y-1">' in out
    assert "<ol" not in out


def test_blockquote_headings_use_muted_style() -> None:
    out = render("> ## Tip")
    assert '<h2 class="text-2xl font-bold text-gray-700 dark:text-gray-300 mb-2">Tip</h2>' in out


# ---------------------------------------------------------------------------
# Images and links
# ---------------------------------------------------------------------------

def test_image() -> None:
    out = render("![alt](http://x/y.png)")
    assert out.count("<img") == 1
    assert '<img src="http://x/y.png" alt="alt"' in out


def test_linked_image_is_one_anchor() -> None:
    out = render("[![alt](http://img)](http://link)")
    assert out.count("<a ") == 1
    assert out.count("<img") == 1
    assert '<a href="http://link" target="_blank" rel="noopener noreferrer"' in out
    assert '<img src="http://img" alt="alt"' in out
    assert out.index("<a ") < out.index("<img") < out.index("</a>")
    assert "](" not in out


def test_link_opens_new_context() -> None:
    out = render("See [docs](https://example.com).")
    assert '<a href="https://example.com" target="_blank" rel="noopener noreferrer"' in out
    assert ">docs</a>." in out


def test_inline_code() -> None:
    out = render("Use `msg.sender` here")
    assert '<code class="bg-gray-200 dark:bg-gray-700 px-2 py-1 rounded text-sm font-mono">msg.sender</code>' in out


# ---------------------------------------------------------------------------
# Lists
# ---------------------------------------------------------------------------

def test_unordered_list() -> None:
    assert render("* a\n* b") == f'{UL}<li class="mb-1">a</li>\n<li class="mb-1">b</li></ul>'


def test_dash_list() -> None:
    out = render("- a\n- b")
    assert out.count("<ul") == 1
    assert out.count("<li") == 2
    assert "<ol" not in out


def test_ordered_list() -> None:
    assert render("1. one\n2. two") == f'{OL}<li class="mb-1">one</li>\n<li class="mb-1">two</li></ol>'


def test_paragraph_before_list_is_tightened() -> None:
    out = render("Steps:\n* one")
    assert f'<p class="mb-2 text-gray-700 dark:text-gray-300 leading-relaxed">Steps:</p>{UL}' in out


# ---------------------------------------------------------------------------
# Emphasis, paragraphs, cleanup
# ---------------------------------------------------------------------------

def test_bold_and_italic() -> None:
    out = render("**bold** and *it*")
    assert out == (
        f"{PARAGRAPH}"
        '<strong class="font-bold text-gray-900 dark:text-white">bold</strong> and '
        '<em class="italic text-gray-800 dark:text-gray-200">it</em></p>'
    )


def test_blank_lines_collapse() -> None:
    assert render("a\n\n\nb") == f"{PARAGRAPH}a</p>\n{PARAGRAPH}b</p>"


def test_raw_html_passes_through() -> None:
    assert '<div class="note">hi</div>' in render('<div class="note">hi</div>')


def test_windows_line_endings() -> None:
    out = render("# Title\r\nText")
    assert "\r" not in out
    assert ">Title</h1>" in out
    assert f"{PARAGRAPH}Text</p>" in out


def test_empty_input() -> None:
    assert render("") == ""


@pytest.mark.parametrize(
    "markdown",
    ["*", "**", "```", "> ", "[", "![](", "__CODE_BLOCK_0__", "* \n1. \n> > >", "`", "****", "[a](b", "#"],
)
def test_render_is_total(markdown: str) -> None:
    assert isinstance(render(markdown), str)


def test_calls_share_no_state() -> None:
    markdown = "```\na\n```\n\n```\nb\n```"
    assert render(markdown) == render(markdown)
    assert "__CODE_BLOCK_" not in render(markdown)


def test_custom_highlighter_is_used() -> None:
    class Upper:
        def highlight(self, code: str) -> str:
            return code.upper()

    out = MarkdownRenderer(Upper()).render("```solidity\ncontract a\n```")
    assert "CONTRACT A" in out


# ---------------------------------------------------------------------------
# Code block accumulator and stages
# ---------------------------------------------------------------------------

def test_code_blocks_add_returns_new_value() -> None:
    empty = CodeBlocks()
    one, token = empty.add("x", None, "<pre>x</pre>")

    assert len(empty) == 0
    assert len(one) == 1
    assert token == placeholder(0) == "__CODE_BLOCK_0__"
    assert list(one) == [ExtractedBlock(index=0, raw_content="x", language=None, fragment="<pre>x</pre>")]


def test_extraction_stages_thread_the_accumulator() -> None:
    text, blocks = extract_solidity_fences("```solidity\nuint a;\n```\n```py\npass\n```", CodeBlocks())
    assert text.startswith("__CODE_BLOCK_0__")
    text, blocks = extract_generic_fences(text, blocks)

    assert text == "__CODE_BLOCK_0__\n__CODE_BLOCK_1__"
    assert [b.language for b in blocks] == ["solidity", "py"]
    assert [b.raw_content for b in blocks] == ["uint a;", "pass"]

    restored = restore_code_blocks(text, blocks)
    assert "__CODE_BLOCK_" not in restored
    assert restored.index("language-solidity") < restored.index("language-py")


def test_headings_longest_prefix_first() -> None:
    out = render_headings("###### six\n# one")
    assert out.startswith("<h6 ")
    assert "<h1 " in out
    assert "<h5" not in out


def test_ordered_stage_leaves_bullet_runs_alone() -> None:
    text = f'{UL}<li class="mb-1">a</li>\n<li class="mb-1">b</li></ul>'
    assert render_ordered_lists(text) == text

"""Fenced code blocks pulled out of a document while it is being rendered."""

from __future__ import annotations

from dataclasses import dataclass

PLACEHOLDER_TEMPLATE = "__CODE_BLOCK_{index}__"


def placeholder(index: int) -> str:
    return PLACEHOLDER_TEMPLATE.format(index=index)


@dataclass(frozen=True, slots=True)
class ExtractedBlock:
    index: int
    raw_content: str
    language: str | None
    fragment: str

    @property
    def placeholder(self) -> str:
        return placeholder(self.index)


@dataclass(frozen=True, slots=True)
class CodeBlocks:
    """Immutable accumulator of extracted blocks, in order of appearance."""

    blocks: tuple[ExtractedBlock, ...] = ()

    def add(self, raw_content: str, language: str | None, fragment: str) -> tuple[CodeBlocks, str]:
        block = ExtractedBlock(
            index=len(self.blocks),
            raw_content=raw_content,
            language=language,
            fragment=fragment,
        )
        return CodeBlocks(self.blocks + (block,)), block.placeholder

    def restore(self, text: str) -> str:
        # Newest first: an unterminated fence can swallow earlier placeholders
        # into its own content, so those must be resolved after it is inserted.
        for block in reversed(self.blocks):
            text = text.replace(block.placeholder, block.fragment, 1)
        return text

    def __len__(self) -> int:
        return len(self.blocks)

    def __iter__(self):
        return iter(self.blocks)

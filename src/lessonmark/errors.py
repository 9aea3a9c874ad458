"""Exceptions raised at the preview boundary.

Rendering itself never raises; these only come from the preview sink and from
callers enforcing a size limit before rendering.
"""

from __future__ import annotations


class LessonmarkError(Exception):
    """Base exception for lessonmark errors."""

    def __init__(self, message: str, suggestion: str | None = None, cause: Exception | None = None) -> None:
        self.message = message
        self.suggestion = suggestion
        self.cause = cause
        super().__init__(self.format_message())

    def format_message(self) -> str:
        parts = [self.message]
        if self.suggestion:
            parts.append(self.suggestion)
        if self.cause:
            parts.append(f"(caused by {type(self.cause).__name__}: {self.cause})")
        return " ".join(parts)


class PreviewError(LessonmarkError):
    """A preview surface could not show the document."""


class EmptyPreviewError(PreviewError):
    """There is no markdown to preview."""

    def __init__(self) -> None:
        super().__init__(
            "No content to preview.",
            suggestion="Please add some markdown content first.",
        )


class ContentTooLongError(LessonmarkError):
    """Markdown exceeds the caller's size limit."""

    def __init__(self, length: int, limit: int) -> None:
        self.length = length
        self.limit = limit
        super().__init__(
            f"Content is {length} characters long; the limit is {limit}.",
            suggestion="Shorten the lesson or raise --max-chars.",
        )

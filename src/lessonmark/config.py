"""Preview settings and caller-side limits."""

from __future__ import annotations

from dataclasses import dataclass

from lessonmark.errors import ContentTooLongError

DEFAULT_TITLE = "Markdown Preview"

# Limits the course editor applies to lesson bodies; the renderer itself has none.
LESSON_MAX_CHARS = 3_000
DEFAULT_MAX_CHARS = 10_000


@dataclass(slots=True)
class PreviewSettings:
    title: str = DEFAULT_TITLE
    module_number: int | None = None
    lesson_number: int | None = None

    @property
    def heading(self) -> str | None:
        """Synthesized ``Lesson M.L Title`` heading, when both numbers are known."""
        if self.module_number is None or self.lesson_number is None:
            return None
        return f"Lesson {self.module_number}.{self.lesson_number} {self.title}"


def check_length(markdown: str, limit: int | None = DEFAULT_MAX_CHARS) -> str:
    """Return *markdown* unchanged, or raise if it is longer than *limit*."""
    if limit is not None and len(markdown) > limit:
        raise ContentTooLongError(len(markdown), limit)
    return markdown

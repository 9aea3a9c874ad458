"""Wrap rendered markdown in a stand-alone, styled preview document."""

from __future__ import annotations

import logging
import tempfile
import webbrowser
from pathlib import Path
from typing import Protocol

from jinja2 import Environment, FileSystemLoader
from markupsafe import Markup

from lessonmark.config import PreviewSettings
from lessonmark.errors import EmptyPreviewError, PreviewError
from lessonmark.highlight.base import CATEGORY_CLASSES
from lessonmark.renderer.markdown_renderer import MarkdownRenderer

logger = logging.getLogger(__name__)


class PreviewSurface(Protocol):
    def open(self, document: str) -> None:  # pragma: no cover - structural protocol
        """Show *document*; raise PreviewError if that is not possible."""


class FileSurface:
    """Write the preview document to a file."""

    def __init__(self, path: Path) -> None:
        self.path = Path(path)

    def open(self, document: str) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(document, encoding="utf-8")
        except OSError as exc:
            raise PreviewError(f"Could not write preview to {self.path}.", cause=exc) from exc
        logger.info("Wrote preview to %s", self.path)


class BrowserSurface:
    """Open the preview document in a new browser window.

    The document is written to a ``lessonmark-*.html`` file in *directory*
    (the system temp directory by default). The file is left in place after
    :meth:`open` returns because the browser loads it asynchronously; nothing
    here removes it.
    """

    def __init__(self, directory: Path | None = None) -> None:
        self.directory = directory

    def open(self, document: str) -> None:
        try:
            with tempfile.NamedTemporaryFile(
                "w",
                suffix=".html",
                prefix="lessonmark-",
                dir=self.directory,
                delete=False,
                encoding="utf-8",
            ) as handle:
                handle.write(document)
                path = Path(handle.name)
        except OSError as exc:
            raise PreviewError("Could not write the preview file.", cause=exc) from exc

        if not webbrowser.open(path.resolve().as_uri(), new=1):
            raise PreviewError(
                "Could not open a browser window.",
                suggestion=f"Open {path} manually.",
            )
        logger.info("Opened preview %s", path)


class PreviewDocumentBuilder:
    """Render markdown into the preview page template."""

    def __init__(self, template_path: Path | None = None, renderer: MarkdownRenderer | None = None) -> None:
        if template_path is None:
            template_path = Path(__file__).resolve().parent.parent / "template" / "preview.html"

        loader = FileSystemLoader(str(template_path.parent))
        self._env = Environment(loader=loader, autoescape=True, trim_blocks=True, lstrip_blocks=True)
        self._template_name = template_path.name
        self._renderer = renderer or MarkdownRenderer()

    def build(self, markdown: str, settings: PreviewSettings | None = None) -> str:
        settings = settings or PreviewSettings()
        template = self._env.get_template(self._template_name)
        return template.render(
            page_title=settings.title,
            heading=settings.heading,
            # Rendered output is trusted and inserted as-is.
            content=Markup(self._renderer.render(markdown)),
            category_selectors=_category_selectors(),
        )


def _category_selectors() -> dict[str, str]:
    """Map each highlight category to the CSS selector the stylesheet colours."""
    return {category.value: "." + classes.split()[0] for category, classes in CATEGORY_CLASSES.items()}


def build_preview_document(markdown: str, settings: PreviewSettings | None = None) -> str:
    return PreviewDocumentBuilder().build(markdown, settings)


def open_preview(document: str, surface: PreviewSurface) -> None:
    """Hand a finished document to *surface*."""
    surface.open(document)


def preview_markdown(
    markdown: str,
    surface: PreviewSurface,
    settings: PreviewSettings | None = None,
    *,
    builder: PreviewDocumentBuilder | None = None,
) -> str:
    """Build the preview document for *markdown* and show it on *surface*.

    Empty or whitespace-only input is declined with :class:`EmptyPreviewError`
    and the surface is never touched. Returns the document that was shown.
    """
    if not markdown.strip():
        raise EmptyPreviewError()

    document = (builder or PreviewDocumentBuilder()).build(markdown, settings)
    open_preview(document, surface)
    return document

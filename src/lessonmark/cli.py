"""lessonmark CLI entrypoint."""

from __future__ import annotations

import logging
from pathlib import Path

import click

from lessonmark.config import DEFAULT_MAX_CHARS, DEFAULT_TITLE, PreviewSettings, check_length
from lessonmark.errors import EmptyPreviewError, LessonmarkError
from lessonmark.renderer.markdown_renderer import render
from lessonmark.renderer.preview import BrowserSurface, FileSurface, build_preview_document, preview_markdown


@click.command(context_settings={"help_option_names": ["-h", "--help"], "auto_envvar_prefix": "LESSONMARK"})
@click.argument(
    "input_path",
    type=click.Path(exists=True, dir_okay=False, allow_dash=True, path_type=Path),
)
@click.option("--output", "-o", type=click.Path(dir_okay=False, path_type=Path), default=None, help="Output HTML path")
@click.option("--fragment", is_flag=True, help="Emit only the rendered HTML fragment, not a full document")
@click.option("--open", "open_browser", is_flag=True, help="Open the preview document in a browser window")
@click.option("--title", type=str, default=DEFAULT_TITLE, show_default=True, help="Lesson title")
@click.option("--module-number", type=click.IntRange(min=0), default=None, help="Module number for the title heading")
@click.option("--lesson-number", type=click.IntRange(min=0), default=None, help="Lesson number for the title heading")
@click.option(
    "--max-chars",
    type=click.IntRange(min=1),
    default=DEFAULT_MAX_CHARS,
    show_default=True,
    help="Reject input longer than this many characters",
)
@click.option("--verbose", "-v", is_flag=True, help="Log progress to stderr")
def main(
    input_path: Path,
    output: Path | None,
    fragment: bool,
    open_browser: bool,
    title: str,
    module_number: int | None,
    lesson_number: int | None,
    max_chars: int,
    verbose: bool,
) -> None:
    """Render lesson markdown into preview HTML."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    markdown = _read_markdown(input_path)
    settings = PreviewSettings(title=title, module_number=module_number, lesson_number=lesson_number)

    try:
        check_length(markdown, max_chars)

        if fragment:
            _emit(render(markdown), output)
            return

        if open_browser:
            preview_markdown(markdown, BrowserSurface(), settings)
        if output is not None:
            preview_markdown(markdown, FileSurface(output), settings)
            click.echo(f"Rendered: {output}")
        elif not open_browser:
            if not markdown.strip():
                raise EmptyPreviewError()
            click.echo(build_preview_document(markdown, settings))
    except LessonmarkError as exc:
        raise click.ClickException(exc.format_message()) from exc


def _read_markdown(input_path: Path) -> str:
    if str(input_path) == "-":
        return click.get_text_stream("stdin", encoding="utf-8").read()
    return input_path.read_text(encoding="utf-8")


def _emit(html: str, output: Path | None) -> None:
    if output is None:
        click.echo(html)
        return
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(html, encoding="utf-8")
    click.echo(f"Rendered: {output}")


if __name__ == "__main__":  # pragma: no cover
    main()

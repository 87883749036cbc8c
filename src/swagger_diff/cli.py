"""CLI entry point for swagger-diff."""

import sys
from pathlib import Path

import click

from swagger_diff.config import get_settings
from swagger_diff.diff.changes import ChangeSet
from swagger_diff.diff.document import DocumentDiff
from swagger_diff.errors import SwaggerDiffError
from swagger_diff.log import configure_logging
from swagger_diff.parser.swagger import load_document
from swagger_diff.render.html import DEFAULT_CSS, DEFAULT_TITLE, render_html
from swagger_diff.render.markdown import render_markdown
from swagger_diff.summary import ChangelogSummarizer


def _render(change_set: ChangeSet, fmt: str, title: str = DEFAULT_TITLE, css: str = DEFAULT_CSS) -> str:
    """Render a change set in the requested output format."""
    if fmt == "json":
        return change_set.model_dump_json(indent=2) + "\n"
    if fmt == "html":
        return render_html(change_set, title=title, css_url=css)
    return render_markdown(change_set)


@click.group()
def main():
    """Swagger Diff — compare two versions of a Swagger/OpenAPI description."""
    pass


@main.command()
@click.argument("old_path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.argument("new_path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("-o", "--output", default=None, type=click.Path(dir_okay=False, path_type=Path), help="Write the report to this file instead of stdout.")
@click.option("--format", "fmt", default="markdown", type=click.Choice(["markdown", "json", "html"]), help="Report format.")
@click.option("--title", default=DEFAULT_TITLE, show_default=True, help="Page title (html format only).")
@click.option("--css", default=DEFAULT_CSS, show_default=True, help="Stylesheet URL linked from the page (html format only).")
@click.option("--success-status", default=None, help="Response code whose schema is compared (default from settings).")
@click.option("--summarize", is_flag=True, help="Append an LLM-written summary (markdown format only).")
@click.option("--model", default=None, help="LLM model to use for --summarize.")
@click.option("--exit-code", is_flag=True, help="Exit with status 1 when the documents differ.")
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging on stderr.")
def diff(
    old_path: Path,
    new_path: Path,
    output: Path | None,
    fmt: str,
    title: str,
    css: str,
    success_status: str | None,
    summarize: bool,
    model: str | None,
    exit_code: bool,
    verbose: bool,
):
    """Compare OLD_PATH against NEW_PATH and report added, removed and changed endpoints."""
    if summarize and fmt != "markdown":
        raise click.UsageError("--summarize requires --format markdown")

    settings = get_settings()
    configure_logging("debug" if verbose else settings.log_level, settings.log_format)

    try:
        old_doc = load_document(old_path)
        new_doc = load_document(new_path)
    except SwaggerDiffError as e:
        raise click.ClickException(str(e)) from e

    engine = DocumentDiff(success_status=success_status or settings.success_status)
    change_set = engine.diff(old_doc, new_doc)

    report = _render(change_set, fmt, title, css)
    if summarize:
        summary = ChangelogSummarizer(model=model).summarize(change_set)
        report = f"{report}\n### Summary\n---\n{summary}\n"

    if output is None:
        click.echo(report, nl=False)
    else:
        output.parent.mkdir(parents=True, exist_ok=True)
        output.write_text(report, encoding="utf-8")
        click.echo(f"Report saved to {output}", err=True)

    if exit_code and not change_set.is_empty:
        sys.exit(1)

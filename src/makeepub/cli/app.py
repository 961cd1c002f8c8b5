"""Main Typer application for the makeepub CLI."""

import time
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from makeepub import __version__
from makeepub.assembler import BuildReport, assemble_book
from makeepub.cli.utils import (
    configure_logging,
    get_console,
    handle_errors,
    set_context,
)
from makeepub.config.settings import get_settings
from makeepub.sources import open_source

USAGE = "Usage:\tmakeepub folder [output]\n\tmakeepub zipfile [output]"

app = typer.Typer(
    name="makeepub",
    help="Build an EPUB book from a folder or zip file of HTML pages.",
    add_completion=False,
    rich_markup_mode="rich",
)


def version_callback(value: bool):
    """Print version and exit."""
    if value:
        Console(stderr=True).print(f"makeepub version {__version__}")
        raise typer.Exit()


def print_outline(console: Console, report: BuildReport) -> None:
    """Show the chapters that would go into the book."""
    table = Table(title=f"Chapters (split depth {report.depth})")
    table.add_column("#", justify="right", style="dim")
    table.add_column("Depth", justify="right")
    table.add_column("Title")
    table.add_column("Size", justify="right")

    for number, chapter in enumerate(report.chapters, 1):
        indent = "  " * (chapter.depth - 1)
        title = escape(chapter.title) or "[dim](untitled)[/dim]"
        table.add_row(str(number), str(chapter.depth), f"{indent}{title}", f"{len(chapter.content):,} B")

    console.print(table)
    console.print(f"[dim]{len(report.files)} supporting files[/dim]")


@handle_errors
def build(source: Path, output: Optional[Path], dry_run: bool) -> None:
    """Run the build and report warnings."""
    console = get_console()
    settings = get_settings()
    start = time.perf_counter()

    with open_source(source) as book_source:
        report = assemble_book(
            book_source,
            output_override=output,
            settings=settings,
            dry_run=dry_run,
        )

    for diagnostic in report.diagnostics:
        console.print(f"[yellow]Warning:[/yellow] {escape(str(diagnostic))}")

    if dry_run:
        print_outline(console, report)
    elif report.saved:
        console.print(f"[green]Saved:[/green] {report.output_path}")

    elapsed = time.perf_counter() - start
    console.print(f"Done, time used: {elapsed:.3f}s")


@app.command()
def main(
    source: Optional[Path] = typer.Argument(
        None,
        help="Book folder or zip file holding book.ini, book.html and cover.html",
        show_default=False,
    ),
    output: Optional[Path] = typer.Argument(
        None,
        help="Output .epub path (overrides 'path' in the [output] section of book.ini)",
        show_default=False,
    ),
    dry_run: bool = typer.Option(
        False,
        "--dry-run",
        "-n",
        help="Show the chapter outline without writing the book.",
    ),
    version: Optional[bool] = typer.Option(
        None,
        "--version",
        "-V",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Show debug logging and full tracebacks.",
    ),
    quiet: bool = typer.Option(
        False,
        "--quiet",
        "-q",
        help="Suppress status output; still shows errors.",
    ),
    silent: bool = typer.Option(
        False,
        "--silent",
        help="Completely silent (exit code only).",
    ),
):
    """Build an EPUB book from a folder or zip file.

    Examples:

        makeepub mybook/

        makeepub mybook.zip out/mybook.epub
    """
    quiet_level = 2 if silent else 1 if quiet else 0
    set_context(verbose=verbose, quiet=quiet_level)
    configure_logging(get_settings().log_level)

    if source is None:
        if not silent:
            Console(stderr=True).print(USAGE, markup=False, highlight=False)
        raise typer.Exit(1)

    build(source, output, dry_run)


if __name__ == "__main__":
    app()

"""Shared utilities for the CLI."""

import functools
import io
import logging
from collections.abc import Callable
from typing import Any, TypeVar

import typer
from rich.console import Console
from rich.logging import RichHandler

from makeepub.assembler import STAGE_FAILURES
from makeepub.exceptions import MakeEpubError

# Type variable for decorators
F = TypeVar("F", bound=Callable[..., Any])

# Context storage for flags
_context: dict[str, Any] = {"verbose": False, "quiet": 0}


def set_context(verbose: bool = False, quiet: int = 0) -> None:
    """Set global context values."""
    _context["verbose"] = verbose
    _context["quiet"] = quiet


def get_context_value(key: str, default: Any = None) -> Any:
    """Get a value from the context."""
    return _context.get(key, default)


def get_console() -> Console:
    """Get a Console instance respecting quiet mode.

    Returns a null console when quiet mode is enabled.
    """
    if is_quiet():
        return Console(file=io.StringIO(), stderr=True)
    return Console(stderr=True)


def get_error_console() -> Console:
    """Console for errors: silenced only by --silent."""
    if is_silent():
        return Console(file=io.StringIO(), stderr=True)
    return Console(stderr=True)


def is_quiet() -> bool:
    """Check if quiet mode is enabled (-q or --silent)."""
    return bool(get_context_value("quiet", 0) >= 1)


def is_silent() -> bool:
    """Check if silent mode is enabled (exit code only)."""
    return bool(get_context_value("quiet", 0) >= 2)


def is_verbose() -> bool:
    """Check if verbose mode is enabled (-v)."""
    return bool(get_context_value("verbose", False))


def configure_logging(level: str = "WARNING") -> None:
    """Route makeepub log records through rich on stderr.

    --verbose lowers the level to DEBUG; --silent mutes logging entirely.
    """
    logger = logging.getLogger("makeepub")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)

    if is_silent():
        logger.addHandler(logging.NullHandler())
        return

    handler = RichHandler(console=Console(stderr=True), show_path=False, show_time=False)
    handler.setFormatter(logging.Formatter("%(message)s"))
    logger.addHandler(handler)
    logger.setLevel(logging.DEBUG if is_verbose() else level.upper())


def render_error(console: Console, e: MakeEpubError) -> None:
    """Print an error with the failing stage, details and hint."""
    if e.stage is not None:
        console.print(f"[red]Error:[/red] {STAGE_FAILURES[e.stage]}.")
        console.print(f"[dim]{e.message}[/dim]")
    else:
        console.print(f"[red]Error:[/red] {e.message}")
    if e.details:
        console.print(f"[dim]{e.details}[/dim]")
    if e.hint:
        console.print(f"[dim]Hint: {e.hint}[/dim]")


def handle_errors(func: F) -> F:
    """Decorator for consistent CLI error handling.

    Catches makeepub errors and displays user-friendly error messages
    instead of raw Python tracebacks. Respects --verbose and --silent.
    """

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        err_console = get_error_console()
        verbose = is_verbose()

        try:
            return func(*args, **kwargs)
        except MakeEpubError as e:
            if verbose:
                err_console.print_exception()
            render_error(err_console, e)
            raise typer.Exit(e.exit_code)
        except PermissionError as e:
            if verbose:
                err_console.print_exception()
            else:
                filename = getattr(e, "filename", None) or str(e)
                err_console.print(f"[red]Permission denied:[/red] {filename}")
            raise typer.Exit(1)
        except KeyboardInterrupt:
            err_console.print("\n[yellow]Interrupted[/yellow]")
            raise typer.Exit(130)
        except typer.Exit:
            # Re-raise typer exits (already handled)
            raise
        except Exception as e:
            if verbose:
                err_console.print_exception()
            else:
                err_console.print(f"[red]Unexpected error:[/red] {type(e).__name__}: {e}")
            raise typer.Exit(1)

    return wrapper  # type: ignore[return-value]

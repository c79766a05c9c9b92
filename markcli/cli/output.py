"""Terminal output handling using Rich library.

This module provides the OutputHandler class for all CLI terminal output.
Markdown results go to stdout, rendered with rich's Markdown renderer or
printed raw; status messages and spinners go to stderr so piped output
stays clean.
"""

import logging
from contextlib import contextmanager
from typing import Iterator

from rich.console import Console
from rich.live import Live
from rich.markdown import Markdown
from rich.markup import escape
from rich.spinner import Spinner

logger = logging.getLogger(__name__)


class OutputHandler:
    """Handles all terminal output using Rich library.

    Attributes:
        verbosity: Verbosity level (0=normal, 2=debug)
        raw: Print Markdown source instead of rendering it
        console: Rich Console for results (stdout)
        err_console: Rich Console for messages and spinners (stderr)

    Example:
        >>> handler = OutputHandler(no_color=False)
        >>> with handler.spinner("Fetching page..."):
        ...     markdown = fetch()
        >>> handler.markdown(markdown)
    """

    def __init__(self, verbosity: int = 0, no_color: bool = False, raw: bool = False):
        """Initialize output handler.

        Args:
            verbosity: Verbosity level (0=normal, 2=debug)
            no_color: Disable color output if True
            raw: Print Markdown source instead of rendering it
        """
        self.verbosity = verbosity
        self.raw = raw
        self.console = Console(
            no_color=no_color,
            highlight=False,
        )
        self.err_console = Console(
            stderr=True,
            no_color=no_color,
            highlight=False,
        )

    def success(self, message: str) -> None:
        """Display success message in green."""
        self.err_console.print(f"[green]✓[/green] {escape(message)}")

    def error(self, message: str) -> None:
        """Display error message in red."""
        self.err_console.print(f"[red]✗[/red] {escape(message)}", style="red")

    def warning(self, message: str) -> None:
        """Display warning message in yellow."""
        self.err_console.print(f"[yellow]⚠[/yellow] {escape(message)}", style="yellow")

    def debug(self, message: str) -> None:
        """Display debug message (only if verbosity >= 2)."""
        if self.verbosity >= 2:
            self.err_console.print(f"[dim]{escape(message)}[/dim]")

    def print(self, message: str) -> None:
        """Display plain text on stdout without markup processing."""
        self.console.print(message, markup=False)

    def markdown(self, text: str) -> None:
        """Display Markdown, rendered unless raw output was requested.

        Falls back to the raw text if rendering fails.

        Args:
            text: Markdown source
        """
        if self.raw:
            self.console.print(text, markup=False, emoji=False, soft_wrap=True)
            return

        try:
            self.console.print(Markdown(text))
        except Exception as e:
            logger.debug(f"Markdown rendering failed, printing raw output: {e}")
            self.console.print(text, markup=False, emoji=False, soft_wrap=True)

    @contextmanager
    def spinner(self, message: str) -> Iterator[None]:
        """Display a transient spinner on stderr while work runs.

        Nothing is drawn when stderr is not a terminal.

        Args:
            message: Message to display with spinner
        """
        if not self.err_console.is_terminal:
            yield
            return

        spinner = Spinner("dots", text=message)
        with Live(spinner, console=self.err_console, refresh_per_second=10, transient=True):
            yield

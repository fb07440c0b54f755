"""Terminal output handling using Rich library.

This module provides the OutputHandler class for all CLI terminal output
except the converted HTML itself. Messages go to stderr so that the HTML on
stdout can be piped. Supports verbosity levels and --no-color flag.
"""

import logging
from contextlib import contextmanager
from typing import Iterator

from rich.console import Console
from rich.live import Live
from rich.markup import escape
from rich.panel import Panel
from rich.spinner import Spinner

from legacy_cleaner.models import ProcessingStats
from legacy_cleaner.normalizer import TextStats


class OutputHandler:
    """Handles all terminal output using Rich library.

    Attributes:
        verbosity: Verbosity level (0=summary, 1=info, 2=debug)
        console: Rich Console instance writing to stderr
        logger: Python logger for verbose output

    Example:
        >>> handler = OutputHandler(verbosity=1, no_color=False)
        >>> handler.success("Converted")
        >>> with handler.spinner("Cleaning..."):
        ...     pass
    """

    def __init__(self, verbosity: int = 0, no_color: bool = False):
        """Initialize output handler.

        Args:
            verbosity: Verbosity level (0=summary, 1=info, 2=debug)
            no_color: Disable color output if True
        """
        self.verbosity = verbosity
        self.console = Console(
            stderr=True,
            no_color=no_color,
            highlight=False,
        )
        self.logger = self._setup_logger()

    def _setup_logger(self) -> logging.Logger:
        logger = logging.getLogger("legacy-clean")

        if self.verbosity >= 2:
            logger.setLevel(logging.DEBUG)
        elif self.verbosity >= 1:
            logger.setLevel(logging.INFO)
        else:
            logger.setLevel(logging.WARNING)

        logger.handlers.clear()
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter("%(levelname)s: %(message)s"))
        logger.addHandler(handler)

        return logger

    def success(self, message: str) -> None:
        self.console.print(f"[green]✓[/green] {escape(message)}")

    def error(self, message: str) -> None:
        self.console.print(f"[red]✗[/red] {escape(message)}", style="red")

    def warning(self, message: str) -> None:
        self.console.print(f"[yellow]⚠[/yellow] {escape(message)}", style="yellow")

    def info(self, message: str) -> None:
        """Display info message (only if verbosity >= 1)."""
        if self.verbosity >= 1:
            self.console.print(escape(message))

    def debug(self, message: str) -> None:
        """Display debug message (only if verbosity >= 2)."""
        if self.verbosity >= 2:
            self.console.print(f"[dim]{escape(message)}[/dim]")

    @contextmanager
    def spinner(self, message: str) -> Iterator[None]:
        """Display spinner while a (possibly slow) conversion runs."""
        spinner = Spinner("dots", text=message)
        with Live(spinner, console=self.console, refresh_per_second=10, transient=True):
            yield

    def print_stats(self, stats: ProcessingStats, text_stats: TextStats) -> None:
        """Display conversion statistics.

        Args:
            stats: Engine processing statistics
            text_stats: Word/character counts of the output
        """
        self.console.print("\n[bold]Conversion Summary:[/bold]")
        self.console.print(f"  Input length:       {stats.original_length} chars")
        self.console.print(f"  Output length:      {stats.final_length} chars")
        self.console.print(f"  Tags removed:       {stats.tags_removed}")
        self.console.print(f"  Attributes removed: {stats.attributes_removed}")
        self.console.print(
            f"  Code:               {text_stats.words} words | {text_stats.chars} chars"
        )
        self.console.print(
            f"  Visible text:       {text_stats.visible_words} words | "
            f"{text_stats.visible_chars} chars"
        )

        if stats.original_length and stats.final_length < stats.original_length:
            saved = 100 * (stats.original_length - stats.final_length) / stats.original_length
            self.console.print(f"\n[green]Output is {saved:.0f}% smaller than input[/green]")

    def print_preview(self, text: str) -> None:
        """Display the visible text of the converted output in a panel."""
        body = escape(text) if text else "[dim]Nothing to preview[/dim]"
        self.console.print(Panel(body, title="Preview", expand=False))

"""Main CLI entry point for the legacy-clean command.

This module provides the Typer application that serves as the entry point
for the legacy-clean command-line tool. It reads markup from a file or
stdin, converts it with the rule-based engine (or the optional generative
path) and writes the legacy HTML to stdout or a file.
"""

import dataclasses
import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import Optional, Union

import typer

from legacy_cleaner import __version__
from legacy_cleaner.ai_client import (
    AIAccessError,
    AIRequestError,
    Authenticator,
    GeminiCleaner,
    MissingAPIKeyError,
)
from legacy_cleaner.cli.config import ConfigLoader
from legacy_cleaner.cli.errors import CLIError
from legacy_cleaner.cli.models import CLISettings, Engine, ExitCode
from legacy_cleaner.cli.output import OutputHandler
from legacy_cleaner.models import (
    ConversionResult,
    ConversionSuccess,
    ParagraphMode,
    ProcessingStats,
)
from legacy_cleaner.normalizer import clean_html, sanitize_for_preview, summarize, visible_text

app = typer.Typer(
    name="legacy-clean",
    help="""Convert pasted rich text into minimal legacy HTML.

QUICK START:
  legacy-clean page.html                    # Convert a file, print to stdout
  pbpaste | legacy-clean                    # Convert stdin
  legacy-clean page.html -o clean.html      # Write to a file
  legacy-clean page.html --line-breaks      # <br><br> instead of <p>
  legacy-clean page.html --stats --preview  # Show counts and visible text""",
    add_completion=False,
    rich_markup_mode=None,
    no_args_is_help=False,
)

logger = logging.getLogger(__name__)


def _configure_logging(verbosity: int, logdir: Optional[str] = None) -> None:
    """Configure logging based on verbosity level.

    Configures only the 'legacy_cleaner' namespace logger to avoid affecting
    third-party libraries. The root logger is left unchanged.

    Args:
        verbosity: Verbosity level (0=WARNING, 1=INFO, 2=DEBUG)
        logdir: Optional directory for log files (creates timestamped log file)
    """
    if verbosity == 0:
        level = logging.WARNING
    elif verbosity == 1:
        level = logging.INFO
    else:
        level = logging.DEBUG

    app_logger = logging.getLogger("legacy_cleaner")
    app_logger.setLevel(level)

    log_format = "%(asctime)s [%(levelname)8s] %(message)s"
    date_format = "%Y-%m-%d %H:%M:%S"
    formatter = logging.Formatter(log_format, datefmt=date_format)

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)
    app_logger.addHandler(console_handler)

    if logdir:
        log_path = Path(logdir)
        log_path.mkdir(parents=True, exist_ok=True)

        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        log_file = log_path / f"legacy-clean_{timestamp}.log"

        file_format = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
        file_formatter = logging.Formatter(file_format, datefmt=date_format)
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(level)
        file_handler.setFormatter(file_formatter)
        app_logger.addHandler(file_handler)

        logger.info(f"Logging to file: {log_file}")


def _read_input(source: str) -> Union[str, bytes]:
    """Read raw markup from a file path, or from stdin when source is '-'.

    File contents are returned as bytes so the engine decides how to decode
    them.
    """
    if source == "-":
        return sys.stdin.read()
    return Path(source).read_bytes()


def _apply_overrides(
    settings: CLISettings,
    paragraphs: Optional[bool],
    no_aggressive_whitespace: bool,
    keep_divs_inline: bool,
    flatten_lists: bool,
    engine: Optional[Engine],
) -> CLISettings:
    """Layer command line flags over the settings file values."""
    overrides = {}
    if paragraphs is not None:
        overrides['paragraph_mode'] = (
            ParagraphMode.PARAGRAPHS if paragraphs else ParagraphMode.LINE_BREAKS
        )
    if no_aggressive_whitespace:
        overrides['aggressive_whitespace'] = False
    if keep_divs_inline:
        overrides['convert_divs_to_paragraphs'] = False
    if flatten_lists:
        overrides['flatten_lists'] = True

    conversion = dataclasses.replace(settings.conversion, **overrides)
    return dataclasses.replace(
        settings,
        conversion=conversion,
        engine=engine or settings.engine,
    )


def _run_ai(raw: Union[str, bytes], settings: CLISettings, output: OutputHandler) -> ConversionResult:
    """Run the generative path, mapping client errors to exit codes."""
    markup = raw.decode('utf-8', errors='replace') if isinstance(raw, bytes) else raw
    authenticator = Authenticator()

    try:
        authenticator.get_api_key()
    except MissingAPIKeyError as e:
        logger.error(f"Authentication failed: {e}")
        output.error(str(e))
        raise typer.Exit(ExitCode.AUTH_ERROR)

    output.warning("Generative output is not verified against the legacy tag set")
    cleaner = GeminiCleaner(authenticator, settings.ai)
    try:
        with output.spinner(f"Cleaning with {settings.ai.model}..."):
            html = cleaner.clean(markup, settings.conversion)
    except (AIRequestError, AIAccessError) as e:
        logger.error(f"Generative cleanup failed: {e}")
        output.error(str(e))
        raise typer.Exit(ExitCode.NETWORK_ERROR)

    return ConversionSuccess(
        html=html,
        stats=ProcessingStats(original_length=len(markup), final_length=len(html)),
    )


def _write_output(html: str, output_file: Optional[str], output: OutputHandler) -> None:
    if output_file is None:
        typer.echo(html)
        return

    try:
        Path(output_file).write_text(html + "\n" if html else "", encoding="utf-8")
    except OSError as e:
        logger.error(f"Failed to write {output_file}: {e}")
        output.error(f"Failed to write {output_file}: {e}")
        raise typer.Exit(ExitCode.GENERAL_ERROR)
    output.success(f"Wrote {len(html)} chars to {output_file}")


@app.command()
def main_command(
    input_file: str = typer.Argument(
        "-",
        help="Markup file to convert ('-' reads stdin)",
        metavar="INPUT",
    ),
    output_file: Optional[str] = typer.Option(
        None,
        "--output",
        "-o",
        help="Write the converted HTML to FILE instead of stdout",
        metavar="FILE",
    ),
    config_file: Optional[str] = typer.Option(
        None,
        "--config",
        "-c",
        help=f"Settings file (default: {ConfigLoader.DEFAULT_CONFIG_FILE} if present)",
        metavar="FILE",
    ),
    paragraphs: Optional[bool] = typer.Option(
        None,
        "--paragraphs/--line-breaks",
        help="Separate blocks with <p> (default) or with <br><br>",
    ),
    no_aggressive_whitespace: bool = typer.Option(
        False,
        "--no-aggressive-whitespace",
        help="Keep runs of whitespace instead of collapsing them",
    ),
    keep_divs_inline: bool = typer.Option(
        False,
        "--keep-divs-inline",
        help="Turn <div> into a line break instead of a paragraph",
    ),
    flatten_lists: bool = typer.Option(
        False,
        "--flatten-lists",
        help="Render lists as bulleted/numbered lines instead of <ul>/<ol>",
    ),
    engine: Optional[Engine] = typer.Option(
        None,
        "--engine",
        help="Conversion engine: standard (rule-based) or ai (Gemini)",
        case_sensitive=False,
    ),
    stats: bool = typer.Option(
        False,
        "--stats",
        help="Show processing and text statistics",
    ),
    preview: bool = typer.Option(
        False,
        "--preview",
        help="Show the visible text of the result",
    ),
    logdir: Optional[str] = typer.Option(
        None,
        "--logdir",
        help="Directory for log files (creates timestamped log file)",
    ),
    verbosity: int = typer.Option(
        0,
        "--verbosity",
        "-v",
        help="Verbosity level: 0=summary, 1=info, 2=debug",
    ),
    no_color: bool = typer.Option(
        False,
        "--no-color",
        help="Disable colored output",
    ),
    version: bool = typer.Option(
        False,
        "--version",
        "-V",
        help="Show version and exit",
    ),
) -> None:
    """Convert pasted rich text into minimal legacy HTML.

    \b
    The output uses only b, i, u, sub, sup, p, br, ul, ol and li. Scripts,
    styles, comments and attributes are removed; styled spans become the
    matching formatting tags.

    \b
    EXAMPLES:
      legacy-clean page.html
      legacy-clean page.html --line-breaks --flatten-lists
      legacy-clean page.html --engine ai
    """
    if version:
        typer.echo(f"legacy-clean version {__version__}")
        raise typer.Exit()

    _configure_logging(verbosity, logdir)
    output = OutputHandler(verbosity=verbosity, no_color=no_color)

    try:
        settings = ConfigLoader.load(config_file)
    except CLIError as e:
        logger.error(f"Failed to load settings: {e}")
        output.error(str(e))
        raise typer.Exit(ExitCode.GENERAL_ERROR)

    settings = _apply_overrides(
        settings, paragraphs, no_aggressive_whitespace, keep_divs_inline, flatten_lists, engine
    )
    output.debug(f"Settings: {settings}")

    try:
        raw = _read_input(input_file)
    except OSError as e:
        logger.error(f"Failed to read {input_file}: {e}")
        output.error(f"Failed to read {input_file}: {e}")
        raise typer.Exit(ExitCode.GENERAL_ERROR)

    output.info(f"Converting {'stdin' if input_file == '-' else input_file} ({settings.engine.value} engine)")

    if settings.engine is Engine.AI:
        result = _run_ai(raw, settings, output)
    else:
        result = clean_html(raw, settings.conversion)

    if not result.ok:
        output.error(result.message)
        raise typer.Exit(ExitCode.CONVERSION_FAILED)

    _write_output(result.html, output_file, output)

    if stats:
        output.print_stats(result.stats, summarize(result.html))
    if preview:
        output.print_preview(visible_text(sanitize_for_preview(result.html)))

    raise typer.Exit(ExitCode.SUCCESS)


def main() -> None:
    """Main entry point for the CLI application.

    This function is called when the module is executed directly or
    when the console script is invoked.
    """
    app()


# Allow running as: python -m legacy_cleaner.cli.main
if __name__ == "__main__":
    main()

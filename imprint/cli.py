"""
Imprint CLI -- Structural Class Finder
=======================================

Click-based command-line interface.  Loads class patterns from a TOML
pattern file, searches a JAR archive for them, and prints the matched
classes as a table or as JSON.

Usage::

    # One match per pattern (default), table output
    imprint patterns.toml app.jar

    # Every match, JSON to stdout
    imprint patterns.toml app.jar --all --json

    # Save a JSON report
    imprint patterns.toml app.jar --output matches.json

References:
    - Click documentation: https://click.palletsprojects.com/
"""

from __future__ import annotations

import sys
import tomllib

import click
from rich.markup import escape

from shared.config import ImprintConfig
from shared.console import ImprintConsole
from shared.logger import ImprintLogger

from imprint.core.engine import ImprintEngine
from imprint.core.errors import ImprintError
from imprint.output.console import ImprintConsoleOutput
from imprint.output.report import ImprintReportGenerator


@click.command("imprint")
@click.argument("patterns_path", metavar="PATTERNS", type=click.Path(exists=True, dir_okay=False))
@click.argument("archive_path", metavar="JAR", type=click.Path(exists=True, dir_okay=False))
@click.option(
    "--exact", "exact_flag",
    is_flag=True,
    default=False,
    help="Require exactly one match per pattern.",
)
@click.option(
    "--all", "all_flag",
    is_flag=True,
    default=False,
    help="Report every match; patterns may match zero or many classes.",
)
@click.option(
    "--output", "-o",
    "output_path",
    type=click.Path(dir_okay=False),
    default=None,
    help="Write a JSON report to this path.",
)
@click.option(
    "--json", "json_output",
    is_flag=True,
    default=False,
    help="Print the report as JSON to stdout.",
)
@click.option(
    "--config", "-c",
    "config_path",
    type=click.Path(dir_okay=False),
    default=None,
    help="Configuration file (default: imprint.toml in the project root).",
)
@click.option(
    "--verbose", "-v",
    is_flag=True,
    default=False,
    help="Enable debug logging.",
)
def imprint_cli(
    patterns_path: str,
    archive_path: str,
    exact_flag: bool,
    all_flag: bool,
    output_path: str | None,
    json_output: bool,
    config_path: str | None,
    verbose: bool,
) -> None:
    """Imprint -- find obfuscated classes by their structure.

    PATTERNS is a TOML file of [[class]] patterns; JAR is the archive
    to search.

    Examples:

    \b
        imprint patterns.toml client.jar
        imprint patterns.toml client.jar --all --json
    """
    console = ImprintConsole()
    if exact_flag and all_flag:
        raise click.UsageError("--exact and --all are mutually exclusive.")
    exact = True if exact_flag else False if all_flag else None

    try:
        config = ImprintConfig.load(config_path)
    except (OSError, tomllib.TOMLDecodeError) as exc:
        console.error(f"Cannot load configuration: {escape(str(exc))}")
        sys.exit(1)

    settings = config.global_settings
    logger = ImprintLogger(
        "cli",
        log_level="DEBUG" if verbose or settings.debug else settings.log_level,
        log_file=settings.log_file,
        json_logs=settings.log_json,
    )
    engine = ImprintEngine(config=config, logger=logger)

    try:
        patterns = engine.load_patterns(patterns_path)
        report = engine.search(archive_path, patterns, exact=exact)
    except KeyboardInterrupt:
        console.warning("Search interrupted by user.")
        sys.exit(130)
    except (ImprintError, OSError) as exc:
        console.error(escape(str(exc)))
        sys.exit(1)

    report_gen = ImprintReportGenerator()
    as_json = json_output or config.search.output_format == "json"
    if as_json:
        click.echo(report_gen.to_json(report))
    else:
        ImprintConsoleOutput(console=console).display(report)

    if output_path:
        saved = report_gen.generate_json(report, output_path)
        if not as_json:
            console.success(f"JSON report saved: {escape(str(saved))}")


def main() -> None:
    """Entry point for ``python -m imprint`` and the ``imprint`` script."""
    imprint_cli()


if __name__ == "__main__":
    main()

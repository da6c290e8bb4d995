"""sqllint CLI application -- Typer-based interface to the lint engine.

Provides commands for linting SQL files and listing the built-in rules.
Rendered diagnostics go to *stdout* so they can be piped; status messages
and decoration go to *stderr* via Rich.
"""

from __future__ import annotations

import json
import logging
import sys
import time
from pathlib import Path

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape

from lint_cli.display import display_parse_tree, display_rules, display_summary
from lint_engine.checks import create_default_engine
from lint_engine.checks.builtin import all_checks
from lint_engine.config import ConfigError, LintSettings, load_settings
from lint_engine.diagnostics import DiagnosticReport
from lint_engine.sql_toolkit import ParseUnit, SqlParseError, get_sql_toolkit

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# App & global state
# ---------------------------------------------------------------------------

app = typer.Typer(
    name="sqllint",
    help="sqllint - style checker for SQL files",
    no_args_is_help=True,
)
console = Console(stderr=True)

SQL_EXTENSIONS: frozenset[str] = frozenset({".sql", ".sqlm", ".sqlp", ".sqlt", ".gsql"})


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _configure_logging(verbose: bool) -> None:
    """Route library logs through Rich when ``--verbose`` is given."""
    if not verbose:
        return
    logging.basicConfig(
        level=logging.DEBUG,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True,
    )


def _load_settings(config_file: Path | None) -> LintSettings:
    """Load settings, falling back to defaults when the config is unusable."""
    try:
        return load_settings(config_file)
    except ConfigError as exc:
        console.print(f"[yellow]Warning: {escape(str(exc))}. Using default settings.[/yellow]")
    try:
        return load_settings()
    except ConfigError as exc:
        console.print(f"[red]Invalid settings in environment: {escape(str(exc))}[/red]")
        raise typer.Exit(code=2) from exc


def _collect_files(paths: list[Path]) -> tuple[list[Path], list[Path]]:
    """Expand *paths* into lintable files.

    Returns
    -------
    tuple[list[Path], list[Path]]
        The files to lint, and the named paths that do not exist.
    """
    files: list[Path] = []
    missing: list[Path] = []
    for path in paths:
        if path.is_dir():
            files.extend(
                sorted(p for p in path.rglob("*") if p.is_file() and p.suffix.lower() in SQL_EXTENSIONS)
            )
        elif path.is_file():
            if path.suffix.lower() in SQL_EXTENSIONS:
                files.append(path)
            else:
                console.print(f"[yellow]Skipping {path}: not a SQL file.[/yellow]")
        else:
            missing.append(path)
    return files, missing


def _read_quick_statement() -> str:
    """Read stdin up to and including the first ``;``."""
    text = sys.stdin.read()
    end = text.find(";")
    return text if end < 0 else text[: end + 1]


def _parse_units(text: str, settings: LintSettings) -> list[ParseUnit]:
    """Parse *text* up to the first statement that fails.

    The failure itself is reported by the parser check during linting.
    """
    units: list[ParseUnit] = []
    try:
        for unit in get_sql_toolkit(settings.dialect).parser.parse_statements(text):
            units.append(unit)
    except SqlParseError as exc:
        logger.debug("Tree display stops at byte %d: %s", exc.position, exc.message)
    return units


def _emit_reports(reports: list[DiagnosticReport], output_format: str) -> None:
    if output_format == "json":
        payload = [report.model_dump(mode="json") for report in reports]
        sys.stdout.write(json.dumps(payload, indent=2) + "\n")
        return
    for report in reports:
        for line in report.render():
            sys.stdout.write(line + "\n")


# ---------------------------------------------------------------------------
# lint
# ---------------------------------------------------------------------------


@app.command()
def lint(
    paths: list[Path] | None = typer.Argument(
        None,
        help="SQL files or directories to lint.",
    ),
    config_file: Path | None = typer.Option(
        None,
        "--config",
        "-c",
        help="Path to a TOML config file with a [sqllint] table.",
    ),
    output_format: str = typer.Option(
        "text",
        "--format",
        "-f",
        help="Output format: text or json.",
    ),
    parsed_ast: bool = typer.Option(
        False,
        "--parsed-ast",
        help="Print the parsed syntax tree of each file before linting it.",
    ),
    quick: bool = typer.Option(
        False,
        "--quick",
        help="Lint a single statement read from stdin.",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Show debug logging.",
    ),
) -> None:
    """Lint SQL files and print one line per diagnostic.

    Examples::

        sqllint lint queries/
        sqllint lint report.sql --format json
        echo "select 1;" | sqllint lint --quick
    """
    _configure_logging(verbose)

    if output_format not in ("text", "json"):
        console.print(f"[red]Invalid format '{output_format}'. Must be one of: text, json.[/red]")
        raise typer.Exit(code=3)

    settings = _load_settings(config_file)
    start_time = time.monotonic()

    documents: list[tuple[str | None, str]] = []
    failed = False
    if quick:
        documents.append((None, _read_quick_statement()))
    else:
        if not paths:
            console.print("[red]No input paths given. Pass files or directories, or use --quick.[/red]")
            raise typer.Exit(code=3)
        files, missing = _collect_files(paths)
        for path in missing:
            console.print(f"[red]No such file or directory: {path}[/red]")
            failed = True
        for path in files:
            try:
                documents.append((str(path), path.read_text(encoding="utf-8")))
            except (OSError, UnicodeDecodeError) as exc:
                console.print(f"[red]Cannot read {path}: {escape(str(exc))}[/red]")
                failed = True

    if parsed_ast:
        for filename, text in documents:
            if filename:
                console.print(f"[bold]{filename}[/bold]")
            display_parse_tree(console, _parse_units(text, settings), text)

    engine = create_default_engine(settings)
    logger.debug("Linting %d document(s) with dialect %s", len(documents), settings.dialect.value)
    reports = [engine.lint(text, filename=filename) for filename, text in documents]

    _emit_reports(reports, output_format)
    if output_format == "text":
        display_summary(console, reports, int((time.monotonic() - start_time) * 1000))

    if failed or not all(report.is_clean for report in reports):
        raise typer.Exit(code=1)


# ---------------------------------------------------------------------------
# rules
# ---------------------------------------------------------------------------


@app.command()
def rules() -> None:
    """List every rule name that directives and config accept."""
    display_rules(console, all_checks())

"""Folio CLI interface.

Commands:
- check: Run content checks over a collection
- list: List documents in a collection
- show: Show one document's metadata
- report: Write a Markdown QA report
- rules: List available checks
- init: Initialize Folio configuration

Global options:
- --config: Path to configuration file
- --verbose: Enable verbose output with timestamps
- --quiet: Suppress info messages
- --ci: JSON log lines for CI/CD
- --version: Show version and exit
"""

import json
from pathlib import Path
from typing import Annotated

import typer

from folio import __version__
from folio.config import FolioConfig, create_default_config, load_config
from folio.models.document import Collection
from folio.utils.logging import configure_from_cli, get_logger

app = typer.Typer(
    name="folio",
    help="Parse and check Markdown blog-post collections",
    add_completion=False,
    no_args_is_help=True,
)

# Global state
_config: FolioConfig | None = None
_logger = get_logger()

PathsArgument = Annotated[
    list[Path] | None,
    typer.Argument(
        help="Content files or directories (defaults to content.paths from config)",
        show_default=False,
    ),
]


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        typer.echo(f"folio {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    config: Annotated[
        Path | None,
        typer.Option(
            "--config",
            "-c",
            help="Path to configuration file",
            exists=True,
            dir_okay=False,
        ),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Enable verbose output with timestamps"),
    ] = False,
    quiet: Annotated[
        bool,
        typer.Option("--quiet", "-q", help="Suppress info messages (warnings and errors only)"),
    ] = False,
    ci: Annotated[
        bool,
        typer.Option("--ci", help="Enable CI mode with JSON log output"),
    ] = False,
    version: Annotated[
        bool,
        typer.Option(
            "--version",
            callback=version_callback,
            is_eager=True,
            help="Show version and exit",
        ),
    ] = False,
) -> None:
    """Folio - parser and editorial QA checks for blog-post collections."""
    global _config

    configure_from_cli(verbose=verbose, quiet=quiet, ci=ci)

    try:
        _config = load_config(config_path=config)
        if _config.config_path:
            _logger.debug(f"Loaded config from: {_config.config_path}")
    except FileNotFoundError as e:
        _logger.error(str(e))
        raise typer.Exit(1)
    except ValueError as e:
        _logger.error(f"Failed to load config: {e}")
        raise typer.Exit(1)


def _get_config() -> FolioConfig:
    return _config if _config is not None else FolioConfig()


def _load(paths: list[Path] | None) -> Collection:
    """Load a collection, exiting with status 1 on missing paths."""
    from folio.parser import ContentLoader

    loader = ContentLoader(_get_config())
    try:
        return loader.load(paths)
    except FileNotFoundError as e:
        _logger.error(str(e))
        raise typer.Exit(1)


# =============================================================================
# check command
# =============================================================================


@app.command()
def check(
    paths: PathsArgument = None,
    json_output: Annotated[
        bool,
        typer.Option("--json", help="Output results as JSON"),
    ] = False,
    disable: Annotated[
        list[str] | None,
        typer.Option("--disable", "-d", help="Rule id to skip (repeatable)"),
    ] = None,
    fail_on_warning: Annotated[
        bool,
        typer.Option("--fail-on-warning", help="Exit 1 when warnings are found"),
    ] = False,
) -> None:
    """Run content checks over a collection.

    Exit codes:
        0: No issues
        1: Errors found (or warnings with --fail-on-warning)
        2: Only warnings found
    """
    from folio.checks import default_registry

    config = _get_config()
    collection = _load(paths)

    try:
        report = default_registry().run(
            collection,
            config.checks,
            base_dir=config.base_dir,
            disabled=disable,
        )
    except ValueError as e:
        _logger.error(str(e))
        raise typer.Exit(1)

    if json_output or config.ci.json_output:
        typer.echo(json.dumps(report.to_dict(), indent=2))
    else:
        typer.echo(
            f"\nChecked {report.documents_checked} document(s) "
            f"in {report.files_checked} file(s)\n"
        )
        for issue in report.issues:
            marker = "E" if issue.severity.value == "error" else "W"
            typer.echo(f"  {marker} {issue.location} [{issue.rule}] {issue.message}")

        if report.issues:
            typer.echo()

        if report.errors:
            typer.echo(
                f"FAILED: {len(report.errors)} error(s), {len(report.warnings)} warning(s)"
            )
        elif report.warnings:
            typer.echo(f"Passed with {len(report.warnings)} warning(s)")
        else:
            typer.echo("All checks passed")

    raise typer.Exit(report.exit_code(fail_on_warning or config.ci.fail_on_warning))


# =============================================================================
# list command
# =============================================================================


@app.command("list")
def list_documents(
    paths: PathsArgument = None,
    json_output: Annotated[
        bool,
        typer.Option("--json", help="Output as JSON"),
    ] = False,
    category: Annotated[
        str | None,
        typer.Option("--category", help="Only documents in this category"),
    ] = None,
) -> None:
    """List documents in a collection."""
    collection = _load(paths).filter(category)

    if json_output:
        typer.echo(json.dumps([d.to_dict() for d in collection], indent=2))
        return

    if not len(collection):
        typer.echo("No documents found")
        return

    for document in collection:
        doc_id = document.id if document.id is not None else document.raw_id or "?"
        typer.echo(
            f"{doc_id:>4}  {document.slug or '-':<40}  {document.title}"
            f"  [{document.category or '-'}; {document.date or '-'}]"
        )


# =============================================================================
# show command
# =============================================================================


@app.command()
def show(
    slug: Annotated[str, typer.Argument(help="Slug of the document to show")],
    paths: PathsArgument = None,
    body: Annotated[
        bool,
        typer.Option("--body", help="Print the Markdown body as well"),
    ] = False,
) -> None:
    """Show a document's metadata and code samples."""
    from folio.markdown import estimate_read_time, scan_fences, word_count

    config = _get_config()
    collection = _load(paths)
    document = collection.by_slug(slug)

    if document is None:
        _logger.error(f"No document with slug: {slug}")
        raise typer.Exit(1)

    typer.echo(f"{document.location}\n")
    for key, value in document.metadata().items():
        typer.echo(f"  {key}: {value}")

    words = word_count(document.body)
    estimate = estimate_read_time(document.body, config.checks.words_per_minute)
    typer.echo(f"\n  words: {words} (about {estimate} min)")

    fences = scan_fences(document.body)
    if fences:
        typer.echo(f"  code samples: {len(fences)}")
        for fence in fences:
            status = "" if fence.closed else " (unterminated)"
            typer.echo(f"    - {fence.language or 'plain'} at body line {fence.start_line}{status}")

    if body:
        typer.echo(f"\n{document.body}")


# =============================================================================
# report command
# =============================================================================


@app.command()
def report(
    paths: PathsArgument = None,
    output: Annotated[
        Path | None,
        typer.Option("--output", "-o", help="Output file path (overrides config)"),
    ] = None,
    dry_run: Annotated[
        bool,
        typer.Option("--dry-run", help="Preview output without writing files"),
    ] = False,
) -> None:
    """Write a Markdown QA report for a collection.

    Exit codes follow `folio check`.
    """
    from folio.checks import default_registry
    from folio.templates import ReportRenderer

    config = _get_config()
    collection = _load(paths)

    try:
        result = default_registry().run(collection, config.checks, base_dir=config.base_dir)
    except ValueError as e:
        _logger.error(str(e))
        raise typer.Exit(1)

    renderer = ReportRenderer(config)
    output_path = output or config.resolve(config.report.path)

    try:
        if dry_run:
            typer.echo(renderer.preview(collection, result, max_lines=100))
            _logger.info("Dry run complete - no files written")
        else:
            written = renderer.render_to_file(collection, result, output_path)
            typer.echo(f"Report written to: {written}")
    except (ValueError, OSError) as e:
        _logger.error(f"Rendering failed: {e}")
        raise typer.Exit(1)

    raise typer.Exit(result.exit_code(config.ci.fail_on_warning))


# =============================================================================
# rules command
# =============================================================================


@app.command()
def rules(
    json_output: Annotated[
        bool,
        typer.Option("--json", help="Output as JSON"),
    ] = False,
) -> None:
    """List available checks."""
    from folio.checks import default_registry

    described = default_registry().describe()

    if json_output:
        typer.echo(json.dumps(described, indent=2))
        return

    disabled = set(_get_config().checks.disabled)
    for entry in described:
        state = " (disabled)" if entry["rule"] in disabled else ""
        typer.echo(f"{entry['rule']:<16} {entry['severity']:<8} {entry['description']}{state}")


# =============================================================================
# init command
# =============================================================================


@app.command()
def init(
    force: Annotated[
        bool,
        typer.Option("--force", help="Overwrite existing config"),
    ] = False,
) -> None:
    """Initialize Folio configuration in .folio/config.yaml."""
    folio_dir = Path(".folio")
    config_file = folio_dir / "config.yaml"

    if config_file.exists() and not force:
        _logger.error(f"Config already exists: {config_file}")
        _logger.info("Use --force to overwrite")
        raise typer.Exit(1)

    folio_dir.mkdir(exist_ok=True)
    config_file.write_text(create_default_config(), encoding="utf-8")
    _logger.info(f"Created config: {config_file}")

    typer.echo(f"Folio configuration initialized: {config_file}")


if __name__ == "__main__":
    app()

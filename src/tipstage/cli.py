"""CLI interface for Tipstage.

Command-line tool for checking and rendering a Tip of the Week collection.
"""

import json
import logging
import sys
from pathlib import Path
from typing import NoReturn

import click

from tipstage.config import Config
from tipstage.core.errors import DuplicateId, TipstageError
from tipstage.core.navigation import build_navigation, navigation_to_dict
from tipstage.core.renderer import PageRenderer
from tipstage.core.site import BuildResult, SiteLoader
from tipstage.core.writer import SiteWriter

config_option = click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(exists=True, path_type=Path),
    default=None,
    help="Path to configuration file (default: auto-discover tipstage.toml)",
)
source_dir_option = click.option(
    "--source-dir",
    "-s",
    type=click.Path(exists=True, path_type=Path, file_okay=False),
    default=None,
    help="Tip source directory (overrides config)",
)
unpublished_option = click.option(
    "--include-unpublished/--published-only",
    default=None,
    help="Index tips with published: false (overrides config, default: published only)",
)
verbose_option = click.option(
    "--verbose",
    "-v",
    is_flag=True,
    help="Enable verbose logging",
)


@click.group()
def cli() -> None:
    """Tipstage - load, cross-check and render Tips of the Week."""


@cli.command()
@config_option
@source_dir_option
@click.option(
    "--output-dir",
    "-o",
    type=click.Path(path_type=Path, file_okay=False),
    default=None,
    help="Output directory (overrides config)",
)
@unpublished_option
@click.option(
    "--strict",
    is_flag=True,
    help="Exit with an error when any document is skipped or any reference is broken",
)
@verbose_option
def build(
    config_path: Path | None,
    source_dir: Path | None,
    output_dir: Path | None,
    include_unpublished: bool | None,
    strict: bool,
    verbose: bool,
) -> None:
    """Build the site from tip sources."""
    _configure_logging(verbose)
    config = _load_config(
        config_path,
        source_dir=source_dir,
        output_dir=output_dir,
        include_unpublished=include_unpublished,
    )

    click.echo(f"Source directory: {config.docs.source_dir}")
    result = _run_build(config)

    writer = SiteWriter(config.docs.output_dir)
    try:
        written = writer.write(result, PageRenderer(), source_dir=config.docs.source_dir)
    except TipstageError as e:
        _fail(str(e))

    click.echo(f"Wrote {len(written)} files to {config.docs.output_dir}")
    _print_diagnostics(result)

    if strict and not result.ok:
        _fail("build has diagnostics (--strict)")
    click.echo(click.style("\nBuild complete!", fg="green", bold=True))


@cli.command()
@config_option
@source_dir_option
@unpublished_option
@verbose_option
def check(
    config_path: Path | None,
    source_dir: Path | None,
    include_unpublished: bool | None,
    verbose: bool,
) -> None:
    """Validate front-matter and cross-references without writing output."""
    _configure_logging(verbose)
    config = _load_config(config_path, source_dir=source_dir, include_unpublished=include_unpublished)

    result = _run_build(config)
    click.echo(f"Checked {len(result.documents)} tips ({len(result.index)} indexed)")
    _print_diagnostics(result)

    if not result.ok:
        sys.exit(1)
    click.echo(click.style("No problems found.", fg="green"))


@cli.command()
@config_option
@source_dir_option
@unpublished_option
@click.option("--json", "as_json", is_flag=True, help="Print navigation JSON")
def index(
    config_path: Path | None,
    source_dir: Path | None,
    include_unpublished: bool | None,
    as_json: bool,
) -> None:
    """Print the ordered tip index."""
    _configure_logging(False)
    config = _load_config(config_path, source_dir=source_dir, include_unpublished=include_unpublished)

    result = _run_build(config)
    if as_json:
        click.echo(json.dumps(navigation_to_dict(build_navigation(result.index)), indent=2))
        return

    for document in result.index:
        click.echo(f"{document.order}  {document.path}  {document.title}")


@cli.command()
@config_option
@source_dir_option
@click.option("--host", default=None, help="Host to bind to (overrides config)")
@click.option("--port", "-p", type=int, default=None, help="Port to bind to (overrides config)")
@unpublished_option
@verbose_option
def serve(
    config_path: Path | None,
    source_dir: Path | None,
    host: str | None,
    port: int | None,
    include_unpublished: bool | None,
    verbose: bool,
) -> None:
    """Start the preview server."""
    from tipstage.server import run_server

    _configure_logging(verbose)
    config = _load_config(
        config_path,
        source_dir=source_dir,
        host=host,
        port=port,
        include_unpublished=include_unpublished,
    )

    click.echo(f"Starting server on {config.server.host}:{config.server.port}")
    click.echo(f"Source directory: {config.docs.source_dir}")
    run_server(config, verbose=verbose)


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.INFO if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


def _load_config(config_path: Path | None, **overrides: object) -> Config:
    """Load configuration and apply CLI overrides or exit with error."""
    try:
        config = Config.load(config_path)
    except (FileNotFoundError, ValueError) as e:
        _fail(str(e))
    return config.with_overrides(**overrides)  # type: ignore[arg-type]


def _run_build(config: Config) -> BuildResult:
    """Run the collection pipeline or exit on a fatal build error."""
    loader = SiteLoader(config.docs.source_dir, config.tips)
    try:
        return loader.load()
    except DuplicateId as e:
        _fail(str(e))


def _print_diagnostics(result: BuildResult) -> None:
    """Print skipped documents and broken references.

    Args:
        result: Completed build
    """
    if result.errors:
        click.echo(
            click.style(f"\nSkipped {len(result.errors)} malformed document(s):", fg="yellow", bold=True),
            err=True,
        )
        for error in result.errors:
            click.echo(f"  - {error.source}: {error.reason}", err=True)

    if result.broken_references:
        click.echo(
            click.style(
                f"\nBroken references ({len(result.broken_references)}):",
                fg="yellow",
                bold=True,
            ),
            err=True,
        )
        for broken in result.broken_references:
            click.echo(f"  - {broken}", err=True)


def _fail(message: str) -> NoReturn:
    click.echo(click.style(f"Error: {message}", fg="red"), err=True)
    sys.exit(1)


if __name__ == "__main__":
    cli()

"""Command line entry point for building and checking site content."""

import logging
import sys
from pathlib import Path

import click

from sitegraph.config import Settings
from sitegraph.core.artifacts import load_artifacts
from sitegraph.core.pipeline import run_build
from sitegraph.core.store import DocumentStore, JsonFileStore, SupabaseStore
from sitegraph.core.verify import summarize
from sitegraph.exceptions import SiteGraphError
from sitegraph.logging_setup import configure_logging

logger = logging.getLogger(__name__)


@click.group()
@click.option("-v", "--verbose", is_flag=True, help="Debug logging.")
@click.pass_context
def cli(ctx: click.Context, verbose: bool) -> None:
    """SiteGraph: build static content artifacts with a wiki-link graph."""
    settings = Settings()
    configure_logging("DEBUG" if verbose else settings.log_level.upper())
    ctx.obj = settings


def _open_store(settings: Settings, source: Path | None) -> DocumentStore:
    if source is not None:
        return JsonFileStore(source)
    url, key, owner_id = settings.require_store_settings()
    return SupabaseStore(
        url,
        key,
        owner_id,
        table=settings.documents_table,
        timeout=settings.request_timeout,
    )


@cli.command()
@click.option(
    "-o",
    "--output",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="Output directory (defaults to SITEGRAPH_DATA_DIR).",
)
@click.option(
    "--source",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help="Read document rows from a JSON file instead of Supabase.",
)
@click.pass_obj
def build(settings: Settings, output: Path | None, source: Path | None) -> None:
    """Fetch documents and write documents, link index and backlinks."""
    output_dir = output or settings.data_dir
    try:
        with _open_store(settings, source) as store:
            result = run_build(store, output_dir)
    except SiteGraphError as e:
        logger.error("Failed to build content: %s", e)
        sys.exit(1)

    if result is None:
        click.echo("No documents found; nothing written.")
        return
    click.echo(f"Built content: {len(result.documents)} documents -> {output_dir}")


@cli.command()
@click.option(
    "-o",
    "--output",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="Artifact directory (defaults to SITEGRAPH_DATA_DIR).",
)
@click.pass_obj
def verify(settings: Settings, output: Path | None) -> None:
    """Print a report on existing build artifacts."""
    try:
        artifacts = load_artifacts(output or settings.data_dir)
    except SiteGraphError as e:
        logger.error("Build verification failed: %s", e)
        sys.exit(1)

    report = summarize(artifacts)
    click.echo(report.render())
    if not report.ok:
        sys.exit(1)


if __name__ == "__main__":
    cli()

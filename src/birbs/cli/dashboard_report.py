"""Command-line tool for rendering dashboard views as JSON.

Examples:
    birbs overview
    birbs today --base-url http://birds.local:3100
    birbs bird "American Crow"
"""

import asyncio
import sys
from collections.abc import Awaitable, Callable
from pathlib import Path

import click

from birbs.config import BirbsConfig, ConfigManager
from birbs.dashboard.models import ViewResult, ViewState
from birbs.dashboard.service import DashboardService
from birbs.datasource.client import DetectionDataClient
from birbs.utils.structlog_configurator import configure_structlog, get_logger

logger = get_logger(__name__)


def _run_view(
    config: BirbsConfig, build: Callable[[DashboardService], Awaitable[ViewResult]]
) -> None:
    async def _build() -> ViewResult:
        async with DetectionDataClient.from_config(config.data_source) as client:
            return await build(DashboardService(client, config))

    result = asyncio.run(_build())
    click.echo(result.model_dump_json(indent=2))

    if result.skipped:
        logger.warning("Malformed records skipped", skipped=result.skipped)
    if result.state is ViewState.ERROR:
        click.echo(click.style(f"Error: {result.error}", fg="red"), err=True)
        sys.exit(1)


@click.group()
@click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Configuration file (defaults to $BIRBS_CONFIG or $BIRBS_DATA/config/birbs.yaml)",
)
@click.option("--base-url", help="Detection data service URL, overriding the configuration")
@click.pass_context
def cli(ctx: click.Context, config_path: Path | None, base_url: str | None) -> None:
    """Render bird dashboard views from the detection data service."""
    try:
        config = ConfigManager(config_path=config_path).load()
        if base_url:
            config = config.model_copy(
                update={
                    "data_source": config.data_source.model_validate(
                        {**config.data_source.model_dump(), "base_url": base_url}
                    )
                }
            )
    except ValueError as e:
        raise click.ClickException(str(e)) from e

    configure_structlog(config)
    ctx.obj = config


@cli.command()
@click.pass_obj
def overview(config: BirbsConfig) -> None:
    """Species tables for the most recent days."""
    _run_view(config, lambda service: service.overview())


@cli.command()
@click.pass_obj
def today(config: BirbsConfig) -> None:
    """Per-species rollups of recent activity."""
    _run_view(config, lambda service: service.today())


@cli.command()
@click.pass_obj
def species(config: BirbsConfig) -> None:
    """All-time totals per species."""
    _run_view(config, lambda service: service.species())


@cli.command()
@click.argument("common_name")
@click.pass_obj
def bird(config: BirbsConfig, common_name: str) -> None:
    """Files, hourly distribution and daily series for one species."""
    _run_view(config, lambda service: service.bird(common_name))


def main() -> None:
    """Entry point for the birbs command."""
    cli()


if __name__ == "__main__":
    main()

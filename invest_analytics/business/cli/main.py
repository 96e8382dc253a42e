"""
CLI Main Entry Point

Click command group for cache management and ad-hoc analytics.
"""

import logging

import click

from invest_analytics import __version__
from invest_analytics.business.cli.commands.cache import cache
from invest_analytics.business.cli.commands.risk import risk
from invest_analytics.business.cli.commands.sectors import sectors
from invest_analytics.business.cli.commands.sentiment import sentiment


@click.group()
@click.version_option(version=__version__, prog_name="invest-analytics")
@click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(exists=True),
    help="Analytics config YAML (default: config/analytics.yaml)",
)
@click.option("--verbose", "-v", is_flag=True, help="Show debug logs")
@click.pass_context
def cli(ctx: click.Context, config_path: str | None, verbose: bool) -> None:
    """Investment analytics - risk metrics, sector rotation and news sentiment.

    Results are cached in Redis when it is reachable.
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    ctx.ensure_object(dict)
    ctx.obj["config_path"] = config_path


cli.add_command(cache)
cli.add_command(risk)
cli.add_command(sectors)
cli.add_command(sentiment)


if __name__ == "__main__":
    cli()

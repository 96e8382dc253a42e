"""
Sectors Command - sector rotation ranking
"""

import json
import logging
import sys
from typing import Any, Optional

import click

from invest_analytics.business.analytics_service import create_service
from invest_analytics.business.config import AnalyticsConfig
from invest_analytics.data.models import Period
from invest_analytics.data.providers import RequestTimeoutError

logger = logging.getLogger(__name__)


@click.command()
@click.option(
    "--period",
    "-p",
    type=click.Choice([p.value for p in Period]),
    default=None,
    help="Lookback period (default from config)",
)
@click.option(
    "--top",
    "-n",
    type=int,
    default=None,
    help="Only show the N strongest sectors",
)
@click.option(
    "--output",
    "-o",
    type=click.Choice(["text", "json"]),
    default="text",
    help="Output format",
)
@click.pass_context
def sectors(ctx: click.Context, period: Optional[str], top: Optional[int], output: str) -> None:
    """Rank sectors by relative strength against the benchmark."""
    config = AnalyticsConfig.load(ctx.obj.get("config_path"))
    service = create_service(config)
    try:
        bundle = service.get_sector_rotation(period=period)
    except RequestTimeoutError as e:
        click.echo(f"Timed out: {e}", err=True)
        sys.exit(3)
    except Exception as e:
        logger.exception("Sector rotation failed")
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)
    finally:
        service.cache.close()

    if top is not None:
        bundle = {**bundle, "sectors": bundle["sectors"][:top]}

    if output == "json":
        click.echo(json.dumps(bundle, indent=2))
    else:
        _output_text(bundle)


def _output_text(bundle: dict[str, Any]) -> None:
    click.echo(f"Sector rotation vs {bundle['benchmark']} (as of {bundle['asOf']})")
    click.echo("-" * 70)
    click.echo(f"{'#':>2}  {'Sector':<24} {'Ticker':<6} {'RS':>7} {'3M %':>7}  {'Momentum':<11} Signal")
    for s in bundle["sectors"]:
        click.echo(
            f"{s['rank']:>2}  {s['sector']:<24} {s['ticker']:<6} "
            f"{s['relativeStrength']:>7} {s['performance']['threeMonth']:>7}  "
            f"{s['momentum']:<11} {s['signal']}"
        )
    if bundle["missingSectors"]:
        click.echo(f"Missing: {', '.join(bundle['missingSectors'])}")

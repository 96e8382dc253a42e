"""
Risk Command - portfolio risk metrics
"""

import json
import logging
import sys
from typing import Any, Optional

import click

from invest_analytics.business.analytics_service import create_service
from invest_analytics.business.config import AnalyticsConfig
from invest_analytics.data.models import PortfolioHolding, Period
from invest_analytics.data.providers import RequestTimeoutError
from invest_analytics.engine.base import ComputeError

logger = logging.getLogger(__name__)


def parse_holding(value: str) -> PortfolioHolding:
    """Parse ``TICKER:SHARES[:AVG_COST]``."""
    parts = value.split(":")
    if len(parts) not in (2, 3):
        raise click.BadParameter(f"expected TICKER:SHARES[:AVG_COST], got {value!r}")
    try:
        shares = float(parts[1])
        avg_cost = float(parts[2]) if len(parts) == 3 else 0.0
    except ValueError:
        raise click.BadParameter(f"invalid number in {value!r}")
    return PortfolioHolding(ticker=parts[0].strip().upper(), shares=shares, avg_cost=avg_cost)


def _load_holdings(holding: tuple[str, ...], path: Optional[str]) -> list[PortfolioHolding]:
    holdings = [parse_holding(h) for h in holding]
    if path:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
        holdings.extend(PortfolioHolding.from_dict(h) for h in data)
    return holdings


@click.command()
@click.option(
    "--holding",
    "-H",
    multiple=True,
    help="Holding as TICKER:SHARES[:AVG_COST] (repeatable)",
)
@click.option(
    "--file",
    "-f",
    "path",
    type=click.Path(exists=True),
    help="JSON file with a list of {ticker, shares, avgCost}",
)
@click.option(
    "--period",
    "-p",
    type=click.Choice([p.value for p in Period]),
    default=None,
    help="Lookback period (default from config)",
)
@click.option(
    "--output",
    "-o",
    type=click.Choice(["text", "json"]),
    default="text",
    help="Output format",
)
@click.pass_context
def risk(
    ctx: click.Context,
    holding: tuple[str, ...],
    path: Optional[str],
    period: Optional[str],
    output: str,
) -> None:
    """Compute portfolio risk metrics.

    \b
    Examples:
      invest-analytics risk -H AAPL:10:150 -H MSFT:5:300
      invest-analytics risk -f portfolio.json -p 6mo -o json
    """
    holdings = _load_holdings(holding, path)
    if not holdings:
        raise click.UsageError("Provide at least one --holding or --file")

    config = AnalyticsConfig.load(ctx.obj.get("config_path"))
    service = create_service(config)
    try:
        bundle = service.get_risk_metrics(holdings, period)
    except ComputeError as e:
        click.echo(f"Invalid portfolio: {e}", err=True)
        sys.exit(2)
    except RequestTimeoutError as e:
        click.echo(f"Timed out: {e}", err=True)
        sys.exit(3)
    except Exception as e:
        logger.exception("Risk metrics failed")
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)
    finally:
        service.cache.close()

    if output == "json":
        click.echo(json.dumps(bundle, indent=2))
    else:
        _output_text(bundle)


def _output_text(bundle: dict[str, Any]) -> None:
    m = bundle["metrics"]
    click.echo(f"Portfolio: {', '.join(bundle['tickers'])} ({bundle['period']}, vs {bundle['benchmark']})")
    if bundle["unavailable"]:
        click.echo(f"Data unavailable for: {', '.join(bundle['unavailable'])}")
    click.echo("-" * 50)
    rows = [
        ("Volatility", m["volatility"], "%"),
        ("Sharpe ratio", m["sharpeRatio"], ""),
        ("Sortino ratio", m["sortinoRatio"], ""),
        ("Beta", m["beta"], ""),
        ("Max drawdown", m["maxDrawdown"], "%"),
        ("Total return", m["totalReturnPercent"], "%"),
        ("CAGR", m["cagr"], "%"),
        ("VaR 95", m["valueAtRisk95"], "%"),
        ("Market value", m["marketValue"], ""),
        ("Unrealized P&L", m["unrealizedPnl"], ""),
    ]
    for label, value, unit in rows:
        shown = "n/a" if value is None else f"{value}{unit}"
        click.echo(f"  {label:<16} {shown}")

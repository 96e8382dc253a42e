"""
Sentiment Command - news sentiment for a ticker or free text
"""

import json
import logging
import sys
from typing import Optional

import click

from invest_analytics.business.analytics_service import create_service
from invest_analytics.business.config import AnalyticsConfig
from invest_analytics.engine.sentiment import SentimentScorer

logger = logging.getLogger(__name__)


@click.command()
@click.argument("ticker", required=False)
@click.option("--text", "-t", help="Score this text instead of fetching news")
@click.option(
    "--output",
    "-o",
    type=click.Choice(["text", "json"]),
    default="text",
    help="Output format",
)
@click.pass_context
def sentiment(ctx: click.Context, ticker: Optional[str], text: Optional[str], output: str) -> None:
    """Score news sentiment for TICKER, or score --text directly.

    \b
    Examples:
      invest-analytics sentiment AAPL
      invest-analytics sentiment -t "Stock soars after earnings beat"
    """
    if text:
        result = SentimentScorer().score(text).to_dict()
        if output == "json":
            click.echo(json.dumps(result, indent=2))
        else:
            click.echo(f"{result['label']} (score {result['score']}, confidence {result['confidence']})")
        return

    if not ticker:
        raise click.UsageError("Provide a TICKER or --text")

    config = AnalyticsConfig.load(ctx.obj.get("config_path"))
    service = create_service(config)
    try:
        bundle = service.get_news_sentiment(ticker)
    except Exception as e:
        logger.exception("News sentiment failed")
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)
    finally:
        service.cache.close()

    if output == "json":
        click.echo(json.dumps(bundle, indent=2))
        return

    agg = bundle["aggregate"]
    click.echo(
        f"{bundle['ticker']}: {agg['label']} (avg {agg['averageScore']}, "
        f"{agg['bullishCount']} bullish / {agg['bearishCount']} bearish / "
        f"{agg['neutralCount']} neutral)"
    )
    for article in bundle["articles"]:
        s = article["sentiment"]
        click.echo(f"  [{s['label']:>7} {s['score']:>5}] {article['title']}")

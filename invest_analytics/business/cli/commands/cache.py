"""
Cache Command - cache statistics and maintenance
"""

import json
import logging
import sys

import click

from invest_analytics.business.analytics_service import build_cache_store
from invest_analytics.business.config import AnalyticsConfig
from invest_analytics.data.cache import CacheStore

logger = logging.getLogger(__name__)


def _open_store(ctx: click.Context) -> CacheStore:
    config = AnalyticsConfig.load(ctx.obj.get("config_path"))
    return build_cache_store(config)


@click.group()
def cache() -> None:
    """Inspect and maintain the analytics cache."""
    pass


@cache.command()
@click.pass_context
def stats(ctx: click.Context) -> None:
    """Show the number of cached entries and whether the store answers.

    Hit/miss counters live in each serving process and are not reported here.
    """
    store = _open_store(ctx)
    try:
        data = {"prefix": store.prefix, "keys": store.key_count(), "healthy": store.health()}
        click.echo(json.dumps(data, indent=2))
    finally:
        store.close()


@cache.command()
@click.argument("ticker")
@click.pass_context
def invalidate(ctx: click.Context, ticker: str) -> None:
    """Delete every cached entry that references TICKER."""
    store = _open_store(ctx)
    try:
        deleted = store.invalidate_ticker_cache(ticker)
        click.echo(f"Invalidated {deleted} entries for {ticker.upper()}")
    finally:
        store.close()


@cache.command()
@click.option("--yes", "-y", is_flag=True, help="Skip confirmation")
@click.pass_context
def flush(ctx: click.Context, yes: bool) -> None:
    """Delete every cached analytics entry."""
    if not yes:
        click.confirm("Delete all cached analytics entries?", abort=True)
    store = _open_store(ctx)
    try:
        deleted = store.flush()
        click.echo(f"Flushed {deleted} entries")
    finally:
        store.close()


@cache.command()
@click.pass_context
def health(ctx: click.Context) -> None:
    """Check that the cache backing store answers.

    Exit code 1 when it does not.
    """
    store = _open_store(ctx)
    try:
        healthy = store.health()
    finally:
        store.close()

    logger.debug(f"Cache health for {store.prefix}: {healthy}")
    if healthy:
        click.echo("Cache: connected")
    else:
        click.echo("Cache: unavailable", err=True)
        sys.exit(1)

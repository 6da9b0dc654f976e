"""CLI entry point for the trade journal."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import click

from .core.config import Settings, load_settings
from .core.enums import TimeRange
from .core.errors import ConfigError, ParseError


def _echo_json(payload: Any) -> None:
    click.echo(json.dumps(payload, indent=2, default=str))


def _read(path: str) -> str:
    return Path(path).read_text(encoding="utf-8", errors="replace")


@click.group()
@click.option("--config", default=None, help="Config file path (TOML)")
@click.pass_context
def main(ctx: click.Context, config: str | None) -> None:
    """Trade journal: import broker exports and compute statistics."""
    from .observability.logger import setup_logging

    try:
        settings = load_settings(config_path=config)
    except ConfigError as exc:
        raise click.ClickException(f"Invalid configuration: {exc}") from exc
    setup_logging(
        level=settings.observability.log_level,
        format=settings.observability.log_format,
    )
    ctx.obj = settings


@main.command("import")
@click.option("--balance", "balance_path", type=click.Path(exists=True, dir_okay=False), default=None, help="Balance history CSV")
@click.option("--orders", "orders_path", type=click.Path(exists=True, dir_okay=False), default=None, help="Order log CSV")
@click.option("--mt5", "mt5_path", type=click.Path(exists=True, dir_okay=False), default=None, help="MT5 HTML report")
@click.option("--currency", default="USD", help="Account currency of an MT5 report")
@click.option("--save", is_flag=True, help="Persist the reconciled trades")
@click.pass_obj
def import_(
    settings: Settings,
    balance_path: str | None,
    orders_path: str | None,
    mt5_path: str | None,
    currency: str,
    save: bool,
) -> None:
    """Reconcile an export and print the trades with a preview."""
    from dataclasses import asdict

    from .observability.logger import get_logger
    from .reconciliation.reconciler import TradeReconciler
    from .reconciliation.session import ImportSession

    if mt5_path and (balance_path or orders_path):
        raise click.UsageError("--mt5 cannot be combined with --balance/--orders")
    if not (mt5_path or balance_path or orders_path):
        raise click.UsageError("Nothing to import: pass --balance, --orders or --mt5")

    session = ImportSession(TradeReconciler(settings.reconcile))
    try:
        if mt5_path:
            result = session.load_mt5(_read(mt5_path), currency=currency)
        else:
            result = None
            if balance_path:
                result = session.load_balance_history(_read(balance_path))
            if orders_path and (result is None or result.ok):
                result = session.load_order_log(_read(orders_path))
    except ParseError as exc:
        raise click.ClickException(str(exc)) from exc

    saved = 0
    if save and result.ok and result.trades:
        from .store.sql import SqlTradeStore

        store = SqlTradeStore(settings.store.database_url)
        try:
            saved = len(store.bulk_create(result.trades))
        finally:
            store.close()
        if saved == 0:
            raise click.ClickException("Failed to save trades")
        get_logger(__name__).info("trades_saved", count=saved, database=settings.store.database_url)

    _echo_json({
        "ok": result.ok,
        "message": result.message,
        "preview": asdict(result.preview()),
        "saved": saved,
        "trades": [t.model_dump(mode="json") for t in result.trades],
    })
    if not result.ok:
        raise SystemExit(1)


@main.command()
@click.option("--currency", default=None, help="Base currency (default from config)")
@click.option("--daily", is_flag=True, help="Include daily P&L and the equity curve")
@click.option("--refresh-rates/--no-refresh-rates", default=True, help="Refresh exchange rates first")
@click.option(
    "--range",
    "time_range",
    type=click.Choice([r.value for r in TimeRange]),
    default=TimeRange.ALL.value,
    show_default=True,
    help="Only trades entered within this window",
)
@click.pass_obj
def stats(
    settings: Settings,
    currency: str | None,
    daily: bool,
    refresh_rates: bool,
    time_range: str,
) -> None:
    """Print statistics over the stored trades."""
    from .analytics.period import range_start
    from .analytics.report import build_report
    from .core.clock import WallClock
    from .currency.rates import RateProvider
    from .store.sql import SqlTradeStore

    base = (currency or settings.base_currency).upper()
    provider = RateProvider(settings.rates)
    rates = provider.refresh_sync() if refresh_rates else provider.snapshot()

    store = SqlTradeStore(settings.store.database_url)
    try:
        trades = store.fetch_all()
    finally:
        store.close()

    since = range_start(time_range, WallClock().now())
    report = build_report(trades, base, rates, since=since).to_dict()
    report["range"] = time_range
    if not daily:
        report.pop("daily")
        report.pop("equity")
    _echo_json(report)


@main.command()
@click.option("--refresh", is_flag=True, help="Fetch from the rate source (or fresh cache)")
@click.pass_obj
def rates(settings: Settings, refresh: bool) -> None:
    """Print the exchange-rate table (units per 1 USD)."""
    from .currency.rates import RateProvider

    provider = RateProvider(settings.rates)
    table = provider.refresh_sync() if refresh else provider.snapshot()
    _echo_json({
        "fetched_at": table.fetched_at.isoformat() if table.fetched_at else None,
        "rates": table.to_dict(),
    })


@main.command()
@click.option("--yes", is_flag=True, help="Confirm deleting every stored trade")
@click.pass_obj
def reset(settings: Settings, yes: bool) -> None:
    """Delete all stored trades."""
    from .store.sql import SqlTradeStore

    if not yes:
        raise click.UsageError("Refusing to reset the journal without --yes")
    store = SqlTradeStore(settings.store.database_url)
    try:
        ok = store.delete_all()
    finally:
        store.close()
    if not ok:
        raise click.ClickException("Failed to reset the journal")
    _echo_json({"ok": True})


if __name__ == "__main__":
    main()

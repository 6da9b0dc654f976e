"""Exchange-rate table and its provider.

Rates are "units of currency per 1 USD".  A ``RateTable`` is an
immutable snapshot; computations take one and keep it for their whole
run.  ``RateProvider.refresh()`` produces a new snapshot from the
on-disk cache (when fresh) or the rate source, and never raises: on any
failure the previous snapshot stays current.

Usage::

    provider = RateProvider(settings.rates)
    rates = await provider.refresh()
    usd = convert(pnl, "EUR", "USD", rates)
"""

from __future__ import annotations

import asyncio
import json
import logging
from collections.abc import Mapping
from datetime import datetime, timedelta, timezone
from types import MappingProxyType
from typing import Any, Iterator

import httpx

from tradezen.core.clock import IClock, WallClock
from tradezen.core.config import RatesConfig
from tradezen.core.errors import RateSourceError

logger = logging.getLogger(__name__)

FALLBACK_RATES: dict[str, float] = {
    "USD": 1.0,
    "EUR": 1.08,
    "GBP": 1.27,
    "JPY": 150.0,
    "CHF": 0.88,
    "CAD": 1.35,
    "AUD": 1.53,
    "NZD": 1.65,
    "USDC": 1.0,
    "USDT": 1.0,
    "BTC": 65000.0,
    "ETH": 3500.0,
    "USC": 0.01,
}

# Synthetic or pegged units the rate source does not know about.
FIXED_RATES: dict[str, float] = {
    "USD": 1.0,
    "USC": 0.01,
    "USDC": 1.0,
    "USDT": 1.0,
}


class RateTable(Mapping[str, float]):
    """Immutable currency -> rate-per-USD snapshot."""

    def __init__(
        self,
        rates: Mapping[str, float],
        fetched_at: datetime | None = None,
    ) -> None:
        merged = {code.upper(): float(rate) for code, rate in rates.items()}
        merged.update(FIXED_RATES)
        self._rates = MappingProxyType(merged)
        self.fetched_at = fetched_at

    @classmethod
    def fallback(cls) -> "RateTable":
        return cls(FALLBACK_RATES)

    def __getitem__(self, code: str) -> float:
        return self._rates[code.upper()]

    def __iter__(self) -> Iterator[str]:
        return iter(self._rates)

    def __len__(self) -> int:
        return len(self._rates)

    def merged(
        self, rates: Mapping[str, float], fetched_at: datetime | None = None
    ) -> "RateTable":
        """New table with ``rates`` laid over this one."""
        data = dict(self._rates)
        data.update({code.upper(): float(rate) for code, rate in rates.items()})
        return RateTable(data, fetched_at=fetched_at or self.fetched_at)

    def to_dict(self) -> dict[str, float]:
        return dict(self._rates)

    def __repr__(self) -> str:
        return f"RateTable({len(self)} codes, fetched_at={self.fetched_at})"


def _valid_rates(payload: Any) -> dict[str, float]:
    if not isinstance(payload, Mapping):
        raise RateSourceError("rates payload is not an object")
    rates: dict[str, float] = {}
    for code, rate in payload.items():
        if isinstance(rate, bool) or not isinstance(rate, (int, float)) or rate <= 0:
            raise RateSourceError(f"bad rate for {code!r}: {rate!r}")
        rates[str(code).upper()] = float(rate)
    return rates


class RateProvider:
    """Owns the current rate snapshot and refreshes it.

    Parameters
    ----------
    config : RatesConfig | None
        Source URL, cache location, TTL and request timeout.
    client : httpx.AsyncClient | None
        Client to fetch with.  A short-lived one is created per refresh
        when omitted.
    clock : IClock | None
        Time source for the cache TTL.
    initial : RateTable | None
        Starting snapshot.  Defaults to the hardcoded fallback rates.
    """

    def __init__(
        self,
        config: RatesConfig | None = None,
        *,
        client: httpx.AsyncClient | None = None,
        clock: IClock | None = None,
        initial: RateTable | None = None,
    ) -> None:
        self._config = config or RatesConfig()
        self._client = client
        self._clock = clock or WallClock()
        self._table = initial or RateTable.fallback()

    def snapshot(self) -> RateTable:
        """The current table.  Immutable, safe to hold on to."""
        return self._table

    async def refresh(self) -> RateTable:
        """Refresh from cache or source and return the new snapshot.

        Never raises; failures keep and return the previous snapshot.
        """
        now = self._clock.now()
        ttl = timedelta(hours=self._config.ttl_hours)
        if self._table.fetched_at is not None and now - self._table.fetched_at < ttl:
            return self._table
        try:
            cached = self._read_cache()
            if cached is not None:
                rates, fetched_at = cached
                if now - fetched_at < ttl:
                    logger.debug("Using cached exchange rates from %s", fetched_at)
                    self._table = self._table.merged(rates, fetched_at)
                    return self._table

            logger.info("Fetching exchange rates from %s", self._config.source_url)
            rates = await self._fetch()
            table = self._table.merged(rates, now)
        except (RateSourceError, httpx.HTTPError) as exc:
            logger.warning("Exchange rate refresh failed, keeping previous rates: %s", exc)
            return self._table

        self._table = table
        self._write_cache(table)
        return table

    def refresh_sync(self) -> RateTable:
        """Blocking ``refresh()`` for synchronous callers (CLI)."""
        return asyncio.run(self.refresh())

    # ------------------------------------------------------------------ #
    # Private helpers                                                      #
    # ------------------------------------------------------------------ #

    async def _fetch(self) -> dict[str, float]:
        if self._client is not None:
            response = await self._client.get(self._config.source_url)
        else:
            async with httpx.AsyncClient(
                timeout=httpx.Timeout(self._config.timeout_seconds)
            ) as client:
                response = await client.get(self._config.source_url)
        response.raise_for_status()
        try:
            data = response.json()
        except ValueError as exc:
            raise RateSourceError(f"invalid JSON from rate source: {exc}") from exc
        if not isinstance(data, Mapping) or "rates" not in data:
            raise RateSourceError("rate source response has no 'rates'")
        return _valid_rates(data["rates"])

    def _read_cache(self) -> tuple[dict[str, float], datetime] | None:
        path = self._config.resolved_cache_path
        try:
            raw = json.loads(path.read_text())
            rates = _valid_rates(raw["rates"])
            fetched_at = datetime.fromtimestamp(
                float(raw["timestamp"]) / 1000, tz=timezone.utc
            )
        except FileNotFoundError:
            return None
        except (
            OSError, OverflowError, ValueError, KeyError, TypeError, RateSourceError
        ) as exc:
            logger.warning("Ignoring unreadable rate cache %s: %s", path, exc)
            return None
        return rates, fetched_at

    def _write_cache(self, table: RateTable) -> None:
        path = self._config.resolved_cache_path
        fetched_at = table.fetched_at or self._clock.now()
        payload = {
            "rates": table.to_dict(),
            "timestamp": int(fetched_at.timestamp() * 1000),
        }
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(json.dumps(payload))
        except OSError as exc:
            logger.warning("Could not write rate cache %s: %s", path, exc)

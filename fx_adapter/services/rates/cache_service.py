from __future__ import annotations

import asyncio
import logging
from datetime import datetime, timedelta
from typing import Optional, TYPE_CHECKING

from fx_adapter.services.clock import Clock, utc_now
from .base import CacheSnapshot, Quote, QuoteResponse, QuoteSource
from .errors import RefreshFailed, UpstreamError

if TYPE_CHECKING:  # pragma: no cover
    from fx_adapter.core.config import Settings

"""Staleness-aware quote cache.

Purpose:
    Hold the most recent Quote for one series and decide when to ask the
    upstream source for a new one.

Design:
    - Two independent age thresholds, both compared strictly (age equal to a
      threshold does not exceed it):
        * refresh interval (configurable): older quotes trigger a refetch.
        * STALE_THRESHOLD (24h): older quotes are flagged `stale` on output.
    - Refresh is demand driven; there is no background task.
    - Single flight: while one fetch is running, other callers needing a
      refresh await the same task and get the same result or exception.
    - The held quote is only ever rebound to a new immutable Quote, so readers
      see the old one or the new one in full.
    - A failed refresh leaves the held quote untouched and raises
      RefreshFailed, even if a quote is cached, unless `serve_stale_on_error`
      is set.
"""

STALE_THRESHOLD = timedelta(hours=24)
DEFAULT_REFRESH_INTERVAL = timedelta(hours=1)

logger = logging.getLogger("fx_adapter.cache")


class QuoteCache:
    def __init__(
        self,
        source: QuoteSource,
        *,
        buy_spread_bps: int,
        sell_spread_bps: int,
        source_label: str,
        refresh_interval: timedelta = DEFAULT_REFRESH_INTERVAL,
        stale_threshold: timedelta = STALE_THRESHOLD,
        clock: Clock = utc_now,
        serve_stale_on_error: bool = False,
    ):
        if buy_spread_bps < 0 or sell_spread_bps < 0:
            raise ValueError("spreads must be non-negative basis points")
        if refresh_interval <= timedelta(0):
            raise ValueError("refresh interval must be positive")
        self._source = source
        self._clock = clock
        self._refresh_interval = refresh_interval
        self._stale_threshold = stale_threshold
        self._serve_stale_on_error = serve_stale_on_error
        self.buy_spread_bps = buy_spread_bps
        self.sell_spread_bps = sell_spread_bps
        self.source_label = source_label
        self._held: Optional[Quote] = None
        self._inflight: Optional[asyncio.Task[Quote]] = None
        self.fetch_count = 0

    # Freshness --------------------------------------------------
    @property
    def held_quote(self) -> Optional[Quote]:
        return self._held

    def _age(self, quote: Quote, now: datetime) -> timedelta:
        return now - quote.as_of

    def is_stale(self, quote: Optional[Quote], now: Optional[datetime] = None) -> bool:
        if quote is None:
            return True
        return self._age(quote, now or self._clock()) > self._stale_threshold

    def needs_refresh(self, now: Optional[datetime] = None) -> bool:
        quote = self._held
        if quote is None:
            return True
        return self._age(quote, now or self._clock()) > self._refresh_interval

    # Refresh ----------------------------------------------------
    async def _fetch_and_store(self) -> Quote:
        self.fetch_count += 1
        logger.info("refreshing quote from upstream")
        try:
            quote = await self._source.fetch_quote()
        except UpstreamError as e:
            logger.warning("upstream refresh failed", extra={"error_code": e.code})
            raise
        self._held = quote
        logger.info(
            "quote refreshed",
            extra={"as_of": quote.as_of.isoformat(), "mid_rate": quote.mid_rate},
        )
        return quote

    def _on_refresh_done(self, task: "asyncio.Task[Quote]") -> None:
        if self._inflight is task:
            self._inflight = None
        # Mark the exception retrieved even if every waiter was cancelled.
        if not task.cancelled():
            task.exception()

    async def refresh(self) -> Quote:
        """Join the in-flight fetch, or start one if none is running."""
        task = self._inflight
        if task is None:
            task = asyncio.ensure_future(self._fetch_and_store())
            task.add_done_callback(self._on_refresh_done)
            self._inflight = task
        return await asyncio.shield(task)

    # Public API -------------------------------------------------
    def _respond(self, quote: Quote, now: datetime) -> QuoteResponse:
        return QuoteResponse(
            as_of=quote.as_of,
            mid_rate=quote.mid_rate,
            buy_spread_bps=self.buy_spread_bps,
            sell_spread_bps=self.sell_spread_bps,
            source_label=self.source_label,
            stale=self.is_stale(quote, now),
        )

    async def get_quote(self) -> QuoteResponse:
        quote = self._held
        if self.needs_refresh():
            try:
                quote = await self.refresh()
            except UpstreamError as e:
                fallback = self._held
                if not (self._serve_stale_on_error and fallback is not None):
                    raise RefreshFailed(e) from e
                logger.warning(
                    "serving cached quote after failed refresh",
                    extra={"error_code": e.code, "as_of": fallback.as_of.isoformat()},
                )
                quote = fallback
        return self._respond(quote, self._clock())  # type: ignore[arg-type]

    def peek_cache_state(self) -> CacheSnapshot:
        quote = self._held
        if quote is None:
            return CacheSnapshot(cached=False, stale=True)
        return CacheSnapshot(
            cached=True,
            stale=self.is_stale(quote),
            as_of=quote.as_of,
            mid_rate=quote.mid_rate,
        )


def build_quote_cache(
    settings: "Settings", source: QuoteSource, clock: Clock = utc_now
) -> QuoteCache:
    """Construct the process-wide cache from settings (called once at startup)."""
    return QuoteCache(
        source,
        buy_spread_bps=settings.buy_spread_bps,
        sell_spread_bps=settings.sell_spread_bps,
        source_label=settings.fx_source,
        refresh_interval=timedelta(milliseconds=settings.max_cache_ms),
        clock=clock,
        serve_stale_on_error=settings.serve_stale_on_error,
    )

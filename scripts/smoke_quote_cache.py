"""Smoke script for the quote cache against the live Banxico API.

Demonstrates:
 1. First access triggers an upstream fetch.
 2. A second access within the refresh interval reuses the cached quote
    (fetch_count stays at 1).
 3. Health snapshot after both calls.

Reads BANXICO_TOKEN etc. from the environment / .env like the service does.
NOTE: This is a lightweight diagnostic and not a formal test.
"""

import asyncio
from datetime import timedelta
from pprint import pprint

import httpx

from fx_adapter.core.config import get_settings
from fx_adapter.services.clock import format_iso_millis
from fx_adapter.services.rates.cache_service import build_quote_cache
from fx_adapter.services.rates.errors import RefreshFailed
from fx_adapter.services.rates.providers import BanxicoQuoteSource


async def run():
    settings = get_settings()
    out = {}
    async with httpx.AsyncClient() as client:
        source = BanxicoQuoteSource(
            client,
            base_url=settings.banxico_base_url,
            series_id=settings.banxico_series_id,
            token=settings.banxico_token,
            timeout=settings.http_timeout_seconds,
        )
        # Long interval so the second call is served from cache even for an old fixing
        settings = settings.model_copy(
            update={"max_cache_ms": int(timedelta(days=7).total_seconds() * 1000)}
        )
        cache = build_quote_cache(settings, source)
        for label in ("initial", "second"):
            try:
                resp = await cache.get_quote()
            except RefreshFailed as e:
                out[label] = {"error": e.code}
                continue
            out[label] = {
                "asOf": format_iso_millis(resp.as_of),
                "mid_rate": str(resp.mid_rate),
                "stale": resp.stale,
                "fetch_count": cache.fetch_count,
            }
        out["health"] = cache.peek_cache_state()
    pprint(out)


if __name__ == "__main__":
    asyncio.run(run())

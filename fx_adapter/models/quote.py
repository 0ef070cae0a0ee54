from __future__ import annotations
from pydantic import BaseModel, ConfigDict, Field

from fx_adapter.services.clock import format_iso_millis
from fx_adapter.services.money import rate_to_float
from fx_adapter.services.rates.base import CacheSnapshot, QuoteResponse


class QuoteOut(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    as_of: str = Field(..., alias="asOf", description="Fixing instant, ISO-8601 UTC")
    mid_rate: float = Field(..., gt=0)
    buy_spread_bps: int = Field(..., ge=0)
    sell_spread_bps: int = Field(..., ge=0)
    source: str
    stale: bool

    @classmethod
    def from_response(cls, resp: QuoteResponse) -> "QuoteOut":
        return cls(
            as_of=format_iso_millis(resp.as_of),
            mid_rate=rate_to_float(resp.mid_rate),
            buy_spread_bps=resp.buy_spread_bps,
            sell_spread_bps=resp.sell_spread_bps,
            source=resp.source_label,
            stale=resp.stale,
        )


class HealthOut(BaseModel):
    ok: bool = True
    source: str
    cached: bool
    stale: bool

    @classmethod
    def from_snapshot(cls, snapshot: CacheSnapshot, source: str) -> "HealthOut":
        return cls(source=source, cached=snapshot.cached, stale=snapshot.stale)


class ErrorOut(BaseModel):
    error: str

from __future__ import annotations

"""Quote records and the quote source interface.

A `Quote` only exists once both the fixing date and the rate parsed; sources
raise instead of returning partial records.
"""
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Any, Optional


@dataclass(frozen=True)
class Quote:
    as_of: datetime
    mid_rate: Decimal
    raw_source_payload: Any = field(default=None, repr=False, compare=False)


@dataclass(frozen=True)
class QuoteResponse:
    as_of: datetime
    mid_rate: Decimal
    buy_spread_bps: int
    sell_spread_bps: int
    source_label: str
    stale: bool


@dataclass(frozen=True)
class CacheSnapshot:
    cached: bool
    stale: bool
    as_of: Optional[datetime] = None
    mid_rate: Optional[Decimal] = None


class QuoteSource(ABC):
    @abstractmethod
    async def fetch_quote(self) -> Quote:
        """Fetch and normalize one observation; raise UpstreamError on failure."""
        raise NotImplementedError

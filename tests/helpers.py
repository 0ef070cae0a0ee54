from __future__ import annotations

import asyncio
from datetime import datetime, timedelta, timezone
from decimal import Decimal
from typing import Any, Iterable, List, Optional, Union

from fx_adapter.services.rates.base import Quote, QuoteSource
from fx_adapter.services.rates.providers import parse_banxico_payload

FIXING = datetime(2025, 9, 1, 18, 0, tzinfo=timezone.utc)


def banxico_payload(dato: Any = "18.3452", fecha: Any = "01/09/2025") -> dict:
    point: dict = {}
    if dato is not None:
        point["dato"] = dato
    if fecha is not None:
        point["fecha"] = fecha
    return {
        "bmx": {
            "series": [
                {
                    "idSerie": "SF43718",
                    "titulo": "Tipo de cambio Pesos por dólar E.U.A. Fecha de determinación (FIX)",
                    "datos": [point],
                }
            ]
        }
    }


def make_quote(as_of: datetime = FIXING, rate: str = "18.3452") -> Quote:
    return Quote(as_of=as_of, mid_rate=Decimal(rate), raw_source_payload={})


class FakeClock:
    def __init__(self, now: datetime) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs: float) -> None:
        self.now += timedelta(**kwargs)


Outcome = Union[Quote, Exception]


class FakeQuoteSource(QuoteSource):
    """Returns queued outcomes in order; the last one repeats.

    When `gated` is set, every fetch waits for `release()` before answering.
    """

    def __init__(self, outcomes: Iterable[Outcome], *, gated: bool = False) -> None:
        self._outcomes: List[Outcome] = list(outcomes)
        self._gated = gated
        self._gate: Optional[asyncio.Event] = None
        self.calls = 0

    def release(self) -> None:
        if self._gate is None:
            self._gate = asyncio.Event()
        self._gate.set()

    async def fetch_quote(self) -> Quote:
        self.calls += 1
        if self._gated:
            if self._gate is None:
                self._gate = asyncio.Event()
            await self._gate.wait()
        outcome = self._outcomes.pop(0) if len(self._outcomes) > 1 else self._outcomes[0]
        if isinstance(outcome, Exception):
            raise outcome
        return outcome


class PayloadQuoteSource(QuoteSource):
    """Feeds a canned upstream body through the real Banxico parser."""

    def __init__(self, payload: Any) -> None:
        self.payload = payload
        self.calls = 0

    async def fetch_quote(self) -> Quote:
        self.calls += 1
        return parse_banxico_payload(self.payload)

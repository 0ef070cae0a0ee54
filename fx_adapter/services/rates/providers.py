from __future__ import annotations

"""Banxico SIE quote source.

Fetches the latest observation ("oportuno") of one series and normalizes it
into a `Quote`. The FIX is published once per business day without an
intraday timestamp, so `as_of` pins the fixing date to 18:00 UTC. That is an
approximation of the publication instant, not a measurement.
"""
import logging
from datetime import date, datetime, time, timezone
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, Optional

import httpx

from fx_adapter.services.http_client import HttpError, JsonDecodeError, get_json
from fx_adapter.services.money import round4
from .base import Quote, QuoteSource
from .errors import UpstreamParseError, UpstreamUnavailable

logger = logging.getLogger("fx_adapter.upstream")

FIXING_TIME_UTC = time(18, 0, tzinfo=timezone.utc)
_DATE_FORMATS = ("%d/%m/%Y", "%Y-%m-%d")


def parse_rate(value: Any) -> Decimal:
    # bool is an int subclass; a JSON true is never a rate
    if value is None or isinstance(value, bool):
        raise UpstreamParseError(f"rate missing or not numeric: {value!r}")
    text = str(value).strip().replace(",", "")
    try:
        rate = Decimal(text)
    except InvalidOperation:
        raise UpstreamParseError(f"rate not numeric: {value!r}") from None
    if not rate.is_finite():
        raise UpstreamParseError(f"rate not a finite positive number: {value!r}")
    try:
        rounded = round4(rate)
    except InvalidOperation:
        raise UpstreamParseError(f"rate out of range: {value!r}") from None
    if rounded <= 0:
        raise UpstreamParseError(f"rate not a finite positive number: {value!r}")
    return rounded


def parse_fixing_date(value: Any) -> date:
    if not isinstance(value, str) or not value.strip():
        raise UpstreamParseError(f"date missing: {value!r}")
    for fmt in _DATE_FORMATS:
        try:
            return datetime.strptime(value.strip(), fmt).date()
        except ValueError:
            continue
    raise UpstreamParseError(f"date not parseable: {value!r}")


def parse_banxico_payload(payload: Any) -> Quote:
    """Extract `bmx.series[0].datos[0]` and build a Quote from it."""
    try:
        point = payload["bmx"]["series"][0]["datos"][0]
    except (KeyError, IndexError, TypeError):
        raise UpstreamParseError("payload has no bmx.series[0].datos[0]") from None
    if not isinstance(point, dict):
        raise UpstreamParseError("observation is not an object")

    mid_rate = parse_rate(point.get("dato"))
    fixing_date = parse_fixing_date(point.get("fecha"))
    as_of = datetime.combine(fixing_date, FIXING_TIME_UTC)
    return Quote(as_of=as_of, mid_rate=mid_rate, raw_source_payload=payload)


class BanxicoQuoteSource(QuoteSource):
    def __init__(
        self,
        client: httpx.AsyncClient,
        *,
        base_url: str,
        series_id: str,
        token: Optional[str] = None,
        timeout: float = 5.0,
    ):
        self._client = client
        self._series_id = series_id
        self._token = token
        self._timeout = timeout
        self.url = (
            f"{base_url.rstrip('/')}/series/{series_id}/datos/oportuno?locale=en"
        )

    def _headers(self) -> Dict[str, str]:
        headers = {"Accept": "application/json"}
        if self._token:
            headers["Bmx-Token"] = self._token
        return headers

    async def fetch_quote(self) -> Quote:  # type: ignore[override]
        try:
            payload = await get_json(
                self._client, self.url, headers=self._headers(), timeout=self._timeout
            )
        except HttpError as e:
            raise UpstreamUnavailable(e.status_code, reason=e.reason) from e
        except JsonDecodeError as e:
            raise UpstreamParseError("response body is not JSON") from e
        logger.debug("banxico payload %s", payload, extra={"series_id": self._series_id})
        return parse_banxico_payload(payload)

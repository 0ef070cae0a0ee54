from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Request

from fx_adapter.core.config import Settings
from fx_adapter.models import ErrorOut, QuoteOut
from fx_adapter.services.rates.cache_service import QuoteCache

"""FX quote router.

Endpoints:
    - GET /fx/{pair}/latest -> cached quote with spreads and staleness flag

Only the configured pair is served; refresh failures surface as 502 through
the RefreshFailed exception handler.
"""

router = APIRouter(prefix="/fx", tags=["fx"])


def get_quote_cache(request: Request) -> QuoteCache:
    return request.app.state.quote_cache


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


@router.get(
    "/{pair}/latest",
    response_model=QuoteOut,
    responses={502: {"model": ErrorOut, "description": "Upstream refresh failed"}},
    summary="Latest quote for the configured pair",
)
async def latest_quote(
    pair: str,
    cache: QuoteCache = Depends(get_quote_cache),
    settings: Settings = Depends(get_app_settings),
):
    if pair.lower() != settings.fx_pair.lower():
        raise HTTPException(status_code=404, detail=f"unsupported pair '{pair}'")
    resp = await cache.get_quote()
    return QuoteOut.from_response(resp)

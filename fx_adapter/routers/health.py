from fastapi import APIRouter, Depends

from fx_adapter.core.config import Settings
from fx_adapter.models import HealthOut
from fx_adapter.services.rates.cache_service import QuoteCache
from .fx import get_app_settings, get_quote_cache

router = APIRouter(tags=["health"])


@router.get("/healthz", response_model=HealthOut, summary="Liveness and cache state")
async def healthz(
    cache: QuoteCache = Depends(get_quote_cache),
    settings: Settings = Depends(get_app_settings),
):
    # Never triggers a refresh.
    return HealthOut.from_snapshot(cache.peek_cache_state(), source=settings.fx_source)

from functools import lru_cache
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment with defaults.

    Environment variable mapping follows pydantic's rules (e.g., BANXICO_TOKEN,
    BUY_SPREAD_BPS, SELL_SPREAD_BPS, MAX_CACHE_MS, FX_SOURCE, PORT).
    """

    # Basic app metadata
    app_name: str = "FX Adapter"
    debug: bool = False
    version: str = "0.1.0"

    # Upstream (Banxico SIE API)
    banxico_base_url: str = "https://www.banxico.org.mx/SieAPIRest/service/v1"
    banxico_series_id: str = "SF43718"  # USD/MXN FIX
    banxico_token: Optional[str] = None
    http_timeout_seconds: float = Field(5.0, gt=0)

    # Quote shaping
    buy_spread_bps: int = Field(25, ge=0)
    sell_spread_bps: int = Field(25, ge=0)
    fx_source: str = "banxico_fix"
    fx_pair: str = "usd-mxn"

    # Cache policy
    max_cache_ms: int = Field(60 * 60 * 1000, gt=0)
    serve_stale_on_error: bool = False

    port: int = 8787

    model_config = SettingsConfigDict(
        env_file=".env", case_sensitive=False, extra="ignore"
    )


@lru_cache
def get_settings() -> Settings:
    return Settings()

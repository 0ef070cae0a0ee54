from __future__ import annotations

import pytest
from pydantic import ValidationError

from fx_adapter.core.config import Settings


def test_defaults() -> None:
    settings = Settings(_env_file=None)

    assert settings.banxico_series_id == "SF43718"
    assert settings.banxico_token is None
    assert settings.buy_spread_bps == 25
    assert settings.sell_spread_bps == 25
    assert settings.max_cache_ms == 3_600_000
    assert settings.fx_source == "banxico_fix"
    assert settings.port == 8787
    assert settings.serve_stale_on_error is False


def test_environment_overrides(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("BANXICO_TOKEN", "tok")
    monkeypatch.setenv("BANXICO_SERIES_ID", "SF60653")
    monkeypatch.setenv("BUY_SPREAD_BPS", "40")
    monkeypatch.setenv("SELL_SPREAD_BPS", "15")
    monkeypatch.setenv("MAX_CACHE_MS", "60000")
    monkeypatch.setenv("FX_SOURCE", "banxico_fix_test")
    monkeypatch.setenv("PORT", "9000")

    settings = Settings(_env_file=None)

    assert settings.banxico_token == "tok"
    assert settings.banxico_series_id == "SF60653"
    assert (settings.buy_spread_bps, settings.sell_spread_bps) == (40, 15)
    assert settings.max_cache_ms == 60_000
    assert settings.fx_source == "banxico_fix_test"
    assert settings.port == 9000


@pytest.mark.parametrize(
    "env",
    [
        {"BUY_SPREAD_BPS": "-1"},
        {"SELL_SPREAD_BPS": "-5"},
        {"MAX_CACHE_MS": "0"},
        {"HTTP_TIMEOUT_SECONDS": "0"},
    ],
)
def test_invalid_values_rejected(monkeypatch: pytest.MonkeyPatch, env: dict) -> None:
    for key, value in env.items():
        monkeypatch.setenv(key, value)

    with pytest.raises(ValidationError):
        Settings(_env_file=None)

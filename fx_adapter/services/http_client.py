from __future__ import annotations

"""Lightweight async HTTP helper for JSON GETs.

Single attempt, bounded by a timeout. Callers own the `httpx.AsyncClient` so
connections are pooled across requests for the lifetime of the app.
"""
from typing import Any, Dict, Optional

import httpx


class HttpError(Exception):
    def __init__(
        self, message: str, *, status_code: Optional[int] = None, reason: str = "http"
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.reason = reason


class JsonDecodeError(ValueError):
    pass


async def get_json(
    client: httpx.AsyncClient,
    url: str,
    *,
    headers: Optional[Dict[str, str]] = None,
    timeout: float = 5.0,
) -> Any:
    try:
        resp = await client.get(url, headers=headers, timeout=timeout)
    except httpx.TimeoutException as e:
        raise HttpError(f"Timed out fetching {url}", reason="timeout") from e
    except httpx.DecodingError as e:
        raise JsonDecodeError(f"Response from {url} could not be decoded") from e
    except httpx.RequestError as e:
        raise HttpError(f"Failed to reach {url}: {e}", reason="unreachable") from e
    if not resp.is_success:
        raise HttpError(
            f"HTTP {resp.status_code} for {url}", status_code=resp.status_code
        )
    try:
        return resp.json()
    except ValueError as e:
        raise JsonDecodeError(f"Response from {url} is not JSON") from e

from __future__ import annotations

"""Upstream / refresh error taxonomy.

None of these are retried by the cache: a request that triggers a refresh
either succeeds or fails once. Each error carries a normalized `code` that the
HTTP layer returns verbatim in the 502 body.
"""
from typing import Optional


class UpstreamError(Exception):
    """Base class for failures originating at the rate source."""

    code: str = "BANXICO_UPSTREAM_ERROR"

    def __init__(self, message: Optional[str] = None) -> None:
        super().__init__(message or self.code)


class UpstreamUnavailable(UpstreamError):
    """Non-2xx response, timeout or transport failure talking to the source."""

    def __init__(self, status_code: Optional[int], reason: Optional[str] = None):
        self.status_code = status_code
        self.reason = reason
        if status_code is not None:
            self.code = f"BANXICO_UPSTREAM_{status_code}"
        else:
            self.code = f"BANXICO_UPSTREAM_{(reason or 'unreachable').upper()}"
        super().__init__(self.code)


class UpstreamParseError(UpstreamError):
    code = "BANXICO_PARSE_ERROR"

    def __init__(self, detail: str):
        self.detail = detail
        super().__init__(f"{self.code}: {detail}")


class RefreshFailed(Exception):
    """Raised by the quote cache when a needed refresh did not succeed."""

    def __init__(self, cause: UpstreamError):
        self.cause = cause
        self.code = cause.code
        super().__init__(self.code)

from datetime import timezone
from typing import Optional

import httpx
from dateutil import parser as dtparser

from pickem.core.config import settings

DEFAULT_HEADERS = {
    "User-Agent": "pickem-backend/0.1",
    "Accept": "application/json",
}


def make_client(
    base_url: str = "",
    headers: Optional[dict] = None,
    timeout_s: Optional[float] = None,
    transport: Optional[httpx.BaseTransport] = None,
) -> httpx.Client:
    # Providers get one bounded timeout; nothing here retries on its own.
    timeout = httpx.Timeout(timeout_s if timeout_s is not None else settings.HTTP_TIMEOUT_S)
    merged = dict(DEFAULT_HEADERS)
    if headers:
        merged.update(headers)
    return httpx.Client(
        base_url=base_url,
        headers=merged,
        timeout=timeout,
        follow_redirects=True,
        transport=transport,
    )


def parse_api_datetime(value):
    """Parse provider timestamps like '2024-09-05T20:20:00.000Z' (always UTC)."""
    if not value:
        return None
    dt = dtparser.isoparse(str(value))
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt

import asyncio
import time
from typing import Any

import httpx

from txlens.exceptions import ExternalServiceError

JSON_HEADERS = {"Content-Type": "application/json", "Accept": "application/json"}


class RateLimitedClient:
    """Async JSON POST client for RPC endpoints.

    Requests are spaced by a minimum interval and capped in flight by a semaphore.
    Anything short of a 200 response with a JSON body raises ExternalServiceError,
    so callers can retry it or fall back.
    """

    def __init__(
        self,
        rate_per_second: float = 10.0,
        timeout: float = 30.0,
        max_concurrency: int = 8,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._min_interval = 1.0 / rate_per_second
        self._last_request_time = 0.0
        self._lock = asyncio.Lock()
        self._in_flight = asyncio.Semaphore(max_concurrency)
        self._client = httpx.AsyncClient(timeout=timeout, headers=JSON_HEADERS, transport=transport)

    async def _wait_for_slot(self) -> None:
        async with self._lock:
            now = time.monotonic()
            elapsed = now - self._last_request_time
            if elapsed < self._min_interval:
                await asyncio.sleep(self._min_interval - elapsed)
            self._last_request_time = time.monotonic()

    async def post_json(self, url: str, payload: dict | list) -> Any:
        """POST payload and return the decoded JSON body."""
        async with self._in_flight:
            await self._wait_for_slot()
            try:
                response = await self._client.post(url, json=payload)
            except httpx.TransportError as e:
                raise ExternalServiceError(f"HTTP transport error for {url}: {e}") from e

        if response.status_code != 200:
            raise ExternalServiceError(f"HTTP {response.status_code} from {url}: {response.text[:200]!r}")
        try:
            return response.json()
        except ValueError as e:
            raise ExternalServiceError(f"Non-JSON response from {url}: {response.text[:200]!r}") from e

    async def close(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> "RateLimitedClient":
        return self

    async def __aexit__(self, *args: object) -> None:
        await self.close()

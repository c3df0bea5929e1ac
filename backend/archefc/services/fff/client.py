"""
FFF HTTP Client with Retry
Handles GET requests to the FFF API with request queuing and linear backoff.
"""

import httpx
import asyncio
from typing import Any, Awaitable, Callable, Dict, Optional
import logging

from archefc.exceptions import ExternalAPIError
from .queue import RequestQueue

logger = logging.getLogger(__name__)


class FFFHTTPClient:
    """
    Async HTTP client for the FFF API with retry-with-backoff.

    Every attempt goes through the request queue when one is configured.
    Network-level failures (connection errors, timeouts) and 5xx responses
    are retried up to `max_attempts` total attempts, waiting
    `attempt * retry_delay` seconds between them. Anything else fails on
    the first attempt. Only GET is exposed, so every retried call is
    idempotent.
    """

    BASE_URL = "https://api-dofa.fff.fr/api"
    SERVICE_NAME = "FFF"

    def __init__(
        self,
        base_url: str = BASE_URL,
        queue: Optional[RequestQueue] = None,
        max_attempts: int = 3,
        retry_delay: float = 2.0,
        default_timeout: float = 10.0,
        client: Optional[httpx.AsyncClient] = None,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
    ) -> None:
        """
        Initialize HTTP client.

        Args:
            base_url: FFF API root
            queue: Optional request queue every attempt is routed through
            max_attempts: Total attempts per call, first one included (default: 3)
            retry_delay: Backoff unit in seconds; attempt N waits N * retry_delay
            default_timeout: Per-request timeout in seconds (default: 10s)
            client: Pre-built httpx client (tests pass one with a mock transport)
            sleep: Sleep coroutine used between attempts
        """
        self.base_url = base_url.rstrip("/")
        self.queue = queue
        self.max_attempts = max(1, max_attempts)
        self.retry_delay = retry_delay
        self.default_timeout = default_timeout
        self.client = client or httpx.AsyncClient(
            timeout=default_timeout,
            follow_redirects=True,
            headers={"Content-Type": "application/json"},
        )
        self._sleep = sleep

    @staticmethod
    def is_retryable(error: Exception) -> bool:
        """Network-level failures and 5xx responses are worth another attempt."""
        if isinstance(error, httpx.TransportError):
            return True
        if isinstance(error, httpx.HTTPStatusError):
            return error.response.status_code >= 500
        return False

    def backoff_delay(self, attempt: int) -> float:
        """Delay before the attempt following `attempt` (1-based)."""
        return attempt * self.retry_delay

    async def get(
        self,
        endpoint: str,
        params: Optional[Dict[str, Any]] = None,
        timeout: Optional[float] = None,
    ) -> Any:
        """
        Make GET request to the FFF API.

        Args:
            endpoint: API path relative to the base URL (e.g., "clubs/123")
            params: Optional query parameters
            timeout: Per-request timeout override in seconds

        Returns:
            Decoded JSON body

        Raises:
            ExternalAPIError: If the request fails for good
        """
        url = f"{self.base_url}/{endpoint.lstrip('/')}"
        timeout = self.default_timeout if timeout is None else timeout

        attempt = 0
        while True:
            attempt += 1
            try:
                return await self._send(url, params, timeout)
            except (httpx.RequestError, httpx.HTTPStatusError) as e:
                upstream_status = (
                    e.response.status_code if isinstance(e, httpx.HTTPStatusError) else None
                )
                if not self.is_retryable(e) or attempt >= self.max_attempts:
                    logger.error(
                        f"HTTP request failed for {endpoint} after {attempt} attempt(s): {str(e)}"
                    )
                    raise ExternalAPIError(
                        self.SERVICE_NAME,
                        f"request to {endpoint} failed",
                        details={
                            "endpoint": endpoint,
                            "upstream_status": upstream_status,
                            "attempts": attempt,
                        },
                    ) from e

                delay = self.backoff_delay(attempt)
                logger.warning(
                    f"Attempt {attempt}/{self.max_attempts} for {endpoint} failed "
                    f"({str(e) or type(e).__name__}), retrying in {delay:.1f}s"
                )
                await self._sleep(delay)
            except ValueError as e:
                logger.error(f"Invalid JSON from {endpoint}: {str(e)}")
                raise ExternalAPIError(
                    self.SERVICE_NAME,
                    f"invalid response from {endpoint}",
                    details={"endpoint": endpoint, "attempts": attempt},
                ) from e

    async def _send(self, url: str, params: Optional[Dict[str, Any]], timeout: float) -> Any:
        if self.queue is not None:
            return await self.queue.enqueue(lambda: self._request(url, params, timeout))
        return await self._request(url, params, timeout)

    async def _request(self, url: str, params: Optional[Dict[str, Any]], timeout: float) -> Any:
        response = await self.client.get(url, params=params, timeout=timeout)
        response.raise_for_status()
        return response.json()

    async def close(self) -> None:
        """Close HTTP client."""
        await self.client.aclose()

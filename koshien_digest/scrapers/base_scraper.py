from typing import Any, Dict, Optional

import httpx
from loguru import logger
from tenacity import (
    AsyncRetrying,
    RetryError,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

# Define common HTTP status codes that warrant a retry
RETRYABLE_STATUS_CODES = {408, 429, 500, 502, 503, 504}

USER_AGENT = "koshien-digest/0.1"


class ScraperError(Exception):
    """Custom exception for scraper-related errors."""

    pass


class RetryableStatusError(ScraperError):
    """Raised for status codes worth another attempt (408, 429, 5xx)."""

    pass


class BaseScraper:
    """Shared HTTP plumbing for the roster and game list adapters."""

    source: str = "unknown"

    def __init__(
        self,
        client: Optional[httpx.AsyncClient] = None,
        timeout: float = 30.0,
        max_attempts: int = 1,
    ):
        self.max_attempts = max(1, max_attempts)
        self.client = client or httpx.AsyncClient(
            timeout=httpx.Timeout(timeout),
            follow_redirects=True,
            headers={"User-Agent": USER_AGENT},
        )

    async def _make_request(
        self,
        method: str,
        url: str,
        params: Optional[Dict[str, Any]] = None,
        **kwargs,
    ) -> httpx.Response:
        """Makes an HTTP request, retrying up to `max_attempts` times.

        Raises:
            ScraperError: on transport failure or an error status once
                attempts are exhausted.
        """
        logger.debug(f"Making {method} request to {self.source}: {url}")
        try:
            async for attempt in AsyncRetrying(
                stop=stop_after_attempt(self.max_attempts),
                wait=wait_exponential(multiplier=1, min=1, max=10),
                retry=retry_if_exception_type(
                    (httpx.RequestError, RetryableStatusError)
                ),
                reraise=False,
            ):
                with attempt:
                    response = await self._send(method, url, params=params, **kwargs)
        except RetryError as e:
            # This catches the error after all retries have failed
            cause = e.last_attempt.exception()
            logger.error(
                f"Giving up on {self.source} request to {url} after "
                f"{self.max_attempts} attempt(s): {cause}"
            )
            if isinstance(cause, ScraperError):
                raise cause
            raise ScraperError(f"Request to {self.source} failed: {cause}") from cause

        logger.debug(f"Request successful: {response.status_code} for {url}")
        return response

    async def _send(
        self, method: str, url: str, params: Optional[Dict[str, Any]] = None, **kwargs
    ) -> httpx.Response:
        try:
            response = await self.client.request(method, url, params=params, **kwargs)
        except httpx.InvalidURL as e:
            # Keys from the roster can carry stray whitespace or control characters
            logger.warning(f"Invalid URL for {self.source}: {e}")
            raise ScraperError(f"Invalid URL {url!r}: {e}") from e
        except httpx.RequestError as e:
            # Network errors, timeouts etc.
            logger.warning(f"Request error for {self.source}: {e!r}")
            raise

        if response.status_code in RETRYABLE_STATUS_CODES:
            logger.warning(
                f"{self.source} answered {response.status_code} for {response.request.url.path}"
            )
            raise RetryableStatusError(f"HTTP {response.status_code} from {self.source}")

        try:
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            logger.error(
                f"HTTP error during request for {self.source}: {e.response.status_code}"
            )
            raise ScraperError(f"HTTP error: {e.response.status_code}") from e
        return response

    async def close(self):
        """Closes the underlying HTTP client."""
        await self.client.aclose()
        logger.debug(f"Closed HTTP client for {self.source}")

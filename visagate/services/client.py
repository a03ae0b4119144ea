"""
ProviderClient - async HTTP client for a rate-limited visa provider.

One GET per attempt. HTTP 429 is retried with capped exponential backoff;
every other failure is terminal and mapped onto the FetchError taxonomy.
"""

import asyncio
from dataclasses import dataclass
from typing import Any, Awaitable, Callable

import httpx
from loguru import logger

from visagate.services.errors import (
    MalformedResponseError,
    NetworkError,
    RateLimitError,
    RequestError,
    UpstreamError,
)

MAX_RETRIES = 3
BASE_RETRY_DELAY = 1.0  # seconds
MAX_RETRY_DELAY = 10.0  # seconds


def retry_delay(attempt: int) -> float:
    """Backoff before retry number ``attempt + 1`` (attempt counts from 0)."""
    return min(BASE_RETRY_DELAY * 2**attempt, MAX_RETRY_DELAY)


@dataclass
class ProviderConfig:
    """Configuration for one upstream provider."""

    service_id: str
    url: str
    api_key: str = ""
    user_agent: str = "VisaGate/1.0"
    timeout: float = 10.0


class ProviderClient:
    """
    Fetches the raw provider payload for a (destination, nationality) pair.

    Usage:
        client = ProviderClient(ProviderConfig(
            service_id="ivisa",
            url="https://api.ivisa.com/visa-options",
            api_key="...",
        ))
        payload = await client.fetch("ID", "US")
    """

    def __init__(
        self,
        config: ProviderConfig,
        http_client: httpx.AsyncClient | None = None,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
    ):
        self.config = config
        self._http_client = http_client
        self._owns_client = http_client is None
        self._sleep = sleep

    @property
    def service_id(self) -> str:
        return self.config.service_id

    async def _get_http_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client."""
        if self._http_client is None:
            self._http_client = httpx.AsyncClient(
                timeout=httpx.Timeout(self.config.timeout),
                follow_redirects=True,
            )
        return self._http_client

    async def fetch(self, destination: str, nationality: str) -> dict[str, Any]:
        """
        Fetch the provider payload, retrying on rate limiting.

        Returns:
            The decoded JSON object

        Raises:
            RateLimitError: If still rate limited after MAX_RETRIES retries
            UpstreamError: For any other non-2xx status
            NetworkError: If no response was received
            RequestError: If the request could not be sent
            MalformedResponseError: If the body is not a JSON object
        """
        params = {
            "countryCode": destination,
            "nationality": nationality,
            "apiKey": self.config.api_key,
        }

        for attempt in range(MAX_RETRIES + 1):
            response = await self._send(params)

            if response.status_code == httpx.codes.TOO_MANY_REQUESTS:
                if attempt == MAX_RETRIES:
                    logger.error(
                        f"{self.service_id}: still rate limited after "
                        f"{attempt + 1} attempts"
                    )
                    raise RateLimitError(self.service_id, attempts=attempt + 1)

                delay = retry_delay(attempt)
                logger.warning(
                    f"Rate limited, retrying in {delay}s "
                    f"(attempt {attempt + 1}/{MAX_RETRIES})"
                )
                await self._sleep(delay)
                continue

            if not response.is_success:
                raise UpstreamError(
                    response.status_code,
                    response.reason_phrase,
                    service_id=self.service_id,
                )

            return self._decode(response)

        # The loop always returns or raises on its last attempt
        raise RateLimitError(self.service_id, attempts=MAX_RETRIES + 1)

    async def _send(self, params: dict[str, Any]) -> httpx.Response:
        """Execute a single GET attempt."""
        client = await self._get_http_client()

        try:
            return await client.get(
                self.config.url,
                params=params,
                headers={
                    "User-Agent": self.config.user_agent,
                    "Accept": "application/json",
                },
                timeout=self.config.timeout,
            )

        except (httpx.UnsupportedProtocol, httpx.LocalProtocolError) as e:
            raise RequestError(str(e), service_id=self.service_id) from e

        except httpx.TransportError as e:
            logger.warning(f"{self.service_id}: no response received: {e!r}")
            raise NetworkError(service_id=self.service_id) from e

        except (httpx.RequestError, httpx.InvalidURL) as e:
            raise RequestError(str(e), service_id=self.service_id) from e

    def _decode(self, response: httpx.Response) -> dict[str, Any]:
        try:
            data = response.json()
        except ValueError as e:
            raise MalformedResponseError(
                "body is not valid JSON", service_id=self.service_id
            ) from e

        if not isinstance(data, dict):
            raise MalformedResponseError(
                f"expected a JSON object, got {type(data).__name__}",
                service_id=self.service_id,
            )
        return data

    async def close(self) -> None:
        """Close the HTTP client if this instance created it."""
        if self._http_client and self._owns_client:
            await self._http_client.aclose()
            self._http_client = None
        logger.debug(f"ProviderClient {self.service_id} closed")

    async def __aenter__(self) -> "ProviderClient":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

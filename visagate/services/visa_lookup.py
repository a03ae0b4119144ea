"""
Visa lookup request handlers.

Per request: validate -> derive key -> read cache -> (fetch -> transform ->
replace cache) -> respond. Nothing is shared between requests except the
store, and every failure is turned into a JSON envelope here.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Any, Callable, Sequence

from fastapi import status
from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession

from visagate.datasource.ivisa import IVisaSource
from visagate.datasource.kitas import KITAS_OVERRIDES
from visagate.datasource.types import VisaOption
from visagate.datastore.repositories import (
    ELIGIBILITY_COLLECTION,
    OPTIONS_COLLECTION,
    VisaCacheRepository,
)
from visagate.exceptions import (
    ApiError,
    InvalidFormatError,
    InvalidTypesError,
    MethodNotAllowedError,
    MissingFieldsError,
)
from visagate.services.cache import CACHE_TTL, CacheRecord, derive_cache_key, utcnow
from visagate.services.client import ProviderClient
from visagate.services.merger import merge_and_sort

# JSON falsy scalars (null, "", 0, false) count as absent
_MISSING = (None, "", 0)


@dataclass
class LookupResponse:
    """Status code and JSON body for one request."""

    status_code: int
    body: dict[str, Any] = field(default_factory=dict)


def validate_request(method: str, body: Any) -> tuple[str, str]:
    """
    Check the method and body, returning (countryCode, nationality).

    Raises the first ApiError that applies, in this order: method,
    missing fields, field types, field length.
    """
    if method.upper() != "POST":
        raise MethodNotAllowedError()

    if not isinstance(body, dict):
        body = {}

    country_code = body.get("countryCode")
    nationality = body.get("nationality")

    if country_code in _MISSING or nationality in _MISSING:
        raise MissingFieldsError()

    if not isinstance(country_code, str) or not isinstance(nationality, str):
        raise InvalidTypesError()

    if len(country_code) != 2 or len(nationality) != 2:
        raise InvalidFormatError()

    return country_code, nationality


class CachedLookupHandler(ABC):
    """
    Shared request flow for the cached provider endpoints.

    Subclasses name their cache collection and produce the payload to cache
    on a miss.
    """

    collection: str
    label: str

    def __init__(
        self,
        session_factory: Callable[[], AsyncSession],
        clock: Callable[[], datetime] = utcnow,
        ttl: timedelta = CACHE_TTL,
    ):
        self._session_factory = session_factory
        self._clock = clock
        self._ttl = ttl

    @abstractmethod
    async def _fetch_payload(self, destination: str, nationality: str) -> Any:
        """Fetch and transform fresh data for the pair."""
        ...

    async def handle(self, method: str, body: Any) -> LookupResponse:
        """Run one request through the full pipeline."""
        try:
            destination, nationality = validate_request(method, body)
            return await self._lookup(destination, nationality)

        except ApiError as e:
            logger.info(f"Rejected {self.label.lower()} request: {e.error}")
            return LookupResponse(e.status_code, e.to_response())

        except Exception as e:
            logger.error(f"Error getting {self.label.lower()}: {e}")
            return LookupResponse(
                status.HTTP_500_INTERNAL_SERVER_ERROR,
                {
                    "success": False,
                    "message": f"Failed to get {self.label.lower()}",
                    "error": str(e) or "Unknown error occurred",
                },
            )

    async def _lookup(self, destination: str, nationality: str) -> LookupResponse:
        logger.info(
            f"Getting {self.label.lower()} for country: {destination}, "
            f"nationality: {nationality}"
        )
        cache_key = derive_cache_key(destination, nationality)

        async with self._session_factory() as session:
            cached = await VisaCacheRepository(session).get(self.collection, cache_key)

        if cached is not None:
            if cached.is_fresh(self._clock(), self._ttl):
                logger.info(f"Returning cached {self.label.lower()}")
                return self._success(cached.payload, cached=True)
            logger.info("Cached data expired, fetching fresh data")

        payload = await self._fetch_payload(destination, nationality)

        # A failed write fails the request; uncached data is not served.
        record = CacheRecord(key=cache_key, payload=payload, stored_at=self._clock())
        async with self._session_factory() as session:
            await VisaCacheRepository(session).replace(self.collection, record)

        return self._success(payload, cached=False)

    def _success(self, payload: Any, cached: bool) -> LookupResponse:
        source = "from cache" if cached else "successfully"
        return LookupResponse(
            status.HTTP_200_OK,
            {
                "success": True,
                "data": payload,
                "message": f"{self.label} retrieved {source}",
                "cached": cached,
            },
        )


class VisaEligibilityHandler(CachedLookupHandler):
    """iVisa options merged with the KITAS overrides, sorted."""

    collection = ELIGIBILITY_COLLECTION
    label = "Visa eligibility options"

    def __init__(
        self,
        session_factory: Callable[[], AsyncSession],
        source: IVisaSource,
        overrides: Sequence[VisaOption] = KITAS_OVERRIDES,
        clock: Callable[[], datetime] = utcnow,
        ttl: timedelta = CACHE_TTL,
    ):
        super().__init__(session_factory, clock=clock, ttl=ttl)
        self.source = source
        self.overrides = overrides

    async def _fetch_payload(
        self, destination: str, nationality: str
    ) -> list[dict[str, Any]]:
        logger.info("Fetching fresh visa eligibility data from iVisa API")
        options = await self.source.fetch(destination, nationality)
        merged = merge_and_sort(options, destination, self.overrides)
        return [option.to_dict() for option in merged]


class VisaOptionsHandler(CachedLookupHandler):
    """Provider payload cached and returned unchanged."""

    collection = OPTIONS_COLLECTION
    label = "Visa options"

    def __init__(
        self,
        session_factory: Callable[[], AsyncSession],
        client: ProviderClient,
        clock: Callable[[], datetime] = utcnow,
        ttl: timedelta = CACHE_TTL,
    ):
        super().__init__(session_factory, clock=clock, ttl=ttl)
        self.client = client

    async def _fetch_payload(self, destination: str, nationality: str) -> dict[str, Any]:
        logger.info("Fetching fresh visa data from API")
        return await self.client.fetch(destination, nationality)

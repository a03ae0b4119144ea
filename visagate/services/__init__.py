"""
Service layer - cached, retrying access to the visa providers.

Provides:
- derive_cache_key / is_fresh / CacheRecord: content-addressed cache primitives
- ProviderClient: HTTP client with 429 backoff and error mapping
- merge_and_sort: provider + override merging with a stable order
- FetchError and friends: upstream failure taxonomy
"""

from visagate.services.errors import (
    ServiceError,
    CacheError,
    FetchError,
    FetchErrorKind,
    RateLimitError,
    UpstreamError,
    NetworkError,
    RequestError,
    MalformedResponseError,
)
from visagate.services.cache import CACHE_TTL, CacheRecord, derive_cache_key, is_fresh
from visagate.services.client import ProviderClient, ProviderConfig
from visagate.services.merger import merge_and_sort

__all__ = [
    # Errors
    "ServiceError",
    "CacheError",
    "FetchError",
    "FetchErrorKind",
    "RateLimitError",
    "UpstreamError",
    "NetworkError",
    "RequestError",
    "MalformedResponseError",
    # Cache
    "CACHE_TTL",
    "CacheRecord",
    "derive_cache_key",
    "is_fresh",
    # Client
    "ProviderClient",
    "ProviderConfig",
    # Merging
    "merge_and_sort",
]

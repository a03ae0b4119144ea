"""
Base data source interface.
"""

from abc import ABC, abstractmethod
from typing import Generic, TypeVar

from pydantic import BaseModel

from visagate.services.client import ProviderClient

T = TypeVar("T", bound=BaseModel)


class BaseDataSource(ABC, Generic[T]):
    """
    Abstract base class for visa data providers.

    All data sources should:
    - Use ProviderClient for HTTP requests (retry and error mapping)
    - Return Pydantic models
    - Raise FetchError subclasses rather than returning partial data
    """

    def __init__(self, client: ProviderClient):
        self.client = client

    @property
    def service_id(self) -> str:
        """Unique identifier for this data source."""
        return self.client.service_id

    @abstractmethod
    async def fetch(self, destination: str, nationality: str) -> list[T]:
        """Fetch options for a destination/nationality pair."""
        ...

    def is_configured(self) -> bool:
        """Check if the data source has an API key."""
        return bool(self.client.config.api_key)

"""
Shared fixtures: a throwaway SQLite cache store and a scripted provider.
"""

from datetime import datetime
from typing import Any, Callable

import httpx
import pytest
from sqlalchemy import create_engine
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool

from visagate.datastore.models import Base
from visagate.services.client import ProviderClient, ProviderConfig

PROVIDER_URL = "https://provider.test/visa-options"


class ScriptedProvider:
    """MockTransport handler replaying a fixed list of outcomes.

    Each outcome is an httpx.Response or an exception to raise; the last
    outcome repeats once the script runs out.
    """

    def __init__(self, *outcomes: httpx.Response | Exception):
        self.outcomes = list(outcomes)
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        index = min(len(self.requests), len(self.outcomes) - 1)
        self.requests.append(request)
        outcome = self.outcomes[index]
        if isinstance(outcome, Exception):
            raise outcome
        return httpx.Response(
            outcome.status_code, headers=outcome.headers, content=outcome.content
        )

    @property
    def call_count(self) -> int:
        return len(self.requests)


class FakeClock:
    """Settable replacement for utcnow."""

    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now


class SleepRecorder:
    """Stands in for asyncio.sleep and remembers the requested delays."""

    def __init__(self):
        self.delays: list[float] = []

    async def __call__(self, delay: float) -> None:
        self.delays.append(delay)


@pytest.fixture
def sleep_recorder() -> SleepRecorder:
    return SleepRecorder()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock(datetime(2025, 3, 1, 12, 0, 0))


@pytest.fixture
def make_provider_client(
    sleep_recorder: SleepRecorder,
) -> Callable[..., ProviderClient]:
    """Build a ProviderClient talking to a ScriptedProvider."""

    def factory(provider: ScriptedProvider, service_id: str = "ivisa") -> ProviderClient:
        return ProviderClient(
            ProviderConfig(service_id=service_id, url=PROVIDER_URL, api_key="test-key"),
            http_client=httpx.AsyncClient(transport=httpx.MockTransport(provider)),
            sleep=sleep_recorder,
        )

    return factory


@pytest.fixture
def session_factory(tmp_path) -> async_sessionmaker[AsyncSession]:
    """Session factory over a fresh SQLite file.

    NullPool keeps connections from outliving the event loop that opened
    them, so the same store works under pytest-asyncio and TestClient.
    """
    db_path = tmp_path / "cache.db"

    sync_engine = create_engine(f"sqlite:///{db_path}")
    Base.metadata.create_all(sync_engine)
    sync_engine.dispose()

    engine = create_async_engine(f"sqlite+aiosqlite:///{db_path}", poolclass=NullPool)
    return async_sessionmaker(bind=engine, class_=AsyncSession, expire_on_commit=False)


def ivisa_payload(*options: dict[str, Any]) -> httpx.Response:
    return httpx.Response(200, json={"visaOptions": list(options)})


TWO_IVISA_OPTIONS = (
    {
        "id": "evisa-8",
        "visaType": "Business eVisa",
        "processingTime": "8 business days",
        "cost": 149.99,
        "currency": "USD",
    },
    {
        "id": "evisa-6",
        "visaType": "Tourist eVisa",
        "processingTime": "6 business days",
        "cost": "$99.99",
        "currency": "USD",
    },
)

"""Test configuration and fixtures for LeadMarket.

Provides a controllable clock, fresh in-memory stores per test, and
lifecycle/ledger services wired the way the API wires them.
"""

from collections.abc import Callable
from typing import Any
from uuid import uuid4

import pytest
import pytest_asyncio

from factories import RATING_YEAR, FakeClock, make_terms

from leadmarket.core.config import Settings, clear_settings_cache
from leadmarket.models.connection import Actor, Connection, ContractTerms, Role
from leadmarket.services.connections import ConnectionLifecycle, InMemoryConnectionStore
from leadmarket.services.leads import InMemoryLeadStore, LeadLedger
from leadmarket.services.locks import ConnectionLocks
from leadmarket.services.rating import RatingEngine, build_default_catalog


@pytest.fixture(autouse=True)
def _reset_settings_cache() -> Any:
    """Keep the cached settings from leaking between tests."""
    clear_settings_cache()
    yield
    clear_settings_cache()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def settings() -> Settings:
    return Settings()


@pytest.fixture
def locks() -> ConnectionLocks:
    return ConnectionLocks()


@pytest.fixture
def connection_store() -> InMemoryConnectionStore:
    return InMemoryConnectionStore()


@pytest.fixture
def lead_store() -> InMemoryLeadStore:
    return InMemoryLeadStore()


@pytest.fixture
def lifecycle(
    connection_store: InMemoryConnectionStore,
    locks: ConnectionLocks,
    settings: Settings,
    clock: FakeClock,
) -> ConnectionLifecycle:
    return ConnectionLifecycle(connection_store, locks, settings, clock)


@pytest.fixture
def ledger(
    connection_store: InMemoryConnectionStore,
    lead_store: InMemoryLeadStore,
    locks: ConnectionLocks,
    settings: Settings,
    clock: FakeClock,
) -> LeadLedger:
    return LeadLedger(connection_store, lead_store, locks, settings, clock)


@pytest.fixture
def rating_engine() -> RatingEngine:
    return RatingEngine(build_default_catalog(), current_year=lambda: RATING_YEAR)


@pytest.fixture
def provider() -> Actor:
    return Actor(user_id=uuid4(), role=Role.PROVIDER)


@pytest.fixture
def buyer() -> Actor:
    return Actor(user_id=uuid4(), role=Role.BUYER)


@pytest.fixture
def other_buyer() -> Actor:
    return Actor(user_id=uuid4(), role=Role.BUYER)


@pytest.fixture
def admin() -> Actor:
    return Actor(user_id=uuid4(), role=Role.ADMIN)


@pytest.fixture
def activate(
    lifecycle: ConnectionLifecycle,
) -> Callable[..., Any]:
    """Drive a provider request through set_terms and accept."""

    async def _activate(
        provider: Actor, buyer: Actor, terms: ContractTerms | None = None
    ) -> Connection:
        requested = (await lifecycle.request_connection(provider, buyer.user_id)).unwrap()
        offered = (
            await lifecycle.set_terms(buyer, requested.id, terms or make_terms())
        ).unwrap()
        return (await lifecycle.accept(provider, offered.id)).unwrap()

    return _activate


@pytest_asyncio.fixture
async def active_connection(
    activate: Callable[..., Any], provider: Actor, buyer: Actor
) -> Connection:
    """Active connection at $50 per lead with no caps."""
    return await activate(provider, buyer)

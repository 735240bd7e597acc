# LeadMarket - Lead Marketplace Core
# Copyright (C) 2025 Luiz Frias <luizf35@gmail.com>
# Form F[x] Labs
#
# This software is dual-licensed under AGPL-3.0 and Commercial License.
# For commercial licensing, contact: luizf35@gmail.com
# See LICENSE file for full terms.

"""FastAPI dependencies for caller identity and marketplace services.

Stores and the lock registry are process-wide singletons so every request
sees the same state; tests override these providers with fresh instances.
"""

from functools import lru_cache
from uuid import UUID

from beartype import beartype
from fastapi import Depends, Header, HTTPException, status

from ..core.config import Settings, get_settings
from ..models.connection import Actor, Role
from ..services.connections import ConnectionLifecycle, InMemoryConnectionStore
from ..services.leads import InMemoryLeadStore, LeadLedger
from ..services.locks import ConnectionLocks
from ..services.rating import RatingEngine, get_carrier_catalog


@lru_cache(maxsize=1)
def get_connection_store() -> InMemoryConnectionStore:
    return InMemoryConnectionStore()


@lru_cache(maxsize=1)
def get_lead_store() -> InMemoryLeadStore:
    return InMemoryLeadStore()


@lru_cache(maxsize=1)
def get_connection_locks() -> ConnectionLocks:
    return ConnectionLocks()


@beartype
def get_rating_engine() -> RatingEngine:
    """Rating engine over the default carrier catalog."""
    return RatingEngine(get_carrier_catalog())


@beartype
def get_lifecycle(
    store: InMemoryConnectionStore = Depends(get_connection_store),
    locks: ConnectionLocks = Depends(get_connection_locks),
    settings: Settings = Depends(get_settings),
) -> ConnectionLifecycle:
    return ConnectionLifecycle(store, locks, settings)


@beartype
def get_ledger(
    connections: InMemoryConnectionStore = Depends(get_connection_store),
    leads: InMemoryLeadStore = Depends(get_lead_store),
    locks: ConnectionLocks = Depends(get_connection_locks),
    settings: Settings = Depends(get_settings),
) -> LeadLedger:
    return LeadLedger(connections, leads, locks, settings)


@beartype
def get_current_actor(
    x_actor_id: UUID | None = Header(default=None),
    x_actor_role: Role | None = Header(default=None),
) -> Actor:
    """Caller identity from the X-Actor-Id and X-Actor-Role headers.

    An upstream gateway authenticates the caller and sets both headers.

    Raises:
        HTTPException: 401 if either header is missing
    """
    if x_actor_id is None or x_actor_role is None:
        # We need to keep raising HTTPException here as FastAPI expects it
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authentication required",
        )
    return Actor(user_id=x_actor_id, role=x_actor_role)

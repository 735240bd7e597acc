# LeadMarket - Lead Marketplace Core
# Copyright (C) 2025 Luiz Frias <luizf35@gmail.com>
# Form F[x] Labs
#
# This software is dual-licensed under AGPL-3.0 and Commercial License.
# For commercial licensing, contact: luizf35@gmail.com
# See LICENSE file for full terms.

"""Connection lifecycle and lead submission endpoints."""

from uuid import UUID

from beartype import beartype
from fastapi import APIRouter, Depends, HTTPException, Query, status

from ...models.connection import Actor, Connection, ConnectionStatus, Role
from ...models.lead import Lead, LeadSubmission
from ...schemas.api import (
    CapStatusResponse,
    ConnectionActionRequest,
    ConnectionCreateRequest,
)
from ...services.connections import ConnectionLifecycle
from ...services.leads import LeadLedger, format_cap_status
from ..dependencies import get_current_actor, get_ledger, get_lifecycle
from ..response_patterns import unwrap_or_raise

router = APIRouter(prefix="/connections", tags=["connections"])


@router.post("", response_model=Connection, status_code=status.HTTP_201_CREATED)
@beartype
async def create_connection(
    request: ConnectionCreateRequest,
    actor: Actor = Depends(get_current_actor),
    lifecycle: ConnectionLifecycle = Depends(get_lifecycle),
) -> Connection:
    """Provider requests a connection, or buyer invites a provider."""
    if actor.role is Role.PROVIDER:
        if request.terms is not None:
            raise HTTPException(
                status_code=422, detail="Terms are set by the buyer, not the provider"
            )
        result = await lifecycle.request_connection(
            actor, request.counterparty_id, request.message
        )
    elif actor.role is Role.BUYER:
        result = await lifecycle.invite_provider(
            actor, request.counterparty_id, request.terms, request.message
        )
    else:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Only providers and buyers can open connections",
        )
    return unwrap_or_raise(result)


@router.get("", response_model=list[Connection])
@beartype
async def list_connections(
    status_filter: ConnectionStatus | None = Query(default=None, alias="status"),
    actor: Actor = Depends(get_current_actor),
    lifecycle: ConnectionLifecycle = Depends(get_lifecycle),
) -> list[Connection]:
    return await lifecycle.list_connections(actor, status_filter)


@router.get("/pending", response_model=list[Connection])
@beartype
async def pending_connections(
    actor: Actor = Depends(get_current_actor),
    lifecycle: ConnectionLifecycle = Depends(get_lifecycle),
) -> list[Connection]:
    """Connections waiting on the caller's decision."""
    return await lifecycle.pending_for(actor)


@router.get("/{connection_id}", response_model=Connection)
@beartype
async def get_connection(
    connection_id: UUID,
    actor: Actor = Depends(get_current_actor),
    lifecycle: ConnectionLifecycle = Depends(get_lifecycle),
) -> Connection:
    return unwrap_or_raise(await lifecycle.get_connection(actor, connection_id))


@router.patch("/{connection_id}", response_model=Connection)
@beartype
async def update_connection(
    connection_id: UUID,
    request: ConnectionActionRequest,
    actor: Actor = Depends(get_current_actor),
    lifecycle: ConnectionLifecycle = Depends(get_lifecycle),
) -> Connection:
    """Apply one lifecycle action to a connection."""
    if request.action == "set_terms":
        assert request.terms is not None
        result = await lifecycle.set_terms(actor, connection_id, request.terms)
    elif request.action == "update_terms":
        assert request.terms is not None
        result = await lifecycle.update_terms(actor, connection_id, request.terms)
    elif request.action == "accept":
        result = await lifecycle.accept(actor, connection_id)
    elif request.action == "decline":
        result = await lifecycle.decline(actor, connection_id)
    elif request.action == "reject":
        result = await lifecycle.reject(actor, connection_id)
    else:
        result = await lifecycle.terminate(actor, connection_id, request.reason)
    return unwrap_or_raise(result)


@router.post(
    "/{connection_id}/leads",
    response_model=Lead,
    status_code=status.HTTP_201_CREATED,
)
@beartype
async def submit_lead(
    connection_id: UUID,
    submission: LeadSubmission,
    actor: Actor = Depends(get_current_actor),
    ledger: LeadLedger = Depends(get_ledger),
) -> Lead:
    """Submit a lead; refused with 429 when an enforced cap is reached."""
    return unwrap_or_raise(await ledger.submit_lead(actor, connection_id, submission))


@router.get("/{connection_id}/leads", response_model=list[Lead])
@beartype
async def list_leads(
    connection_id: UUID,
    actor: Actor = Depends(get_current_actor),
    ledger: LeadLedger = Depends(get_ledger),
) -> list[Lead]:
    return unwrap_or_raise(await ledger.list_leads(actor, connection_id))


@router.get("/{connection_id}/caps", response_model=CapStatusResponse)
@beartype
async def get_cap_status(
    connection_id: UUID,
    actor: Actor = Depends(get_current_actor),
    lifecycle: ConnectionLifecycle = Depends(get_lifecycle),
    ledger: LeadLedger = Depends(get_ledger),
) -> CapStatusResponse:
    """Lead cap usage for the current week and month."""
    connection = unwrap_or_raise(await lifecycle.get_connection(actor, connection_id))
    cap_status = await ledger.cap_status(connection)
    return CapStatusResponse(status=cap_status, summary=format_cap_status(cap_status))

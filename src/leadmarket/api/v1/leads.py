# LeadMarket - Lead Marketplace Core
# Copyright (C) 2025 Luiz Frias <luizf35@gmail.com>
# Form F[x] Labs
#
# This software is dual-licensed under AGPL-3.0 and Commercial License.
# For commercial licensing, contact: luizf35@gmail.com
# See LICENSE file for full terms.

"""Lead disposition endpoints."""

from uuid import UUID

from beartype import beartype
from fastapi import APIRouter, Depends

from ...models.connection import Actor
from ...models.lead import Lead
from ...schemas.api import LeadStatusUpdateRequest
from ...services.leads import LeadLedger
from ..dependencies import get_current_actor, get_ledger
from ..response_patterns import unwrap_or_raise

router = APIRouter(prefix="/leads", tags=["leads"])


@router.patch("/{lead_id}", response_model=Lead)
@beartype
async def update_lead_status(
    lead_id: UUID,
    request: LeadStatusUpdateRequest,
    actor: Actor = Depends(get_current_actor),
    ledger: LeadLedger = Depends(get_ledger),
) -> Lead:
    """Buyer claims, converts, rejects or expires a lead."""
    return unwrap_or_raise(
        await ledger.update_lead_status(actor, lead_id, request.status)
    )

# LeadMarket - Lead Marketplace Core
# Copyright (C) 2025 Luiz Frias <luizf35@gmail.com>
# Form F[x] Labs
#
# This software is dual-licensed under AGPL-3.0 and Commercial License.
# For commercial licensing, contact: luizf35@gmail.com
# See LICENSE file for full terms.

"""Carrier catalog endpoints."""

from beartype import beartype
from fastapi import APIRouter, Depends, HTTPException, Query

from ...models.carrier import CarrierConfig
from ...models.rating import Occupation
from ...services.rating import RatingEngine
from ..dependencies import get_rating_engine

router = APIRouter(prefix="/carriers", tags=["carriers"])


@router.get("", response_model=list[CarrierConfig])
@beartype
async def list_carriers(
    occupation: Occupation | None = Query(default=None),
    engine: RatingEngine = Depends(get_rating_engine),
) -> list[CarrierConfig]:
    """Carriers that would quote the given occupation (all available if omitted)."""
    if occupation is None:
        return engine.catalog.available_carriers()
    return engine.catalog.list_eligible_carriers(occupation)


@router.get("/{carrier_id}", response_model=CarrierConfig)
@beartype
async def get_carrier(
    carrier_id: str,
    engine: RatingEngine = Depends(get_rating_engine),
) -> CarrierConfig:
    carrier = engine.catalog.get_carrier(carrier_id)
    if carrier is None:
        raise HTTPException(status_code=404, detail="Carrier not found")
    return carrier

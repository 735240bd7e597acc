# LeadMarket - Lead Marketplace Core
# Copyright (C) 2025 Luiz Frias <luizf35@gmail.com>
# Form F[x] Labs
#
# This software is dual-licensed under AGPL-3.0 and Commercial License.
# For commercial licensing, contact: luizf35@gmail.com
# See LICENSE file for full terms.

"""Quote comparison endpoints."""

from beartype import beartype
from fastapi import APIRouter, Depends, HTTPException, Query

from ...models.rating import CoverageType, QuoteResult, RatingProfile
from ...services.rating import RatingEngine
from ...services.rating.rating_engine import (
    DEFAULT_LADDER_CARRIER,
    DEFAULT_LADDER_STATE,
)
from ..dependencies import get_rating_engine

router = APIRouter(prefix="/quotes", tags=["quotes"])


@router.post("/compare", response_model=list[QuoteResult])
@beartype
async def compare_quotes(
    profile: RatingProfile,
    engine: RatingEngine = Depends(get_rating_engine),
) -> list[QuoteResult]:
    """Rank quotes from every eligible carrier, cheapest first."""
    return engine.compute_quotes(profile)


@router.get("/coverage-ladder", response_model=dict[CoverageType, QuoteResult])
@beartype
async def coverage_ladder(
    car_model: str = Query(..., min_length=1),
    state: str = Query(default=DEFAULT_LADDER_STATE, min_length=2, max_length=2),
    carrier_id: str = Query(default=DEFAULT_LADDER_CARRIER),
    engine: RatingEngine = Depends(get_rating_engine),
) -> dict[CoverageType, QuoteResult]:
    """Price every coverage tier for a typical driver with one carrier."""
    try:
        return engine.quote_coverage_ladder(car_model, state, carrier_id)
    except KeyError as exc:
        raise HTTPException(status_code=404, detail="Carrier not found") from exc

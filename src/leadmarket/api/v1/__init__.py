# LeadMarket - Lead Marketplace Core
# Copyright (C) 2025 Luiz Frias <luizf35@gmail.com>
# Form F[x] Labs
#
# This software is dual-licensed under AGPL-3.0 and Commercial License.
# For commercial licensing, contact: luizf35@gmail.com
# See LICENSE file for full terms.

"""API v1 router aggregation.

This module combines all v1 API routers into a single router
that can be mounted on the main FastAPI application.
"""

from fastapi import APIRouter

from .carriers import router as carriers_router
from .connections import router as connections_router
from .leads import router as leads_router
from .quotes import router as quotes_router

# Create main v1 router
router = APIRouter(prefix="/api/v1")

router.include_router(carriers_router)
router.include_router(quotes_router)
router.include_router(connections_router)
router.include_router(leads_router)


__all__ = ["router"]

# LeadMarket - Lead Marketplace Core
# Copyright (C) 2025 Luiz Frias <luizf35@gmail.com>
# Form F[x] Labs
#
# This software is dual-licensed under AGPL-3.0 and Commercial License.
# For commercial licensing, contact: luizf35@gmail.com
# See LICENSE file for full terms.

"""Domain models package for LeadMarket.

This package exports all Pydantic domain models; every model is frozen and
validated on construction.
"""

from .base import BaseModelConfig, TimestampedModel
from .carrier import CarrierConfig, DiscountFactors, SurchargeFactors
from .connection import (
    TERMINAL_STATUSES,
    Actor,
    Connection,
    ConnectionStatus,
    ContractTerms,
    LeadCaps,
    PaymentTiming,
    Role,
)
from .lead import (
    LEAD_STATUS_TRANSITIONS,
    Lead,
    LeadStatus,
    LeadSubmission,
    QuoteType,
)
from .rating import (
    COVERAGE_LABELS,
    CoverageType,
    CreditTier,
    DrivingHistory,
    GarageType,
    Gender,
    MaritalStatus,
    Occupation,
    PrimaryUse,
    QuoteBreakdown,
    QuoteResult,
    RatingProfile,
    VehicleDescriptor,
    VehicleOwnership,
)

__all__ = [
    # Base
    "BaseModelConfig",
    "TimestampedModel",
    # Carrier
    "CarrierConfig",
    "DiscountFactors",
    "SurchargeFactors",
    # Rating
    "COVERAGE_LABELS",
    "CoverageType",
    "CreditTier",
    "DrivingHistory",
    "GarageType",
    "Gender",
    "MaritalStatus",
    "Occupation",
    "PrimaryUse",
    "QuoteBreakdown",
    "QuoteResult",
    "RatingProfile",
    "VehicleDescriptor",
    "VehicleOwnership",
    # Connection
    "TERMINAL_STATUSES",
    "Actor",
    "Connection",
    "ConnectionStatus",
    "ContractTerms",
    "LeadCaps",
    "PaymentTiming",
    "Role",
    # Lead
    "LEAD_STATUS_TRANSITIONS",
    "Lead",
    "LeadStatus",
    "LeadSubmission",
    "QuoteType",
]

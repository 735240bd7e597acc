# LeadMarket - Lead Marketplace Core
# Copyright (C) 2025 Luiz Frias <luizf35@gmail.com>
# Form F[x] Labs
#
# This software is dual-licensed under AGPL-3.0 and Commercial License.
# For commercial licensing, contact: luizf35@gmail.com
# See LICENSE file for full terms.

"""Lead domain models."""

from datetime import datetime
from decimal import Decimal
from enum import Enum
from uuid import UUID

from pydantic import EmailStr, Field, field_validator

from .base import BaseModelConfig
from .rating import QuoteResult


class LeadStatus(str, Enum):
    PENDING = "pending"
    CLAIMED = "claimed"
    CONVERTED = "converted"
    REJECTED = "rejected"
    EXPIRED = "expired"


# Buyer-side disposition; payout and connection totals never change with it.
LEAD_STATUS_TRANSITIONS: dict[LeadStatus, frozenset[LeadStatus]] = {
    LeadStatus.PENDING: frozenset(
        {LeadStatus.CLAIMED, LeadStatus.REJECTED, LeadStatus.EXPIRED}
    ),
    LeadStatus.CLAIMED: frozenset(
        {LeadStatus.CONVERTED, LeadStatus.REJECTED, LeadStatus.EXPIRED}
    ),
    LeadStatus.CONVERTED: frozenset(),
    LeadStatus.REJECTED: frozenset(),
    LeadStatus.EXPIRED: frozenset(),
}


class QuoteType(str, Enum):
    """How the customer wants to be contacted."""

    ASAP = "asap"  # immediate call
    SWITCH = "switch"
    QUOTE = "quote"  # quote based


class LeadSubmission(BaseModelConfig):
    """Customer referral data supplied by a provider."""

    customer_name: str = Field(..., min_length=1, max_length=200)
    email: EmailStr
    phone: str = Field(..., min_length=7, max_length=32)
    car_model: str = Field(..., min_length=1, max_length=200)
    customer_state: str | None = Field(default=None, min_length=2, max_length=2)
    quote_type: QuoteType = Field(default=QuoteType.QUOTE)
    selected_quote: QuoteResult | None = Field(
        default=None, description="Quote the customer picked, stored as a snapshot"
    )

    @field_validator("phone")
    @classmethod
    def validate_phone(cls, v: str) -> str:
        digits = [c for c in v if c.isdigit()]
        if len(digits) < 7:
            raise ValueError("Phone number must contain at least 7 digits")
        return v

    @field_validator("customer_state")
    @classmethod
    def normalize_state(cls, v: str | None) -> str | None:
        return v.upper() if v is not None else None


class Lead(LeadSubmission):
    """A lead recorded against an active connection."""

    id: UUID
    connection_id: UUID
    provider_id: UUID
    buyer_id: UUID
    status: LeadStatus = Field(default=LeadStatus.PENDING)
    payout: Decimal = Field(
        ..., ge=Decimal("0"), description="Fixed from the connection rate at submission"
    )
    submitted_at: datetime
    claimed_at: datetime | None = None
    closed_at: datetime | None = None

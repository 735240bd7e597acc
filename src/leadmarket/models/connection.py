# LeadMarket - Lead Marketplace Core
# Copyright (C) 2025 Luiz Frias <luizf35@gmail.com>
# Form F[x] Labs
#
# This software is dual-licensed under AGPL-3.0 and Commercial License.
# For commercial licensing, contact: luizf35@gmail.com
# See LICENSE file for full terms.

"""Connection domain models: actors, contract terms and connection snapshots.

Payments are always per qualified lead submitted, never per conversion or
policy sale; ``ContractTerms.payment_structure`` is pinned to ``per_lead``.
"""

from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Literal
from uuid import UUID

from pydantic import Field, field_validator, model_validator

from .base import BaseModelConfig, TimestampedModel

# Longest free-text note (messages, termination reasons, term notes)
MAX_NOTE_LENGTH = 2000


class Role(str, Enum):
    """Capability attached to a caller identity."""

    PROVIDER = "provider"
    BUYER = "buyer"
    ADMIN = "admin"


class Actor(BaseModelConfig):
    """Explicit caller identity passed into lifecycle and ledger operations."""

    user_id: UUID
    role: Role


class ConnectionStatus(str, Enum):
    PENDING_BUYER_REVIEW = "pending_buyer_review"
    PENDING_PROVIDER_ACCEPT = "pending_provider_accept"
    ACTIVE = "active"
    DECLINED_BY_PROVIDER = "declined_by_provider"
    REJECTED_BY_BUYER = "rejected_by_buyer"
    TERMINATED = "terminated"

    @property
    def is_terminal(self) -> bool:
        """Terminal states accept no further transitions."""
        return self in TERMINAL_STATUSES


TERMINAL_STATUSES: frozenset[ConnectionStatus] = frozenset(
    {
        ConnectionStatus.DECLINED_BY_PROVIDER,
        ConnectionStatus.REJECTED_BY_BUYER,
        ConnectionStatus.TERMINATED,
    }
)


class PaymentTiming(str, Enum):
    PER_LEAD = "per_lead"
    WEEKLY = "weekly"
    BIWEEKLY = "biweekly"
    MONTHLY = "monthly"

    @property
    def label(self) -> str:
        """Display label."""
        return _PAYMENT_TIMING_LABELS[self]


_PAYMENT_TIMING_LABELS: dict[PaymentTiming, str] = {
    PaymentTiming.PER_LEAD: "Per Lead",
    PaymentTiming.WEEKLY: "Weekly",
    PaymentTiming.BIWEEKLY: "Bi-weekly",
    PaymentTiming.MONTHLY: "Monthly",
}


class LeadCaps(BaseModelConfig):
    """Volume limits a buyer sets to bound obligations under a connection."""

    weekly_limit: int | None = Field(
        default=None, ge=1, description="Max leads per week (None = unlimited)"
    )
    monthly_limit: int | None = Field(
        default=None, ge=1, description="Max leads per month (None = unlimited)"
    )
    pause_when_cap_reached: bool = Field(
        default=True,
        description="Refuse submissions once a cap is hit; when false caps are advisory",
    )

    @property
    def is_unlimited(self) -> bool:
        return self.weekly_limit is None and self.monthly_limit is None


class ContractTerms(BaseModelConfig):
    """Full contract terms, set entirely by the buyer.

    Rate bounds are checked against settings by the lifecycle service, since
    they are deployment configuration rather than a property of the terms.
    """

    rate_per_lead: Decimal = Field(
        ..., gt=Decimal("0"), decimal_places=2, description="Dollars per qualified lead"
    )
    payment_timing: PaymentTiming = Field(default=PaymentTiming.PER_LEAD)
    minimum_payout_threshold: Decimal | None = Field(
        default=None, ge=Decimal("0"), decimal_places=2
    )
    payment_structure: Literal["per_lead"] = Field(default="per_lead")
    lead_types: frozenset[str] = Field(default_factory=lambda: frozenset({"auto"}))
    exclusivity: bool = Field(default=False)
    termination_notice_days: int = Field(default=7, ge=0, le=365)
    lead_caps: LeadCaps | None = Field(default=None)
    licensed_states: frozenset[str] = Field(default_factory=frozenset)
    compliance_acknowledged: bool = Field(default=False)
    agreement_version: str = Field(default="1.0.0", min_length=1)
    notes: str | None = Field(default=None, max_length=MAX_NOTE_LENGTH)

    @field_validator("lead_types")
    @classmethod
    def validate_lead_types(cls, v: frozenset[str]) -> frozenset[str]:
        """Lead types are lower-case labels and at least one is required."""
        normalized = frozenset(t.strip().lower() for t in v if t.strip())
        if not normalized:
            raise ValueError("At least one lead type is required")
        return normalized

    @field_validator("licensed_states")
    @classmethod
    def validate_licensed_states(cls, v: frozenset[str]) -> frozenset[str]:
        normalized = frozenset(s.strip().upper() for s in v if s.strip())
        for state in normalized:
            if len(state) != 2 or not state.isalpha():
                raise ValueError(f"Invalid state code: {state}")
        return normalized


class Connection(TimestampedModel):
    """Snapshot of the relationship between one provider and one buyer."""

    id: UUID
    provider_id: UUID
    buyer_id: UUID
    initiator: Literal["provider", "buyer"]
    message: str | None = Field(default=None, max_length=MAX_NOTE_LENGTH)
    status: ConnectionStatus
    terms: ContractTerms | None = Field(
        default=None, description="None until the buyer proposes terms"
    )

    # Running totals
    total_leads: int = Field(default=0, ge=0)
    total_paid: Decimal = Field(default=Decimal("0"), ge=Decimal("0"))
    last_lead_at: datetime | None = None

    # Timestamps
    terms_set_at: datetime | None = None
    terms_updated_at: datetime | None = None
    accepted_at: datetime | None = None
    terminated_at: datetime | None = None
    terminated_by: Role | None = None
    termination_reason: str | None = Field(default=None, max_length=MAX_NOTE_LENGTH)

    version: int = Field(default=1, ge=1, description="Optimistic concurrency counter")

    @model_validator(mode="after")
    def validate_state_consistency(self) -> "Connection":
        """Active and offered connections always carry terms."""
        needs_terms = self.status in (
            ConnectionStatus.PENDING_PROVIDER_ACCEPT,
            ConnectionStatus.ACTIVE,
        )
        if needs_terms and self.terms is None:
            raise ValueError(f"Connection in {self.status.value} must have terms")
        if self.status is ConnectionStatus.ACTIVE and self.accepted_at is None:
            raise ValueError("Active connection must record accepted_at")
        if self.provider_id == self.buyer_id:
            raise ValueError("Provider and buyer must be different users")
        return self

    @property
    def is_active(self) -> bool:
        return self.status is ConnectionStatus.ACTIVE

    def involves(self, user_id: UUID) -> bool:
        """Whether the user is a party to this connection."""
        return user_id in (self.provider_id, self.buyer_id)

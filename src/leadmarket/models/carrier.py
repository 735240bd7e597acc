# LeadMarket - Lead Marketplace Core
# Copyright (C) 2025 Luiz Frias <luizf35@gmail.com>
# Form F[x] Labs
#
# This software is dual-licensed under AGPL-3.0 and Commercial License.
# For commercial licensing, contact: luizf35@gmail.com
# See LICENSE file for full terms.

"""Carrier rating configuration models.

A carrier configuration is defined once at process start and never mutated;
all factor fields are fractions (0.15 means 15%).
"""

from decimal import Decimal

from pydantic import Field, field_validator, model_validator

from .base import BaseModelConfig
from .rating import CoverageType, Occupation

_RATE = {"ge": Decimal("0"), "le": Decimal("1")}


class DiscountFactors(BaseModelConfig):
    """Named discount percentages a carrier grants."""

    multi_policy: Decimal = Field(..., **_RATE, description="Home + auto bundle")
    good_driver: Decimal = Field(..., **_RATE, description="Clean record")
    good_student: Decimal = Field(..., **_RATE, description="Student with good grades")
    defensive: Decimal = Field(..., **_RATE, description="Defensive driving course")
    anti_theft: Decimal = Field(..., **_RATE, description="Anti-theft devices")
    safety: Decimal = Field(..., **_RATE, description="Airbags, ABS and similar")
    loyalty: Decimal = Field(..., **_RATE, description="Years with company")
    pay_in_full: Decimal = Field(..., **_RATE, description="Annual premium paid upfront")
    paperless: Decimal = Field(..., **_RATE, description="Paperless billing")
    military: Decimal = Field(..., **_RATE, description="Military service")
    home_owner: Decimal = Field(..., **_RATE, description="Home ownership")
    married: Decimal = Field(..., **_RATE, description="Married driver")
    low_mileage: Decimal = Field(..., **_RATE, description="Under 7,500 miles/year")
    good_credit: Decimal = Field(..., **_RATE, description="Excellent credit")


class SurchargeFactors(BaseModelConfig):
    """Named surcharge percentages a carrier applies."""

    young_driver: Decimal = Field(..., **_RATE, description="Under 25")
    senior_driver: Decimal = Field(..., **_RATE, description="Over 70")
    poor_credit: Decimal = Field(..., **_RATE, description="Poor credit tier")
    no_history: Decimal = Field(..., **_RATE, description="No prior insurance")
    lapse: Decimal = Field(..., **_RATE, description="Gap in coverage")
    minor_violation: Decimal = Field(..., **_RATE, description="Speeding ticket, etc.")
    major_violation: Decimal = Field(..., **_RATE, description="Reckless driving")
    accident: Decimal = Field(..., **_RATE, description="At-fault accident")
    dui: Decimal = Field(..., **_RATE, description="DUI/DWI")
    high_mileage: Decimal = Field(..., **_RATE, description="Over 15,000 miles/year")
    new_driver: Decimal = Field(..., **_RATE, description="Less than 3 years licensed")


class CarrierConfig(BaseModelConfig):
    """Rating configuration for one insurance carrier."""

    carrier_id: str = Field(..., min_length=1, pattern=r"^[a-z0-9_]+$")
    name: str = Field(..., min_length=1)
    color: str = Field(..., pattern=r"^#[0-9A-Fa-f]{6}$")
    exclusive: bool = Field(
        default=False, description="Captive or direct writer (display only)"
    )
    eligible_occupations: frozenset[Occupation] | None = Field(
        default=None,
        description="Occupations the carrier writes; None means open to everyone",
    )
    avg_rating: Decimal = Field(..., ge=Decimal("0"), le=Decimal("5"))
    base_rates: dict[CoverageType, Decimal]
    discounts: DiscountFactors
    surcharges: SurchargeFactors
    state_multipliers: dict[str, Decimal] = Field(default_factory=dict)
    available: bool = Field(default=True)

    @field_validator("state_multipliers")
    @classmethod
    def validate_state_codes(cls, v: dict[str, Decimal]) -> dict[str, Decimal]:
        """State keys are stored upper-cased and multipliers must be positive."""
        normalized: dict[str, Decimal] = {}
        for state, multiplier in v.items():
            if multiplier <= 0:
                raise ValueError(f"State multiplier for {state} must be positive")
            normalized[state.strip().upper()] = multiplier
        return normalized

    @model_validator(mode="after")
    def validate_base_rates(self) -> "CarrierConfig":
        """Every coverage tier needs a positive base rate."""
        missing = [c.value for c in CoverageType if c not in self.base_rates]
        if missing:
            raise ValueError(f"Carrier {self.carrier_id} missing base rates: {missing}")
        for coverage, rate in self.base_rates.items():
            if rate <= 0:
                raise ValueError(
                    f"Carrier {self.carrier_id} base rate for {coverage.value} must be positive"
                )
        return self

    def is_eligible(self, occupation: Occupation) -> bool:
        """Whether a requester with this occupation may be quoted."""
        if not self.available:
            return False
        if self.eligible_occupations is None:
            return True
        return occupation in self.eligible_occupations

    def state_factor(self, state: str) -> Decimal:
        """Multiplier for a state code, 1.0 when the carrier has no entry."""
        return self.state_multipliers.get(state.strip().upper(), Decimal("1.0"))

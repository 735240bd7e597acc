# LeadMarket - Lead Marketplace Core
# Copyright (C) 2025 Luiz Frias <luizf35@gmail.com>
# Form F[x] Labs
#
# This software is dual-licensed under AGPL-3.0 and Commercial License.
# For commercial licensing, contact: luizf35@gmail.com
# See LICENSE file for full terms.

"""Pydantic models used as typed payloads between rating calculators.

These models give structure to what would otherwise be naked tuples of
labels and totals, so both mypy and runtime validation know the shape.
"""

from decimal import Decimal
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

__all__ = [
    "AppliedAdjustment",
    "AdjustmentSummary",
]


class AppliedAdjustment(BaseModel):
    """One discount or surcharge that fired for a carrier."""

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
        validate_assignment=True,
        str_strip_whitespace=True,
        validate_default=True,
    )

    name: str = Field(..., min_length=1, max_length=50, description="Factor key")
    kind: Literal["discount", "surcharge"]
    rate: Decimal = Field(..., ge=Decimal("0"), description="Fraction applied")
    label: str = Field(
        ..., min_length=1, max_length=100, description='e.g. "Homeowner (-5%)"'
    )


class AdjustmentSummary(BaseModel):
    """Additive total of the adjustments that fired."""

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
        validate_assignment=True,
        str_strip_whitespace=True,
        validate_default=True,
    )

    applied: list[AppliedAdjustment] = Field(default_factory=list)
    total_rate: Decimal = Field(default=Decimal("0"), ge=Decimal("0"))

    @property
    def labels(self) -> list[str]:
        return [adjustment.label for adjustment in self.applied]

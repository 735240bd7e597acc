# LeadMarket - Lead Marketplace Core
# Copyright (C) 2025 Luiz Frias <luizf35@gmail.com>
# Form F[x] Labs
#
# This software is dual-licensed under AGPL-3.0 and Commercial License.
# For commercial licensing, contact: luizf35@gmail.com
# See LICENSE file for full terms.

"""Discount accumulation for one carrier and one rating profile.

Discounts stack additively. The 50% cap is applied by the rating engine,
which also reports the capped total, so this module returns the raw sum.
"""

from decimal import Decimal

from beartype import beartype

from ...models.carrier import DiscountFactors
from ...models.rating import (
    CreditTier,
    DrivingHistory,
    MaritalStatus,
    Occupation,
    RatingProfile,
)
from ...schemas.rating import AdjustmentSummary, AppliedAdjustment
from .factors import to_percent

MAX_TOTAL_DISCOUNT = Decimal("0.50")
LOW_MILEAGE_THRESHOLD = 7500
GOOD_DRIVER_MIN_YEARS_LICENSED = 3

# Extra discount for raising the deductible; unknown amounts earn nothing
DEDUCTIBLE_DISCOUNTS: dict[int, Decimal] = {
    250: Decimal("0"),
    500: Decimal("0.08"),
    1000: Decimal("0.15"),
    2000: Decimal("0.22"),
}

_HALF = Decimal("0.5")


@beartype
class DiscountCalculator:
    """Calculate the discounts a carrier grants to a profile."""

    def __init__(self, discount_factors: DiscountFactors) -> None:
        """Initialize calculator with one carrier's discount table."""
        self.discount_factors = discount_factors

    def calculate_all_discounts(self, profile: RatingProfile) -> AdjustmentSummary:
        """Sum every discount whose condition holds for the profile.

        Args:
            profile: Rating profile being priced

        Returns:
            AdjustmentSummary with applied discounts in display order and the
            uncapped total
        """
        factors = self.discount_factors
        applied: list[AppliedAdjustment] = []

        if profile.home_owner:
            applied.append(_discount("home_owner", "Homeowner", factors.home_owner))

        if profile.marital_status is MaritalStatus.MARRIED:
            applied.append(_discount("married", "Married", factors.married))

        if (
            profile.driving_history is DrivingHistory.CLEAN
            and profile.years_licensed >= GOOD_DRIVER_MIN_YEARS_LICENSED
        ):
            applied.append(_discount("good_driver", "Good Driver", factors.good_driver))

        # Excellent credit earns the full credit discount, good credit half
        if profile.credit_tier is CreditTier.EXCELLENT:
            applied.append(
                _discount("good_credit", "Excellent Credit", factors.good_credit)
            )
        elif profile.credit_tier is CreditTier.GOOD:
            applied.append(
                _discount("good_credit", "Good Credit", factors.good_credit * _HALF)
            )

        if profile.annual_mileage < LOW_MILEAGE_THRESHOLD:
            applied.append(_discount("low_mileage", "Low Mileage", factors.low_mileage))

        if profile.anti_theft:
            applied.append(
                _discount("anti_theft", "Anti-Theft Device", factors.anti_theft)
            )

        if profile.safety_features:
            applied.append(_discount("safety", "Safety Features", factors.safety))

        if profile.occupation is Occupation.MILITARY:
            applied.append(_discount("military", "Military", factors.military))

        deductible_rate = DEDUCTIBLE_DISCOUNTS.get(profile.deductible, Decimal("0"))
        if deductible_rate > 0:
            applied.append(
                _discount(
                    "deductible", f"${profile.deductible} Deductible", deductible_rate
                )
            )

        return AdjustmentSummary(
            applied=applied,
            total_rate=sum((a.rate for a in applied), Decimal("0")),
        )


def _discount(name: str, description: str, rate: Decimal) -> AppliedAdjustment:
    return AppliedAdjustment(
        name=name,
        kind="discount",
        rate=rate,
        label=f"{description} (-{to_percent(rate)}%)",
    )

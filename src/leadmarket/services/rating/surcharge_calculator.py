# LeadMarket - Lead Marketplace Core
# Copyright (C) 2025 Luiz Frias <luizf35@gmail.com>
# Form F[x] Labs
#
# This software is dual-licensed under AGPL-3.0 and Commercial License.
# For commercial licensing, contact: luizf35@gmail.com
# See LICENSE file for full terms.

"""Surcharge calculation for high-risk factors.

Surcharges stack additively and, unlike discounts, are never capped.
Driving-history categories are mutually exclusive: only the one matching
the profile applies.
"""

from decimal import Decimal

from beartype import beartype

from ...models.carrier import SurchargeFactors
from ...models.rating import CreditTier, DrivingHistory, RatingProfile
from ...schemas.rating import AdjustmentSummary, AppliedAdjustment
from .factors import to_percent

YOUNG_DRIVER_AGE = 25
SENIOR_DRIVER_AGE = 70
NEW_DRIVER_YEARS_LICENSED = 3
HIGH_MILEAGE_THRESHOLD = 15000

_HALF = Decimal("0.5")

# Driving history -> (surcharge field, display description)
_HISTORY_SURCHARGES: dict[DrivingHistory, tuple[str, str]] = {
    DrivingHistory.MINOR_VIOLATIONS: ("minor_violation", "Violation"),
    DrivingHistory.MAJOR_VIOLATIONS: ("major_violation", "Major Violation"),
    DrivingHistory.ACCIDENTS: ("accident", "At-Fault Accident"),
    DrivingHistory.DUI: ("dui", "DUI"),
}


@beartype
class SurchargeCalculator:
    """Calculate and sum surcharges for high-risk factors."""

    def __init__(self, surcharge_factors: SurchargeFactors) -> None:
        """Initialize calculator with one carrier's surcharge table."""
        self.surcharge_factors = surcharge_factors

    def calculate_all_surcharges(self, profile: RatingProfile) -> AdjustmentSummary:
        """Sum every surcharge whose condition holds for the profile.

        Args:
            profile: Rating profile being priced

        Returns:
            AdjustmentSummary with applied surcharges in display order and
            their total
        """
        factors = self.surcharge_factors
        applied: list[AppliedAdjustment] = []

        if profile.age < YOUNG_DRIVER_AGE:
            applied.append(
                _surcharge("young_driver", "Young Driver", factors.young_driver)
            )

        if profile.age > SENIOR_DRIVER_AGE:
            applied.append(
                _surcharge("senior_driver", "Senior Driver", factors.senior_driver)
            )

        # Poor credit carries the full surcharge, fair credit half
        if profile.credit_tier is CreditTier.POOR:
            applied.append(
                _surcharge("poor_credit", "Credit Score", factors.poor_credit)
            )
        elif profile.credit_tier is CreditTier.FAIR:
            applied.append(
                _surcharge("poor_credit", "Credit Score", factors.poor_credit * _HALF)
            )

        if not profile.prior_insurance:
            applied.append(
                _surcharge("no_history", "No Prior Insurance", factors.no_history)
            )

        if profile.years_licensed < NEW_DRIVER_YEARS_LICENSED:
            applied.append(_surcharge("new_driver", "New Driver", factors.new_driver))

        history = _HISTORY_SURCHARGES.get(profile.driving_history)
        if history is not None:
            name, description = history
            applied.append(_surcharge(name, description, getattr(factors, name)))

        if profile.annual_mileage > HIGH_MILEAGE_THRESHOLD:
            applied.append(
                _surcharge("high_mileage", "High Mileage", factors.high_mileage)
            )

        return AdjustmentSummary(
            applied=applied,
            total_rate=sum((a.rate for a in applied), Decimal("0")),
        )


def _surcharge(name: str, description: str, rate: Decimal) -> AppliedAdjustment:
    return AppliedAdjustment(
        name=name,
        kind="surcharge",
        rate=rate,
        label=f"{description} (+{to_percent(rate)}%)",
    )

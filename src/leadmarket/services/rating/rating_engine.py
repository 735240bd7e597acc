# LeadMarket - Lead Marketplace Core
# Copyright (C) 2025 Luiz Frias <luizf35@gmail.com>
# Form F[x] Labs
#
# This software is dual-licensed under AGPL-3.0 and Commercial License.
# For commercial licensing, contact: luizf35@gmail.com
# See LICENSE file for full terms.

"""Multi-carrier rating engine.

Prices one rating profile against every eligible carrier in the catalog
and returns the quotes cheapest first. The engine is a pure function of
the profile, the catalog and the current year; it performs no I/O.
"""

from collections.abc import Callable
from datetime import datetime, timezone
from decimal import Decimal

from beartype import beartype

from ...core.logging_utils import get_logger
from ...models.carrier import CarrierConfig
from ...models.rating import (
    COVERAGE_LABELS,
    CoverageType,
    QuoteBreakdown,
    QuoteResult,
    RatingProfile,
)
from .carrier_catalog import CarrierCatalog
from .discount_calculator import MAX_TOTAL_DISCOUNT, DiscountCalculator
from .factors import (
    age_factor,
    round_half_up,
    round_to_int,
    to_percent,
    vehicle_make_factor,
    vehicle_year_factor,
)
from .surcharge_calculator import SurchargeCalculator
from .vehicle import parse_car_model

logger = get_logger(__name__)

MINIMUM_ANNUAL_PREMIUM = Decimal("300")
DEFAULT_LADDER_STATE = "PA"
DEFAULT_LADDER_CARRIER = "state_farm"


def _current_year() -> int:
    return datetime.now(timezone.utc).year


@beartype
class RatingEngine:
    """Compute comparable quotes across carriers for one profile."""

    def __init__(
        self,
        catalog: CarrierCatalog,
        current_year: Callable[[], int] = _current_year,
    ) -> None:
        """Initialize the engine.

        Args:
            catalog: Carriers to price against
            current_year: Source of the calendar year used for vehicle age
        """
        self._catalog = catalog
        self._current_year = current_year

    @property
    def catalog(self) -> CarrierCatalog:
        return self._catalog

    def compute_quotes(self, profile: RatingProfile) -> list[QuoteResult]:
        """Price the profile with every eligible carrier.

        Carriers restricted to an occupation (military-only writers) are
        skipped unless the profile matches. Results are sorted ascending by
        monthly premium; ties keep catalog order.

        Args:
            profile: Driver, vehicle and coverage inputs

        Returns:
            One quote per eligible carrier, cheapest first
        """
        year = self._current_year()
        carriers = self._catalog.list_eligible_carriers(profile.occupation)
        quotes = [self._price(carrier, profile, year) for carrier in carriers]
        quotes.sort(key=lambda quote: quote.monthly_premium)

        logger.debug(
            "Rated %d carriers for %s in %s (%s)",
            len(quotes),
            profile.car_model,
            profile.state,
            profile.coverage_type.value,
        )
        return quotes

    def quote_coverage_ladder(
        self,
        car_model: str,
        state: str = DEFAULT_LADDER_STATE,
        carrier_id: str = DEFAULT_LADDER_CARRIER,
    ) -> dict[CoverageType, QuoteResult]:
        """Price every coverage tier for a default profile with one carrier.

        Used for the quick "what would coverage cost" display before a
        customer fills in the full form.

        Args:
            car_model: Free-text vehicle description
            state: Two-letter state code
            carrier_id: Carrier to price with

        Returns:
            Quote per coverage tier

        Raises:
            KeyError: If the carrier is not in the catalog
        """
        carrier = self._catalog.get_carrier(carrier_id)
        if carrier is None:
            raise KeyError(f"Unknown carrier: {carrier_id}")

        year = self._current_year()
        ladder: dict[CoverageType, QuoteResult] = {}
        for coverage in CoverageType:
            profile = RatingProfile(
                age=35, car_model=car_model, state=state, coverage_type=coverage
            )
            ladder[coverage] = self._price(carrier, profile, year)
        return ladder

    def _price(
        self, carrier: CarrierConfig, profile: RatingProfile, year: int
    ) -> QuoteResult:
        base = carrier.base_rates[profile.coverage_type]

        driver_factor = age_factor(profile.age)
        vehicle = parse_car_model(profile.car_model, year)
        vehicle_factor = vehicle_year_factor(vehicle.year, year) * vehicle_make_factor(
            vehicle.make
        )
        state_factor = carrier.state_factor(profile.state)

        raw_premium = base * driver_factor * vehicle_factor * state_factor

        discounts = DiscountCalculator(carrier.discounts).calculate_all_discounts(
            profile
        )
        surcharges = SurchargeCalculator(
            carrier.surcharges
        ).calculate_all_surcharges(profile)

        discount_rate = min(discounts.total_rate, MAX_TOTAL_DISCOUNT)
        discount_amount = raw_premium * discount_rate
        surcharge_amount = raw_premium * surcharges.total_rate

        annual = max(
            raw_premium - discount_amount + surcharge_amount, MINIMUM_ANNUAL_PREMIUM
        )
        annual_premium = round_to_int(annual)

        return QuoteResult(
            carrier_id=carrier.carrier_id,
            carrier_name=carrier.name,
            carrier_color=carrier.color,
            exclusive=carrier.exclusive,
            rating=carrier.avg_rating,
            monthly_premium=round_to_int(Decimal(annual_premium) / 12),
            semiannual_premium=round_to_int(Decimal(annual_premium) / 2),
            annual_premium=annual_premium,
            coverage_type=profile.coverage_type,
            coverage_label=COVERAGE_LABELS[profile.coverage_type],
            deductible=profile.deductible,
            discounts_applied=discounts.labels,
            total_discount=to_percent(discount_rate),
            surcharges_applied=surcharges.labels,
            total_surcharge=to_percent(surcharges.total_rate),
            breakdown=QuoteBreakdown(
                base_premium=base,
                age_factor=round_half_up(driver_factor, "0.01"),
                vehicle_factor=round_half_up(vehicle_factor, "0.01"),
                state_factor=round_half_up(state_factor, "0.01"),
                discount_amount=round_to_int(discount_amount),
                surcharge_amount=round_to_int(surcharge_amount),
            ),
        )

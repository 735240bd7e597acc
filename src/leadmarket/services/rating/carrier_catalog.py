# LeadMarket - Lead Marketplace Core
# Copyright (C) 2025 Luiz Frias <luizf35@gmail.com>
# Form F[x] Labs
#
# This software is dual-licensed under AGPL-3.0 and Commercial License.
# For commercial licensing, contact: luizf35@gmail.com
# See LICENSE file for full terms.

"""Carrier catalog: the immutable registry of carrier rating configurations.

The catalog is built once at process start and injected into the rating
engine. Tables are illustrative, not regulatory filings.
"""

from collections.abc import Iterable
from decimal import Decimal
from functools import lru_cache

from beartype import beartype

from ...models.carrier import CarrierConfig, DiscountFactors, SurchargeFactors
from ...models.rating import CoverageType, Occupation

# Column order of the compact factor rows below
_DISCOUNT_ORDER = (
    "multi_policy",
    "good_driver",
    "good_student",
    "defensive",
    "anti_theft",
    "safety",
    "loyalty",
    "pay_in_full",
    "paperless",
    "military",
    "home_owner",
    "married",
    "low_mileage",
    "good_credit",
)
_SURCHARGE_ORDER = (
    "young_driver",
    "senior_driver",
    "poor_credit",
    "no_history",
    "lapse",
    "minor_violation",
    "major_violation",
    "accident",
    "dui",
    "high_mileage",
    "new_driver",
)
_STATE_ORDER = ("MI", "FL", "LA", "NY", "CA", "NJ", "TX", "PA", "OH", "NC", "ID")


@beartype
class CarrierCatalog:
    """Read-only lookup over a fixed set of carrier configurations."""

    def __init__(self, carriers: Iterable[CarrierConfig]) -> None:
        """Initialize catalog, preserving the given order for stable ranking."""
        self._carriers: tuple[CarrierConfig, ...] = tuple(carriers)
        self._by_id: dict[str, CarrierConfig] = {}
        for carrier in self._carriers:
            if carrier.carrier_id in self._by_id:
                raise ValueError(f"Duplicate carrier id: {carrier.carrier_id}")
            self._by_id[carrier.carrier_id] = carrier

    def __len__(self) -> int:
        return len(self._carriers)

    def __iter__(self):  # type: ignore[no-untyped-def]
        return iter(self._carriers)

    @property
    def carriers(self) -> tuple[CarrierConfig, ...]:
        """All carriers in catalog order, available or not."""
        return self._carriers

    def available_carriers(self) -> list[CarrierConfig]:
        """Carriers currently writing business."""
        return [c for c in self._carriers if c.available]

    def list_eligible_carriers(self, occupation: Occupation) -> list[CarrierConfig]:
        """Carriers that may quote a requester with this occupation.

        Unavailable carriers are always dropped, as are carriers restricted
        to occupations the requester does not have. An empty list is valid.
        """
        return [c for c in self._carriers if c.is_eligible(occupation)]

    def get_carrier(self, carrier_id: str) -> CarrierConfig | None:
        """Look up a carrier by id."""
        return self._by_id.get(carrier_id)


def _carrier(
    carrier_id: str,
    name: str,
    color: str,
    rating: str,
    base_rates: tuple[int, int, int, int],
    discounts: str,
    surcharges: str,
    states: str,
    *,
    exclusive: bool = False,
    eligible_occupations: frozenset[Occupation] | None = None,
) -> CarrierConfig:
    liability, collision, comprehensive, full = base_rates
    return CarrierConfig(
        carrier_id=carrier_id,
        name=name,
        color=color,
        exclusive=exclusive,
        eligible_occupations=eligible_occupations,
        avg_rating=Decimal(rating),
        base_rates={
            CoverageType.LIABILITY: Decimal(liability),
            CoverageType.COLLISION: Decimal(collision),
            CoverageType.COMPREHENSIVE: Decimal(comprehensive),
            CoverageType.FULL: Decimal(full),
        },
        discounts=DiscountFactors(
            **dict(zip(_DISCOUNT_ORDER, map(Decimal, discounts.split()), strict=True))
        ),
        surcharges=SurchargeFactors(
            **dict(zip(_SURCHARGE_ORDER, map(Decimal, surcharges.split()), strict=True))
        ),
        state_multipliers=dict(
            zip(_STATE_ORDER, map(Decimal, states.split()), strict=True)
        ),
    )


@beartype
def build_default_catalog() -> CarrierCatalog:
    """Build the ten-carrier illustrative catalog."""
    return CarrierCatalog(
        [
            _carrier(
                "state_farm", "State Farm", "#E31837", "4.5", (480, 720, 840, 1440),
                discounts="0.20 0.15 0.10 0.05 0.03 0.05 0.10 0.05 0.02 0.05 0.05 0.05 0.08 0.10",
                surcharges="0.85 0.15 0.35 0.20 0.15 0.15 0.40 0.45 0.90 0.10 0.25",
                states="1.80 1.40 1.35 1.30 1.25 1.25 1.15 1.10 0.90 0.90 0.85",
            ),
            _carrier(
                "progressive", "Progressive", "#0077C8", "4.3", (420, 660, 780, 1320),
                discounts="0.15 0.18 0.08 0.05 0.05 0.07 0.08 0.07 0.03 0.03 0.03 0.04 0.12 0.12",
                surcharges="0.75 0.12 0.30 0.18 0.12 0.12 0.35 0.40 0.85 0.08 0.22",
                states="1.75 1.38 1.32 1.28 1.22 1.22 1.12 1.08 0.88 0.88 0.83",
            ),
            # Direct writer
            _carrier(
                "geico", "GEICO", "#007A33", "4.4", (390, 600, 720, 1200),
                discounts="0.25 0.22 0.15 0.08 0.05 0.05 0.15 0.08 0.05 0.15 0.05 0.05 0.10 0.08",
                surcharges="0.70 0.10 0.25 0.15 0.10 0.10 0.30 0.35 0.80 0.06 0.20",
                states="1.70 1.35 1.28 1.25 1.20 1.20 1.10 1.05 0.85 0.85 0.80",
                exclusive=True,
            ),
            _carrier(
                "allstate", "Allstate", "#0033A0", "4.2", (540, 780, 900, 1560),
                discounts="0.25 0.20 0.12 0.10 0.05 0.08 0.12 0.05 0.03 0.05 0.08 0.06 0.10 0.15",
                surcharges="0.90 0.18 0.40 0.22 0.18 0.18 0.45 0.50 0.95 0.12 0.28",
                states="1.85 1.42 1.38 1.32 1.28 1.28 1.18 1.12 0.92 0.92 0.88",
            ),
            _carrier(
                "liberty_mutual", "Liberty Mutual", "#F5B400", "4.1", (510, 750, 870, 1500),
                discounts="0.18 0.12 0.08 0.05 0.10 0.10 0.10 0.05 0.03 0.08 0.10 0.05 0.08 0.08",
                surcharges="0.82 0.14 0.32 0.18 0.14 0.14 0.38 0.42 0.88 0.10 0.24",
                states="1.78 1.40 1.34 1.30 1.24 1.24 1.14 1.10 0.90 0.90 0.85",
            ),
            _carrier(
                "nationwide", "Nationwide", "#0047BB", "4.3", (470, 710, 830, 1420),
                discounts="0.20 0.15 0.10 0.08 0.05 0.06 0.12 0.06 0.03 0.05 0.06 0.05 0.10 0.10",
                surcharges="0.80 0.12 0.30 0.18 0.12 0.12 0.35 0.40 0.85 0.08 0.22",
                states="1.76 1.38 1.32 1.28 1.22 1.22 1.12 1.08 0.88 0.88 0.83",
            ),
            _carrier(
                "farmers", "Farmers", "#ED1C24", "4.0", (530, 770, 890, 1540),
                discounts="0.22 0.18 0.12 0.10 0.08 0.08 0.15 0.05 0.02 0.05 0.08 0.05 0.08 0.12",
                surcharges="0.88 0.16 0.38 0.20 0.16 0.16 0.42 0.48 0.92 0.10 0.26",
                states="1.82 1.42 1.36 1.30 1.26 1.26 1.16 1.10 0.90 0.90 0.86",
            ),
            # Military members and their families only
            _carrier(
                "usaa", "USAA", "#1C3F6E", "4.8", (360, 540, 660, 1080),
                discounts="0.20 0.20 0.15 0.10 0.08 0.08 0.18 0.08 0.05 0.25 0.08 0.08 0.12 0.12",
                surcharges="0.60 0.08 0.20 0.12 0.08 0.08 0.25 0.30 0.70 0.05 0.15",
                states="1.65 1.30 1.25 1.22 1.18 1.18 1.08 1.02 0.82 0.82 0.78",
                exclusive=True,
                eligible_occupations=frozenset({Occupation.MILITARY}),
            ),
            _carrier(
                "travelers", "Travelers", "#CC0000", "4.2", (490, 730, 850, 1460),
                discounts="0.18 0.15 0.08 0.06 0.05 0.06 0.10 0.05 0.02 0.05 0.06 0.05 0.08 0.10",
                surcharges="0.82 0.14 0.32 0.18 0.14 0.14 0.38 0.42 0.88 0.10 0.24",
                states="1.78 1.40 1.34 1.30 1.24 1.24 1.14 1.10 0.90 0.90 0.85",
            ),
            _carrier(
                "american_family", "American Family", "#00529B", "4.1", (460, 700, 820, 1400),
                discounts="0.20 0.15 0.12 0.08 0.05 0.05 0.12 0.05 0.03 0.05 0.05 0.05 0.10 0.10",
                surcharges="0.78 0.12 0.28 0.16 0.12 0.12 0.34 0.38 0.82 0.08 0.20",
                states="1.74 1.36 1.30 1.26 1.20 1.20 1.10 1.06 0.86 0.86 0.82",
            ),
        ]
    )


@lru_cache(maxsize=1)
def get_carrier_catalog() -> CarrierCatalog:
    """Process-wide default catalog."""
    return build_default_catalog()

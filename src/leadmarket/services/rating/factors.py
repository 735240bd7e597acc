# LeadMarket - Lead Marketplace Core
# Copyright (C) 2025 Luiz Frias <luizf35@gmail.com>
# Form F[x] Labs
#
# This software is dual-licensed under AGPL-3.0 and Commercial License.
# For commercial licensing, contact: luizf35@gmail.com
# See LICENSE file for full terms.

"""Multiplicative rating factors shared by every carrier.

Band boundaries and multipliers are part of the pricing contract; they are
not tunables.
"""

from decimal import ROUND_HALF_UP, Decimal

from beartype import beartype

# (exclusive upper age bound, factor); ages at or above the last bound use
# _AGE_FACTOR_MAX
_AGE_BANDS: tuple[tuple[int, Decimal], ...] = (
    (18, Decimal("3.00")),
    (20, Decimal("2.50")),
    (22, Decimal("2.00")),
    (25, Decimal("1.60")),
    (30, Decimal("1.15")),
    (40, Decimal("1.00")),
    (50, Decimal("0.95")),
    (60, Decimal("0.92")),
    (65, Decimal("0.95")),
    (70, Decimal("1.00")),
    (75, Decimal("1.10")),
)
_AGE_FACTOR_MAX = Decimal("1.25")

# (inclusive max vehicle age in years, factor); older vehicles use
# _VEHICLE_YEAR_FACTOR_MIN
_VEHICLE_AGE_BANDS: tuple[tuple[int, Decimal], ...] = (
    (0, Decimal("1.50")),
    (1, Decimal("1.40")),
    (2, Decimal("1.30")),
    (3, Decimal("1.20")),
    (5, Decimal("1.10")),
    (8, Decimal("1.00")),
    (10, Decimal("0.92")),
    (15, Decimal("0.85")),
)
_VEHICLE_YEAR_FACTOR_MIN = Decimal("0.75")

VEHICLE_MAKE_FACTORS: dict[str, Decimal] = {
    # Luxury and performance
    "bmw": Decimal("1.35"),
    "mercedes": Decimal("1.40"),
    "audi": Decimal("1.30"),
    "lexus": Decimal("1.25"),
    "porsche": Decimal("1.60"),
    "tesla": Decimal("1.45"),
    "jaguar": Decimal("1.35"),
    "land rover": Decimal("1.30"),
    "infiniti": Decimal("1.25"),
    "acura": Decimal("1.20"),
    "corvette": Decimal("1.50"),
    "mustang": Decimal("1.20"),
    "camaro": Decimal("1.25"),
    "challenger": Decimal("1.20"),
    "charger": Decimal("1.18"),
    # Mainstream and economy
    "toyota": Decimal("0.90"),
    "honda": Decimal("0.90"),
    "ford": Decimal("1.00"),
    "chevrolet": Decimal("1.00"),
    "hyundai": Decimal("0.95"),
    "kia": Decimal("0.95"),
    "nissan": Decimal("0.95"),
    "mazda": Decimal("0.95"),
    "subaru": Decimal("1.00"),
    "volkswagen": Decimal("1.05"),
    "jeep": Decimal("1.05"),
    "ram": Decimal("1.05"),
    "gmc": Decimal("1.05"),
    "buick": Decimal("0.95"),
    "chrysler": Decimal("1.00"),
}
DEFAULT_MAKE_FACTOR = Decimal("1.00")


@beartype
def age_factor(age: int) -> Decimal:
    """Driver age multiplier (U-shaped: young and senior drivers cost more)."""
    for upper_bound, factor in _AGE_BANDS:
        if age < upper_bound:
            return factor
    return _AGE_FACTOR_MAX


@beartype
def vehicle_year_factor(model_year: int, current_year: int) -> Decimal:
    """Newer vehicles cost more to repair or replace."""
    vehicle_age = current_year - model_year
    for max_age, factor in _VEHICLE_AGE_BANDS:
        if vehicle_age <= max_age:
            return factor
    return _VEHICLE_YEAR_FACTOR_MIN


@beartype
def vehicle_make_factor(make: str) -> Decimal:
    """Make multiplier, case-insensitive, defaulting to 1.00."""
    return VEHICLE_MAKE_FACTORS.get(make.strip().lower(), DEFAULT_MAKE_FACTOR)


@beartype
def round_half_up(value: Decimal, places: str = "1") -> Decimal:
    """Round like a cashier: halves always go up (2.5 -> 3)."""
    return value.quantize(Decimal(places), rounding=ROUND_HALF_UP)


@beartype
def round_to_int(value: Decimal) -> int:
    """Round to an integer, halves up."""
    return int(round_half_up(value))


@beartype
def to_percent(fraction: Decimal) -> int:
    """Fraction to whole percent for display (0.075 -> 8)."""
    return round_to_int(fraction * 100)

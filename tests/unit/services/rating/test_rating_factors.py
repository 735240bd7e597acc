"""Unit tests for shared multiplicative rating factors."""

from decimal import Decimal

import pytest

from leadmarket.services.rating.factors import (
    DEFAULT_MAKE_FACTOR,
    age_factor,
    round_half_up,
    round_to_int,
    to_percent,
    vehicle_make_factor,
    vehicle_year_factor,
)


class TestAgeFactor:
    """Test the driver age step function."""

    @pytest.mark.parametrize(
        ("age", "expected"),
        [
            (16, "3.00"),
            (17, "3.00"),
            (18, "2.50"),
            (19, "2.50"),
            (20, "2.00"),
            (22, "1.60"),
            (24, "1.60"),
            (25, "1.15"),
            (30, "1.00"),
            (39, "1.00"),
            (40, "0.95"),
            (50, "0.92"),
            (60, "0.95"),
            (65, "1.00"),
            (70, "1.10"),
            (74, "1.10"),
            (75, "1.25"),
            (95, "1.25"),
        ],
    )
    def test_band_boundaries(self, age: int, expected: str) -> None:
        """Test each band's lower edge and interior."""
        assert age_factor(age) == Decimal(expected)


class TestVehicleFactors:
    """Test vehicle year and make factors."""

    @pytest.mark.parametrize(
        ("model_year", "expected"),
        [
            (2026, "1.50"),  # next year's model
            (2025, "1.50"),
            (2024, "1.40"),
            (2023, "1.30"),
            (2022, "1.20"),
            (2020, "1.10"),
            (2017, "1.00"),
            (2015, "0.92"),
            (2010, "0.85"),
            (2009, "0.75"),
            (1995, "0.75"),
        ],
    )
    def test_year_factor_decays_with_age(self, model_year: int, expected: str) -> None:
        """Test newer vehicles cost more."""
        assert vehicle_year_factor(model_year, 2025) == Decimal(expected)

    @pytest.mark.parametrize(
        ("make", "expected"),
        [
            ("BMW", "1.35"),
            ("  porsche ", "1.60"),
            ("Land Rover", "1.30"),
            ("Toyota", "0.90"),
            ("Kia", "0.95"),
        ],
    )
    def test_make_factor_lookup_is_case_insensitive(
        self, make: str, expected: str
    ) -> None:
        """Test make lookup trims and lower-cases."""
        assert vehicle_make_factor(make) == Decimal(expected)

    def test_unknown_make_uses_default(self) -> None:
        """Test makes missing from the table price at 1.00."""
        assert vehicle_make_factor("Yugo") == DEFAULT_MAKE_FACTOR == Decimal("1.00")
        assert vehicle_make_factor("") == DEFAULT_MAKE_FACTOR


class TestRounding:
    """Test cashier-style rounding helpers."""

    def test_halves_round_up(self) -> None:
        """Test 0.5 always rounds away from zero."""
        assert round_to_int(Decimal("2.5")) == 3
        assert round_to_int(Decimal("3.5")) == 4
        assert round_to_int(Decimal("2.49")) == 2

    def test_round_to_cents(self) -> None:
        """Test rounding to two places."""
        assert round_half_up(Decimal("0.985"), "0.01") == Decimal("0.99")

    def test_to_percent(self) -> None:
        """Test fractions render as whole percents."""
        assert to_percent(Decimal("0.15")) == 15
        assert to_percent(Decimal("0.075")) == 8
        assert to_percent(Decimal("0")) == 0

"""Unit tests for the carrier catalog and carrier configuration."""

from decimal import Decimal

import pytest
from pydantic import ValidationError

from leadmarket.models.carrier import CarrierConfig
from leadmarket.models.rating import CoverageType, Occupation
from leadmarket.services.rating import (
    CarrierCatalog,
    build_default_catalog,
    get_carrier_catalog,
)

EXPECTED_ORDER = [
    "state_farm",
    "progressive",
    "geico",
    "allstate",
    "liberty_mutual",
    "nationwide",
    "farmers",
    "usaa",
    "travelers",
    "american_family",
]


class TestDefaultCatalog:
    """Test the illustrative ten-carrier catalog."""

    def test_carriers_in_catalog_order(self) -> None:
        """Test all ten carriers load in a stable order."""
        catalog = build_default_catalog()

        assert len(catalog) == 10
        assert [c.carrier_id for c in catalog] == EXPECTED_ORDER

    def test_exclusive_flags(self) -> None:
        """Test only the direct and military writers are flagged exclusive."""
        catalog = build_default_catalog()

        exclusive = {c.carrier_id for c in catalog if c.exclusive}
        assert exclusive == {"geico", "usaa"}

    def test_every_carrier_prices_every_tier(self) -> None:
        """Test base rates exist for each coverage tier."""
        for carrier in build_default_catalog():
            assert set(carrier.base_rates) == set(CoverageType)

    def test_cached_accessor(self) -> None:
        """Test the process-wide catalog is built once."""
        assert get_carrier_catalog() is get_carrier_catalog()


class TestEligibility:
    """Test occupation-based filtering."""

    def test_military_only_carrier_filtered(self) -> None:
        """Test non-military requesters never see the military-only carrier."""
        catalog = build_default_catalog()

        for occupation in (
            Occupation.STANDARD,
            Occupation.PROFESSIONAL,
            Occupation.STUDENT,
        ):
            ids = [c.carrier_id for c in catalog.list_eligible_carriers(occupation)]
            assert "usaa" not in ids
            assert len(ids) == 9

        military = catalog.list_eligible_carriers(Occupation.MILITARY)
        assert [c.carrier_id for c in military] == EXPECTED_ORDER

    def test_unavailable_carrier_dropped(self) -> None:
        """Test carriers not writing business are skipped."""
        carriers = list(build_default_catalog())
        carriers[0] = carriers[0].model_copy(update={"available": False})
        catalog = CarrierCatalog(carriers)

        eligible = catalog.list_eligible_carriers(Occupation.MILITARY)
        assert "state_farm" not in {c.carrier_id for c in eligible}
        assert len(catalog.available_carriers()) == 9
        assert catalog.get_carrier("state_farm") is not None

    def test_empty_result_is_valid(self) -> None:
        """Test an empty catalog returns an empty list."""
        assert CarrierCatalog([]).list_eligible_carriers(Occupation.STANDARD) == []


class TestCarrierLookup:
    """Test lookups by id and state."""

    def test_get_carrier(self) -> None:
        """Test known and unknown ids."""
        catalog = build_default_catalog()

        carrier = catalog.get_carrier("progressive")
        assert carrier is not None
        assert carrier.name == "Progressive"
        assert catalog.get_carrier("acme") is None

    def test_state_factor(self) -> None:
        """Test state codes are normalized and default to 1.0."""
        state_farm = build_default_catalog().get_carrier("state_farm")
        assert state_farm is not None

        assert state_farm.state_factor("MI") == Decimal("1.80")
        assert state_farm.state_factor(" pa ") == Decimal("1.10")
        assert state_farm.state_factor("WY") == Decimal("1.0")

    def test_duplicate_ids_rejected(self) -> None:
        """Test a catalog cannot hold the same carrier twice."""
        carrier = build_default_catalog().carriers[0]

        with pytest.raises(ValueError, match="Duplicate carrier id"):
            CarrierCatalog([carrier, carrier])


class TestCarrierConfigValidation:
    """Test carrier configuration validation."""

    def _data(self) -> dict:
        return build_default_catalog().carriers[0].model_dump()

    def test_missing_base_rate_rejected(self) -> None:
        """Test every tier needs a base rate."""
        data = self._data()
        del data["base_rates"][CoverageType.FULL]

        with pytest.raises(ValidationError, match="missing base rates"):
            CarrierConfig(**data)

    def test_factor_out_of_range_rejected(self) -> None:
        """Test factor fractions are bounded to [0, 1]."""
        data = self._data()
        data["discounts"]["married"] = Decimal("1.5")

        with pytest.raises(ValidationError):
            CarrierConfig(**data)

    def test_state_keys_upper_cased(self) -> None:
        """Test state multiplier keys are normalized."""
        data = self._data()
        data["state_multipliers"] = {"tx": Decimal("1.15")}

        carrier = CarrierConfig(**data)
        assert carrier.state_multipliers == {"TX": Decimal("1.15")}

    def test_bad_color_rejected(self) -> None:
        """Test brand colors are six-digit hex."""
        data = self._data()
        data["color"] = "red"

        with pytest.raises(ValidationError):
            CarrierConfig(**data)

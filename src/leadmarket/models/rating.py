# LeadMarket - Lead Marketplace Core
# Copyright (C) 2025 Luiz Frias <luizf35@gmail.com>
# Form F[x] Labs
#
# This software is dual-licensed under AGPL-3.0 and Commercial License.
# For commercial licensing, contact: luizf35@gmail.com
# See LICENSE file for full terms.

"""Rating request and quote result models for multi-carrier comparison."""

from decimal import Decimal
from enum import Enum

from pydantic import Field, field_validator

from .base import BaseModelConfig


class CoverageType(str, Enum):
    """Coverage tier requested by the customer."""

    LIABILITY = "liability"
    COLLISION = "collision"
    COMPREHENSIVE = "comprehensive"
    FULL = "full"


COVERAGE_LABELS: dict[CoverageType, str] = {
    CoverageType.LIABILITY: "Liability Only",
    CoverageType.COLLISION: "Liability + Collision",
    CoverageType.COMPREHENSIVE: "Liability + Comprehensive",
    CoverageType.FULL: "Full Coverage",
}


class Gender(str, Enum):
    MALE = "male"
    FEMALE = "female"
    OTHER = "other"


class MaritalStatus(str, Enum):
    SINGLE = "single"
    MARRIED = "married"
    DIVORCED = "divorced"
    WIDOWED = "widowed"


class CreditTier(str, Enum):
    EXCELLENT = "excellent"
    GOOD = "good"
    FAIR = "fair"
    POOR = "poor"


class DrivingHistory(str, Enum):
    """Driving record category; at most one incident category applies."""

    CLEAN = "clean"
    MINOR_VIOLATIONS = "minor_violations"
    MAJOR_VIOLATIONS = "major_violations"
    ACCIDENTS = "accidents"
    DUI = "dui"


class Occupation(str, Enum):
    STANDARD = "standard"
    PROFESSIONAL = "professional"
    MILITARY = "military"
    STUDENT = "student"


class VehicleOwnership(str, Enum):
    OWNED = "owned"
    FINANCED = "financed"
    LEASED = "leased"


class PrimaryUse(str, Enum):
    COMMUTE = "commute"
    PLEASURE = "pleasure"
    BUSINESS = "business"


class GarageType(str, Enum):
    GARAGE = "garage"
    CARPORT = "carport"
    STREET = "street"
    PARKING_LOT = "parking_lot"


class VehicleDescriptor(BaseModelConfig):
    """Structured result of parsing a free-text "YYYY Make Model" string."""

    year: int = Field(..., description="Model year (current year when not given)")
    make: str = Field(default="", description="Vehicle make as typed")
    model: str = Field(default="", description="Remaining model text")


class RatingProfile(BaseModelConfig):
    """Driver, vehicle and coverage inputs for one quote request.

    Numeric fields are not range-checked: callers supply sane values and the
    rating engine prices whatever it is given.
    """

    # Driver
    age: int = Field(..., description="Driver age in years")
    gender: Gender = Field(default=Gender.OTHER)
    marital_status: MaritalStatus = Field(default=MaritalStatus.SINGLE)
    credit_tier: CreditTier = Field(default=CreditTier.GOOD)
    home_owner: bool = Field(default=False)
    years_licensed: int = Field(default=10)
    driving_history: DrivingHistory = Field(default=DrivingHistory.CLEAN)
    prior_insurance: bool = Field(default=True)
    occupation: Occupation = Field(default=Occupation.STANDARD)
    annual_mileage: int = Field(default=12000)

    # Vehicle
    car_model: str = Field(..., description='Free text, e.g. "2019 Honda Civic"')
    vehicle_ownership: VehicleOwnership = Field(default=VehicleOwnership.OWNED)
    primary_use: PrimaryUse = Field(default=PrimaryUse.COMMUTE)
    garage_type: GarageType = Field(default=GarageType.GARAGE)
    anti_theft: bool = Field(default=False)
    safety_features: bool = Field(default=True)

    # Coverage
    coverage_type: CoverageType = Field(default=CoverageType.FULL)
    deductible: int = Field(default=500, description="250, 500, 1000 or 2000")

    # Location
    state: str = Field(..., description="Two-letter state code")


class QuoteBreakdown(BaseModelConfig):
    """Multiplicative factors and dollar adjustments behind one quote."""

    base_premium: Decimal = Field(..., ge=Decimal("0"))
    age_factor: Decimal = Field(..., description="Rounded to 0.01")
    vehicle_factor: Decimal = Field(..., description="Year factor x make factor")
    state_factor: Decimal = Field(..., description="Carrier state multiplier")
    discount_amount: int = Field(..., ge=0, description="Whole dollars")
    surcharge_amount: int = Field(..., ge=0, description="Whole dollars")


class QuoteResult(BaseModelConfig):
    """Priced quote from one carrier."""

    carrier_id: str
    carrier_name: str
    carrier_color: str
    exclusive: bool
    rating: Decimal
    monthly_premium: int
    semiannual_premium: int
    annual_premium: int = Field(..., ge=300)
    coverage_type: CoverageType
    coverage_label: str
    deductible: int
    discounts_applied: list[str] = Field(default_factory=list)
    total_discount: int = Field(..., ge=0, le=50, description="Percent, capped")
    surcharges_applied: list[str] = Field(default_factory=list)
    total_surcharge: int = Field(..., ge=0, description="Percent, uncapped")
    breakdown: QuoteBreakdown

    @field_validator("carrier_color")
    @classmethod
    def validate_color(cls, v: str) -> str:
        """Brand colors are hex strings."""
        if not v.startswith("#"):
            raise ValueError(f"Carrier color must be a hex string, got {v!r}")
        return v

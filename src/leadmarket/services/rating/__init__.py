# LeadMarket - Lead Marketplace Core
# Copyright (C) 2025 Luiz Frias <luizf35@gmail.com>
# Form F[x] Labs
#
# This software is dual-licensed under AGPL-3.0 and Commercial License.
# For commercial licensing, contact: luizf35@gmail.com
# See LICENSE file for full terms.

"""Multi-carrier rating services."""

from .carrier_catalog import CarrierCatalog, build_default_catalog, get_carrier_catalog
from .discount_calculator import DiscountCalculator
from .rating_engine import RatingEngine
from .surcharge_calculator import SurchargeCalculator
from .vehicle import parse_car_model

__all__ = [
    "CarrierCatalog",
    "DiscountCalculator",
    "RatingEngine",
    "SurchargeCalculator",
    "build_default_catalog",
    "get_carrier_catalog",
    "parse_car_model",
]

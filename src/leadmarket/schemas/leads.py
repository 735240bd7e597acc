# LeadMarket - Lead Marketplace Core
# Copyright (C) 2025 Luiz Frias <luizf35@gmail.com>
# Form F[x] Labs
#
# This software is dual-licensed under AGPL-3.0 and Commercial License.
# For commercial licensing, contact: luizf35@gmail.com
# See LICENSE file for full terms.

"""Lead cap status payloads."""

from pydantic import BaseModel, ConfigDict, Field

__all__ = ["CapStatus"]


class CapStatus(BaseModel):
    """Lead cap usage of one connection at a point in time."""

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
        validate_assignment=True,
        str_strip_whitespace=True,
        validate_default=True,
    )

    weekly_count: int = Field(..., ge=0, description="Leads since Monday 00:00")
    monthly_count: int = Field(..., ge=0, description="Leads since the 1st")
    weekly_limit: int | None = Field(default=None, ge=1)
    monthly_limit: int | None = Field(default=None, ge=1)
    weekly_cap_reached: bool = Field(default=False)
    monthly_cap_reached: bool = Field(default=False)
    weekly_remaining: int | None = Field(default=None, ge=0)
    monthly_remaining: int | None = Field(default=None, ge=0)
    can_submit_lead: bool = Field(
        default=True, description="False only when a reached cap is enforced"
    )
    message: str | None = Field(default=None)

    @property
    def is_unlimited(self) -> bool:
        return self.weekly_limit is None and self.monthly_limit is None

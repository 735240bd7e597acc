# LeadMarket - Lead Marketplace Core
# Copyright (C) 2025 Luiz Frias <luizf35@gmail.com>
# Form F[x] Labs
#
# This software is dual-licensed under AGPL-3.0 and Commercial License.
# For commercial licensing, contact: luizf35@gmail.com
# See LICENSE file for full terms.

"""Base Pydantic model configuration for all domain models.

Every domain object in LeadMarket is immutable: connection and lead state
changes produce a new, revalidated snapshot rather than mutating in place.
"""

from datetime import datetime

from beartype import beartype
from pydantic import BaseModel, ConfigDict, Field


@beartype
class BaseModelConfig(BaseModel):
    """Base model with strict configuration for all domain entities.

    Enforces:
    - Immutability (frozen=True)
    - No extra fields allowed (extra="forbid")
    - Automatic whitespace stripping
    """

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
        validate_assignment=True,
        str_strip_whitespace=True,
        validate_default=True,
    )


@beartype
class TimestampedModel(BaseModelConfig):
    """Base model with a creation timestamp."""

    created_at: datetime = Field(
        ..., description="Timestamp when the entity was created"
    )

# LeadMarket - Lead Marketplace Core
# Copyright (C) 2025 Luiz Frias <luizf35@gmail.com>
# Form F[x] Labs
#
# This software is dual-licensed under AGPL-3.0 and Commercial License.
# For commercial licensing, contact: luizf35@gmail.com
# See LICENSE file for full terms.

"""Request and response schemas for the marketplace API."""

from typing import Literal
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, model_validator

from ..models.connection import MAX_NOTE_LENGTH, ContractTerms
from ..models.lead import LeadStatus
from .leads import CapStatus

__all__ = [
    "APIInfo",
    "CapStatusResponse",
    "ConnectionAction",
    "ConnectionActionRequest",
    "ConnectionCreateRequest",
    "LeadStatusUpdateRequest",
]

_STRICT = ConfigDict(
    frozen=True,
    extra="forbid",
    validate_assignment=True,
    str_strip_whitespace=True,
    validate_default=True,
)

ConnectionAction = Literal[
    "set_terms", "accept", "decline", "reject", "terminate", "update_terms"
]

_ACTIONS_WITH_TERMS = frozenset({"set_terms", "update_terms"})


class ConnectionCreateRequest(BaseModel):
    """Open a connection with a counterparty.

    Providers send a request to a buyer; buyers send an invitation, with
    terms or with the default terms, to a provider.
    """

    model_config = _STRICT

    counterparty_id: UUID = Field(..., description="Buyer or provider to connect to")
    message: str | None = Field(default=None, max_length=MAX_NOTE_LENGTH)
    terms: ContractTerms | None = Field(
        default=None, description="Buyer invitations only"
    )


class ConnectionActionRequest(BaseModel):
    """One state-machine action on an existing connection."""

    model_config = _STRICT

    action: ConnectionAction
    terms: ContractTerms | None = Field(default=None)
    reason: str | None = Field(default=None, max_length=MAX_NOTE_LENGTH)

    @model_validator(mode="after")
    def validate_terms_presence(self) -> "ConnectionActionRequest":
        """Terms travel with set_terms and update_terms and nothing else."""
        if self.action in _ACTIONS_WITH_TERMS and self.terms is None:
            raise ValueError(f"Action {self.action} requires terms")
        if self.action not in _ACTIONS_WITH_TERMS and self.terms is not None:
            raise ValueError(f"Action {self.action} does not take terms")
        return self


class LeadStatusUpdateRequest(BaseModel):
    model_config = _STRICT

    status: LeadStatus


class CapStatusResponse(BaseModel):
    """Cap usage plus its one-line summary."""

    model_config = _STRICT

    status: CapStatus
    summary: str = Field(..., description='e.g. "3/5 weekly • 10/20 monthly"')


class APIInfo(BaseModel):
    """API information response."""

    model_config = _STRICT

    name: str = Field(..., description="API name")
    version: str = Field(..., description="API version")
    status: str = Field(..., description="API status")
    environment: str = Field(..., description="Environment name")

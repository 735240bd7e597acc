# LeadMarket - Lead Marketplace Core
# Copyright (C) 2025 Luiz Frias <luizf35@gmail.com>
# Form F[x] Labs
#
# This software is dual-licensed under AGPL-3.0 and Commercial License.
# For commercial licensing, contact: luizf35@gmail.com
# See LICENSE file for full terms.

"""Typed refusal payloads returned inside ``Err`` by marketplace services.

Every error carries a machine-readable ``code`` the HTTP layer maps to a
status, and a human-readable ``message``.
"""

from typing import Literal
from uuid import UUID

from pydantic import Field

from ..models.base import BaseModelConfig
from ..models.connection import ConnectionStatus, Role
from ..models.lead import LeadStatus

__all__ = [
    "CapReached",
    "LifecycleError",
    "ConnectionExists",
    "ConnectionNotFound",
    "ExclusivityConflict",
    "InvalidInput",
    "InvalidTerms",
    "InvalidTransition",
    "LeadNotFound",
    "LedgerError",
    "NotAuthorized",
    "ServiceError",
    "StaleWrite",
]


class ServiceError(BaseModelConfig):
    """Base payload for an expected refusal."""

    code: str
    message: str = Field(..., min_length=1)


class ConnectionNotFound(ServiceError):
    code: Literal["connection_not_found"] = "connection_not_found"
    connection_id: UUID


class LeadNotFound(ServiceError):
    code: Literal["lead_not_found"] = "lead_not_found"
    lead_id: UUID


class NotAuthorized(ServiceError):
    """The caller is not the party allowed to perform the operation."""

    code: Literal["not_authorized"] = "not_authorized"
    role: Role


class InvalidTransition(ServiceError):
    """The operation is not legal from the current status."""

    code: Literal["invalid_transition"] = "invalid_transition"
    operation: str
    current_status: ConnectionStatus | LeadStatus


class ConnectionExists(ServiceError):
    """A non-terminal connection already exists for the provider/buyer pair."""

    code: Literal["connection_exists"] = "connection_exists"
    existing_id: UUID
    existing_status: ConnectionStatus


class ExclusivityConflict(ServiceError):
    code: Literal["exclusivity_conflict"] = "exclusivity_conflict"
    conflicting_id: UUID


class InvalidTerms(ServiceError):
    """Terms fall outside the deployment's fair-market bounds."""

    code: Literal["invalid_terms"] = "invalid_terms"


class InvalidInput(ServiceError):
    """A free-text field is out of bounds."""

    code: Literal["invalid_input"] = "invalid_input"
    field_name: str


class CapReached(ServiceError):
    """A weekly or monthly lead cap refused the submission."""

    code: Literal["cap_reached"] = "cap_reached"
    limit_type: Literal["weekly", "monthly"]
    limit: int = Field(..., ge=1)
    count: int = Field(..., ge=0)


class StaleWrite(ServiceError):
    """The stored snapshot moved on since it was read."""

    code: Literal["stale_write"] = "stale_write"
    expected_version: int
    actual_version: int


LifecycleError = (
    ConnectionNotFound
    | NotAuthorized
    | InvalidTransition
    | ConnectionExists
    | ExclusivityConflict
    | InvalidTerms
    | InvalidInput
    | StaleWrite
)

LedgerError = (
    ConnectionNotFound
    | LeadNotFound
    | NotAuthorized
    | InvalidTransition
    | CapReached
    | StaleWrite
)

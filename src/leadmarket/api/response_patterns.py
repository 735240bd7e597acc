# LeadMarket - Lead Marketplace Core
# Copyright (C) 2025 Luiz Frias <luizf35@gmail.com>
# Form F[x] Labs
#
# This software is dual-licensed under AGPL-3.0 and Commercial License.
# For commercial licensing, contact: luizf35@gmail.com
# See LICENSE file for full terms.

"""Result[T, E] to HTTP semantics for the marketplace API."""

from typing import Any, TypeVar

from beartype import beartype
from fastapi import HTTPException, status
from pydantic import BaseModel, ConfigDict, Field

from ..core.result_types import Result
from ..services.errors import ServiceError

T = TypeVar("T")

# Refusal code -> HTTP status
ERROR_STATUS_CODES: dict[str, int] = {
    "connection_not_found": status.HTTP_404_NOT_FOUND,
    "lead_not_found": status.HTTP_404_NOT_FOUND,
    "not_authorized": status.HTTP_403_FORBIDDEN,
    "invalid_transition": status.HTTP_409_CONFLICT,
    "connection_exists": status.HTTP_409_CONFLICT,
    "exclusivity_conflict": status.HTTP_409_CONFLICT,
    "stale_write": status.HTTP_409_CONFLICT,
    "invalid_terms": 422,
    "invalid_input": 422,
    "cap_reached": status.HTTP_429_TOO_MANY_REQUESTS,
}


class ErrorResponse(BaseModel):
    """Standardized error body for business refusals."""

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
        validate_assignment=True,
        str_strip_whitespace=True,
        validate_default=True,
    )

    error: str = Field(..., description="Human-readable error message")
    error_code: str = Field(..., description="Machine-readable error code")
    details: dict[str, Any] = Field(
        default_factory=dict, description="Additional error context"
    )


@beartype
def map_error_to_status(error: ServiceError) -> int:
    """HTTP status for a refusal, 422 for anything unmapped."""
    return ERROR_STATUS_CODES.get(error.code, 422)


@beartype
def error_response(error: ServiceError) -> ErrorResponse:
    details = error.model_dump(mode="json", exclude={"code", "message"})
    return ErrorResponse(error=error.message, error_code=error.code, details=details)


def unwrap_or_raise(result: Result[T, ServiceError]) -> T:
    """Return the Ok value or raise the HTTPException matching the refusal."""
    if result.is_err():
        error = result.unwrap_err()
        raise HTTPException(
            status_code=map_error_to_status(error),
            detail=error_response(error).model_dump(mode="json"),
        )
    return result.unwrap()

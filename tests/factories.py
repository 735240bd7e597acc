"""Builders shared by unit and integration tests."""

from datetime import datetime, timedelta, timezone
from decimal import Decimal
from typing import Any

from leadmarket.models.connection import ContractTerms, LeadCaps
from leadmarket.models.lead import LeadSubmission

# Wednesday afternoon; the week started Monday 2025-06-16
FIXED_NOW = datetime(2025, 6, 18, 15, 30, tzinfo=timezone.utc)
RATING_YEAR = 2025


class FakeClock:
    """Callable clock that only moves when told to."""

    def __init__(self, now: datetime = FIXED_NOW) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs: float) -> datetime:
        self.now += timedelta(**kwargs)
        return self.now


def make_terms(
    rate: str = "50",
    weekly: int | None = None,
    monthly: int | None = None,
    pause: bool = True,
    **overrides: Any,
) -> ContractTerms:
    """Contract terms with optional caps."""
    caps = None
    if weekly is not None or monthly is not None:
        caps = LeadCaps(
            weekly_limit=weekly, monthly_limit=monthly, pause_when_cap_reached=pause
        )
    return ContractTerms(rate_per_lead=Decimal(rate), lead_caps=caps, **overrides)


def make_submission(**overrides: Any) -> LeadSubmission:
    data: dict[str, Any] = {
        "customer_name": "Jane Doe",
        "email": "jane.doe@example.com",
        "phone": "(555) 123-4567",
        "car_model": "2019 Honda Civic",
        "customer_state": "pa",
    }
    data.update(overrides)
    return LeadSubmission(**data)

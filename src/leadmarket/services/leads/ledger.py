# LeadMarket - Lead Marketplace Core
# Copyright (C) 2025 Luiz Frias <luizf35@gmail.com>
# Form F[x] Labs
#
# This software is dual-licensed under AGPL-3.0 and Commercial License.
# For commercial licensing, contact: luizf35@gmail.com
# See LICENSE file for full terms.

"""Lead ledger: cap enforcement, lead recording and connection totals.

A lead is paid for when it is submitted. The payout is fixed from the
connection's rate at that moment and the connection's running totals move
immediately, whatever the buyer later does with the lead. There is no
reversal path: a rejected lead still counts toward totals and caps.

Cap windows start at Monday 00:00 and at 00:00 on the 1st of the month in
the configured reference timezone, and are recounted from lead history on
every call, so no reset job is needed.
"""

from collections.abc import Callable
from datetime import datetime, timedelta, timezone
from typing import Literal
from uuid import UUID, uuid4
from zoneinfo import ZoneInfo

from beartype import beartype

from ...core.config import Settings, get_settings
from ...core.logging_utils import get_logger
from ...core.result_types import Err, Ok, Result
from ...models.connection import Actor, Connection, LeadCaps, Role
from ...models.lead import LEAD_STATUS_TRANSITIONS, Lead, LeadStatus, LeadSubmission
from ...schemas.leads import CapStatus
from ..connections.store import InMemoryConnectionStore
from ..errors import (
    CapReached,
    ConnectionNotFound,
    InvalidTransition,
    LeadNotFound,
    LedgerError,
    NotAuthorized,
)
from ..locks import ConnectionLocks
from .store import InMemoryLeadStore

logger = get_logger(__name__)

BOTH_CAPS_REACHED_MESSAGE = "Both weekly and monthly lead caps have been reached"


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


@beartype
def week_start(moment: datetime, tz: ZoneInfo) -> datetime:
    """Most recent Monday 00:00 in ``tz`` at or before ``moment``."""
    local = moment.astimezone(tz)
    monday = local.date() - timedelta(days=local.weekday())
    return datetime(monday.year, monday.month, monday.day, tzinfo=tz)


@beartype
def month_start(moment: datetime, tz: ZoneInfo) -> datetime:
    """00:00 on the 1st of the month in ``tz`` containing ``moment``."""
    local = moment.astimezone(tz)
    return datetime(local.year, local.month, 1, tzinfo=tz)


@beartype
def evaluate_caps(
    caps: LeadCaps | None, weekly_count: int, monthly_count: int
) -> CapStatus:
    """Compare window counts against a connection's caps.

    ``can_submit_lead`` is false only when a cap is reached and the buyer
    asked for submissions to pause; otherwise caps are advisory.
    """
    if caps is None or caps.is_unlimited:
        return CapStatus(weekly_count=weekly_count, monthly_count=monthly_count)

    weekly_reached = (
        caps.weekly_limit is not None and weekly_count >= caps.weekly_limit
    )
    monthly_reached = (
        caps.monthly_limit is not None and monthly_count >= caps.monthly_limit
    )

    message: str | None = None
    if weekly_reached and monthly_reached:
        message = BOTH_CAPS_REACHED_MESSAGE
    elif weekly_reached:
        message = (
            f"Weekly lead cap reached ({caps.weekly_limit} leads). Resets Monday."
        )
    elif monthly_reached:
        message = (
            f"Monthly lead cap reached ({caps.monthly_limit} leads). "
            "Resets next month."
        )

    return CapStatus(
        weekly_count=weekly_count,
        monthly_count=monthly_count,
        weekly_limit=caps.weekly_limit,
        monthly_limit=caps.monthly_limit,
        weekly_cap_reached=weekly_reached,
        monthly_cap_reached=monthly_reached,
        weekly_remaining=(
            max(0, caps.weekly_limit - weekly_count)
            if caps.weekly_limit is not None
            else None
        ),
        monthly_remaining=(
            max(0, caps.monthly_limit - monthly_count)
            if caps.monthly_limit is not None
            else None
        ),
        can_submit_lead=not (
            caps.pause_when_cap_reached and (weekly_reached or monthly_reached)
        ),
        message=message,
    )


@beartype
def format_cap_status(status: CapStatus) -> str:
    """Short usage line, e.g. "3/5 weekly • 10/20 monthly" or "Unlimited"."""
    parts: list[str] = []
    if status.weekly_limit is not None:
        parts.append(f"{status.weekly_count}/{status.weekly_limit} weekly")
    if status.monthly_limit is not None:
        parts.append(f"{status.monthly_count}/{status.monthly_limit} monthly")
    if not parts:
        return "Unlimited"
    return " • ".join(parts)


@beartype
class LeadLedger:
    """Record leads under active connections and keep totals consistent."""

    def __init__(
        self,
        connections: InMemoryConnectionStore,
        leads: InMemoryLeadStore,
        locks: ConnectionLocks,
        settings: Settings | None = None,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        """Initialize the ledger.

        Args:
            connections: Connection persistence, shared with the lifecycle
            leads: Lead persistence
            locks: Lock registry shared with the lifecycle
            settings: Reference timezone for cap windows
            clock: Source of submission timestamps
        """
        self._connections = connections
        self._leads = leads
        self._locks = locks
        self._settings = settings or get_settings()
        self._clock = clock

    async def submit_lead(
        self, actor: Actor, connection_id: UUID, submission: LeadSubmission
    ) -> Result[Lead, LedgerError]:
        """Record a lead and charge it to the connection.

        Checked in order: the connection exists, the caller is its provider,
        the connection is active, no enforced cap is reached. On refusal
        nothing is created and no total changes.

        Args:
            actor: Provider submitting the lead
            connection_id: Connection the lead is sent under
            submission: Customer referral data

        Returns:
            Ok with the recorded lead, or Err describing the refusal
        """
        async with self._locks.lock_for(connection_id):
            connection = await self._connections.get(connection_id)
            if connection is None:
                return Err(_not_found(connection_id))

            is_provider = actor.user_id == connection.provider_id
            if actor.role is not Role.PROVIDER or not is_provider:
                return Err(
                    NotAuthorized(
                        message="Only the connection's provider can submit leads",
                        role=actor.role,
                    )
                )

            if not connection.is_active or connection.terms is None:
                return Err(
                    InvalidTransition(
                        message=(
                            "Leads can only be submitted under an active connection, "
                            f"this one is {connection.status.value}"
                        ),
                        operation="submit_lead",
                        current_status=connection.status,
                    )
                )

            now = self._clock()
            status = await self._cap_status_at(connection, now)
            if not status.can_submit_lead:
                refusal = _cap_reached(status)
                logger.warning(
                    "Lead refused on connection %s: %s", connection_id, refusal.message
                )
                return Err(refusal)

            payout = connection.terms.rate_per_lead
            lead = Lead(
                **submission.model_dump(exclude={"selected_quote"}),
                selected_quote=submission.selected_quote,
                id=uuid4(),
                connection_id=connection.id,
                provider_id=connection.provider_id,
                buyer_id=connection.buyer_id,
                payout=payout,
                submitted_at=now,
            )
            updated = Connection.model_validate(
                connection.model_dump()
                | {
                    "total_leads": connection.total_leads + 1,
                    "total_paid": connection.total_paid + payout,
                    "last_lead_at": now,
                    "version": connection.version + 1,
                }
            )
            saved = await self._connections.save(updated)
            if saved.is_err():
                return Err(saved.unwrap_err())
            await self._leads.save(lead)

        if status.message is not None:
            logger.info(
                "Connection %s over cap (advisory): %s", connection_id, status.message
            )
        logger.info(
            "Lead %s submitted on connection %s, payout %s",
            lead.id,
            connection_id,
            payout,
        )
        return Ok(lead)

    async def cap_status(self, connection: Connection) -> CapStatus:
        """Current cap usage for a connection."""
        return await self._cap_status_at(connection, self._clock())

    async def update_lead_status(
        self, actor: Actor, lead_id: UUID, status: LeadStatus
    ) -> Result[Lead, LedgerError]:
        """Buyer records what happened to a lead.

        Payout and connection totals are untouched: leads are paid per
        submission, not per outcome.
        """
        lead = await self._leads.get(lead_id)
        if lead is None:
            return Err(
                LeadNotFound(message=f"Lead {lead_id} not found", lead_id=lead_id)
            )

        async with self._locks.lock_for(lead.connection_id):
            lead = await self._leads.get(lead_id)
            if lead is None:
                return Err(
                    LeadNotFound(message=f"Lead {lead_id} not found", lead_id=lead_id)
                )

            if actor.role is not Role.BUYER or actor.user_id != lead.buyer_id:
                return Err(
                    NotAuthorized(
                        message="Only the buyer can update a lead's status",
                        role=actor.role,
                    )
                )

            if status not in LEAD_STATUS_TRANSITIONS[lead.status]:
                return Err(
                    InvalidTransition(
                        message=(
                            f"Cannot move a {lead.status.value} lead to {status.value}"
                        ),
                        operation="update_lead_status",
                        current_status=lead.status,
                    )
                )

            now = self._clock()
            changes: dict[str, object] = {"status": status}
            if status is LeadStatus.CLAIMED:
                changes["claimed_at"] = now
            else:
                changes["closed_at"] = now
            updated = await self._leads.save(
                Lead.model_validate(lead.model_dump() | changes)
            )

        logger.info("Lead %s moved to %s", lead_id, status.value)
        return Ok(updated)

    async def list_leads(
        self, actor: Actor, connection_id: UUID
    ) -> Result[list[Lead], LedgerError]:
        """Leads of a connection, newest first, for either party or an admin."""
        connection = await self._connections.get(connection_id)
        if connection is None:
            return Err(_not_found(connection_id))
        if actor.role is not Role.ADMIN and not connection.involves(actor.user_id):
            return Err(
                NotAuthorized(
                    message="Not authorized for this connection", role=actor.role
                )
            )
        return Ok(await self._leads.list_for_connection(connection_id))

    async def _cap_status_at(self, connection: Connection, now: datetime) -> CapStatus:
        tz = self._settings.timezone
        weekly = await self._leads.count_since(connection.id, week_start(now, tz))
        monthly = await self._leads.count_since(connection.id, month_start(now, tz))
        caps = connection.terms.lead_caps if connection.terms is not None else None
        return evaluate_caps(caps, weekly, monthly)


def _cap_reached(status: CapStatus) -> CapReached:
    limit_type: Literal["weekly", "monthly"]
    if status.weekly_cap_reached:
        limit_type, limit, count = "weekly", status.weekly_limit, status.weekly_count
    else:
        limit_type = "monthly"
        limit, count = status.monthly_limit, status.monthly_count
    return CapReached(
        message=status.message or f"{limit_type.capitalize()} lead cap reached",
        limit_type=limit_type,
        limit=limit,
        count=count,
    )


def _not_found(connection_id: UUID) -> ConnectionNotFound:
    return ConnectionNotFound(
        message=f"Connection {connection_id} not found", connection_id=connection_id
    )

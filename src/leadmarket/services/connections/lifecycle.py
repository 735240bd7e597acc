# LeadMarket - Lead Marketplace Core
# Copyright (C) 2025 Luiz Frias <luizf35@gmail.com>
# Form F[x] Labs
#
# This software is dual-licensed under AGPL-3.0 and Commercial License.
# For commercial licensing, contact: luizf35@gmail.com
# See LICENSE file for full terms.

"""Connection lifecycle state machine.

A provider asks to send leads to a buyer (or a buyer invites a provider),
the buyer sets the contract terms, the provider accepts them, and either
party may later end the relationship::

    pending_buyer_review --set_terms--> pending_provider_accept
    pending_buyer_review --reject-----> rejected_by_buyer
    pending_provider_accept --accept--> active
    pending_provider_accept --decline-> declined_by_provider
    active --update_terms-------------> active
    active --terminate----------------> terminated

Every operation is checked in the same order: the connection exists, the
caller is the party allowed to act, the operation is legal from the
current status. Refusals come back as ``Err``; nothing is silently
ignored.
"""

from collections.abc import Callable
from datetime import datetime, timezone
from typing import Any
from uuid import UUID, uuid4

from beartype import beartype

from ...core.config import Settings, get_settings
from ...core.logging_utils import get_logger
from ...core.result_types import Err, Ok, Result
from ...models.connection import (
    MAX_NOTE_LENGTH,
    Actor,
    Connection,
    ConnectionStatus,
    ContractTerms,
    Role,
)
from ..errors import (
    ConnectionExists,
    ConnectionNotFound,
    ExclusivityConflict,
    InvalidInput,
    InvalidTerms,
    InvalidTransition,
    LifecycleError,
    NotAuthorized,
)
from ..locks import ConnectionLocks
from .store import InMemoryConnectionStore

logger = get_logger(__name__)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


@beartype
def default_terms(settings: Settings | None = None) -> ContractTerms:
    """Starting terms a buyer gets before customizing anything."""
    settings = settings or get_settings()
    return ContractTerms(
        rate_per_lead=settings.default_rate_per_lead,
        termination_notice_days=settings.default_termination_notice_days,
        agreement_version=settings.agreement_version,
    )


@beartype
class ConnectionLifecycle:
    """Drive connections through their states on behalf of explicit actors."""

    def __init__(
        self,
        store: InMemoryConnectionStore,
        locks: ConnectionLocks,
        settings: Settings | None = None,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        """Initialize the lifecycle service.

        Args:
            store: Connection persistence
            locks: Lock registry shared with the lead ledger
            settings: Rate bounds and exclusivity policy
            clock: Source of timestamps
        """
        self._store = store
        self._locks = locks
        self._settings = settings or get_settings()
        self._clock = clock

    # ------------------------------------------------------------------
    # Creation
    # ------------------------------------------------------------------

    async def request_connection(
        self, actor: Actor, buyer_id: UUID, message: str | None = None
    ) -> Result[Connection, LifecycleError]:
        """Provider asks to send leads to a buyer."""
        if actor.role is not Role.PROVIDER:
            return Err(_not_authorized(actor, "Only providers can request connections"))

        return await self._create(
            actor,
            provider_id=actor.user_id,
            buyer_id=buyer_id,
            initiator="provider",
            status=ConnectionStatus.PENDING_BUYER_REVIEW,
            terms=None,
            message=message,
        )

    async def invite_provider(
        self,
        actor: Actor,
        provider_id: UUID,
        terms: ContractTerms | None = None,
        message: str | None = None,
    ) -> Result[Connection, LifecycleError]:
        """Buyer invites a provider with terms already on the table.

        Without explicit terms the deployment's default terms are offered.
        """
        if actor.role is not Role.BUYER:
            return Err(_not_authorized(actor, "Only buyers can invite providers"))

        terms = terms or default_terms(self._settings)
        invalid = self._check_terms(terms)
        if invalid is not None:
            return Err(invalid)

        return await self._create(
            actor,
            provider_id=provider_id,
            buyer_id=actor.user_id,
            initiator="buyer",
            status=ConnectionStatus.PENDING_PROVIDER_ACCEPT,
            terms=terms,
            message=message,
        )

    # ------------------------------------------------------------------
    # Transitions
    # ------------------------------------------------------------------

    async def set_terms(
        self, actor: Actor, connection_id: UUID, terms: ContractTerms
    ) -> Result[Connection, LifecycleError]:
        """Buyer answers a provider's request with contract terms."""
        invalid = self._check_terms(terms)
        if invalid is not None:
            return Err(invalid)

        now = self._clock()
        return await self._transition(
            actor,
            connection_id,
            operation="set_terms",
            party=Role.BUYER,
            from_status=ConnectionStatus.PENDING_BUYER_REVIEW,
            changes={
                "status": ConnectionStatus.PENDING_PROVIDER_ACCEPT,
                "terms": terms,
                "terms_set_at": now,
            },
        )

    async def reject(
        self, actor: Actor, connection_id: UUID
    ) -> Result[Connection, LifecycleError]:
        """Buyer turns down a provider's request."""
        return await self._transition(
            actor,
            connection_id,
            operation="reject",
            party=Role.BUYER,
            from_status=ConnectionStatus.PENDING_BUYER_REVIEW,
            changes={"status": ConnectionStatus.REJECTED_BY_BUYER},
        )

    async def accept(
        self, actor: Actor, connection_id: UUID
    ) -> Result[Connection, LifecycleError]:
        """Provider accepts the buyer's terms; the connection goes live."""
        current = await self._store.get(connection_id)
        if current is None:
            return Err(_not_found(connection_id))

        # Accepts for one provider are serialized so the exclusivity check
        # sees every connection that went live before it
        async with self._locks.lock_for(("provider", current.provider_id)):
            result = await self._transition(
                actor,
                connection_id,
                operation="accept",
                party=Role.PROVIDER,
                from_status=ConnectionStatus.PENDING_PROVIDER_ACCEPT,
                changes={"status": ConnectionStatus.ACTIVE},
                stamp_accepted=True,
            )

        if result.is_ok():
            terms = result.unwrap().terms
            if terms is not None:
                logger.info(
                    "Connection %s live at $%s per lead, paid %s",
                    connection_id,
                    terms.rate_per_lead,
                    terms.payment_timing.label,
                )
        return result

    async def decline(
        self, actor: Actor, connection_id: UUID
    ) -> Result[Connection, LifecycleError]:
        """Provider declines the buyer's terms."""
        return await self._transition(
            actor,
            connection_id,
            operation="decline",
            party=Role.PROVIDER,
            from_status=ConnectionStatus.PENDING_PROVIDER_ACCEPT,
            changes={"status": ConnectionStatus.DECLINED_BY_PROVIDER},
        )

    async def terminate(
        self, actor: Actor, connection_id: UUID, reason: str | None = None
    ) -> Result[Connection, LifecycleError]:
        """Either party (or an admin) ends an active connection."""
        too_long = _note_too_long("reason", reason)
        if too_long is not None:
            return Err(too_long)

        return await self._transition(
            actor,
            connection_id,
            operation="terminate",
            party=None,
            from_status=ConnectionStatus.ACTIVE,
            changes={
                "status": ConnectionStatus.TERMINATED,
                "terminated_at": self._clock(),
                "terminated_by": actor.role,
                "termination_reason": reason,
            },
        )

    async def update_terms(
        self, actor: Actor, connection_id: UUID, terms: ContractTerms
    ) -> Result[Connection, LifecycleError]:
        """Buyer revises the terms of an active connection.

        Leads already submitted keep the payout fixed at their submission.
        """
        invalid = self._check_terms(terms)
        if invalid is not None:
            return Err(invalid)

        return await self._transition(
            actor,
            connection_id,
            operation="update_terms",
            party=Role.BUYER,
            from_status=ConnectionStatus.ACTIVE,
            changes={"terms": terms, "terms_updated_at": self._clock()},
        )

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    async def get_connection(
        self, actor: Actor, connection_id: UUID
    ) -> Result[Connection, LifecycleError]:
        connection = await self._store.get(connection_id)
        if connection is None:
            return Err(_not_found(connection_id))
        if actor.role is not Role.ADMIN and not connection.involves(actor.user_id):
            return Err(_not_authorized(actor, "Not authorized for this connection"))
        return Ok(connection)

    async def list_connections(
        self, actor: Actor, status: ConnectionStatus | None = None
    ) -> list[Connection]:
        """Connections visible to the actor; admins see all of them."""
        if actor.role is Role.ADMIN:
            return await self._store.list_all(status)
        connections = await self._store.list_for_user(actor.user_id, status)
        # A user id can be both provider and buyer elsewhere; show only the
        # side matching the role the caller acts in
        attr = "provider_id" if actor.role is Role.PROVIDER else "buyer_id"
        return [c for c in connections if getattr(c, attr) == actor.user_id]

    async def pending_for(self, actor: Actor) -> list[Connection]:
        """Connections waiting on the actor's decision.

        Buyers review incoming requests; providers answer offered terms.
        """
        if actor.role is Role.BUYER:
            return await self.list_connections(
                actor, ConnectionStatus.PENDING_BUYER_REVIEW
            )
        if actor.role is Role.PROVIDER:
            return await self.list_connections(
                actor, ConnectionStatus.PENDING_PROVIDER_ACCEPT
            )
        return []

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    async def _create(
        self,
        actor: Actor,
        *,
        provider_id: UUID,
        buyer_id: UUID,
        initiator: str,
        status: ConnectionStatus,
        terms: ContractTerms | None,
        message: str | None,
    ) -> Result[Connection, LifecycleError]:
        if provider_id == buyer_id:
            return Err(_not_authorized(actor, "A user cannot connect to themselves"))
        too_long = _note_too_long("message", message)
        if too_long is not None:
            return Err(too_long)

        async with self._locks.lock_for(("pair", provider_id, buyer_id)):
            existing = await self._store.find_open(provider_id, buyer_id)
            if existing is not None:
                logger.warning(
                    "Refused duplicate connection %s -> %s (existing %s)",
                    provider_id,
                    buyer_id,
                    existing.id,
                )
                return Err(
                    ConnectionExists(
                        message=(
                            f"A {existing.status.value} connection already exists "
                            "between this provider and buyer"
                        ),
                        existing_id=existing.id,
                        existing_status=existing.status,
                    )
                )

            now = self._clock()
            connection = Connection(
                id=uuid4(),
                provider_id=provider_id,
                buyer_id=buyer_id,
                initiator=initiator,
                message=message,
                status=status,
                terms=terms,
                terms_set_at=now if terms is not None else None,
                created_at=now,
            )
            result = await self._store.save(connection)

        if result.is_ok():
            logger.info(
                "Connection %s created by %s (%s)",
                connection.id,
                initiator,
                status.value,
            )
        return result

    async def _transition(
        self,
        actor: Actor,
        connection_id: UUID,
        *,
        operation: str,
        party: Role | None,
        from_status: ConnectionStatus,
        changes: dict[str, Any],
        stamp_accepted: bool = False,
    ) -> Result[Connection, LifecycleError]:
        async with self._locks.lock_for(connection_id):
            connection = await self._store.get(connection_id)
            if connection is None:
                return Err(_not_found(connection_id))

            denied = _authorize(actor, connection, party, operation)
            if denied is not None:
                logger.warning(
                    "Refused %s on %s: %s", operation, connection_id, denied.message
                )
                return Err(denied)

            if connection.status is not from_status:
                logger.warning(
                    "Refused %s on %s: status is %s",
                    operation,
                    connection_id,
                    connection.status.value,
                )
                return Err(
                    InvalidTransition(
                        message=(
                            f"Cannot {operation} a connection that is "
                            f"{connection.status.value}"
                        ),
                        operation=operation,
                        current_status=connection.status,
                    )
                )

            if stamp_accepted:
                conflict = await self._exclusivity_conflict(connection)
                if conflict is not None:
                    logger.warning(
                        "Refused accept on %s: %s", connection_id, conflict.message
                    )
                    return Err(conflict)
                changes = changes | {"accepted_at": self._clock()}

            updated = Connection.model_validate(
                connection.model_dump()
                | changes
                | {"version": connection.version + 1}
            )
            result = await self._store.save(updated)

        if result.is_ok():
            logger.info(
                "Connection %s: %s by %s -> %s",
                connection_id,
                operation,
                actor.role.value,
                updated.status.value,
            )
        return result

    async def _exclusivity_conflict(
        self, connection: Connection
    ) -> ExclusivityConflict | None:
        if not self._settings.enforce_exclusivity:
            return None
        exclusive = connection.terms is not None and connection.terms.exclusivity
        for other in await self._store.active_for_provider(connection.provider_id):
            if other.id == connection.id:
                continue
            if exclusive or (other.terms is not None and other.terms.exclusivity):
                return ExclusivityConflict(
                    message=(
                        "Provider already has an active connection and exclusive "
                        "terms forbid another"
                    ),
                    conflicting_id=other.id,
                )
        return None

    def _check_terms(self, terms: ContractTerms) -> InvalidTerms | None:
        low = self._settings.min_rate_per_lead
        high = self._settings.max_rate_per_lead
        if not low <= terms.rate_per_lead <= high:
            return InvalidTerms(
                message=(
                    f"Rate per lead must be between ${low} and ${high}, "
                    f"got ${terms.rate_per_lead}"
                )
            )
        return None


def _authorize(
    actor: Actor, connection: Connection, party: Role | None, operation: str
) -> NotAuthorized | None:
    """Check the actor may perform ``operation``.

    ``party`` names the only role allowed; ``None`` means either party.
    Admins may only act where either party may.
    """
    if actor.role is Role.ADMIN:
        if party is None:
            return None
        return _not_authorized(actor, f"Only the {party.value} can {operation}")

    if not connection.involves(actor.user_id):
        return _not_authorized(actor, "Not authorized for this connection")

    if party is not None and actor.role is not party:
        return _not_authorized(actor, f"Only the {party.value} can {operation}")

    if actor.role is Role.PROVIDER:
        own_id = connection.provider_id
    else:
        own_id = connection.buyer_id
    if own_id != actor.user_id:
        return _not_authorized(actor, f"Not the {actor.role.value} on this connection")
    return None


def _not_found(connection_id: UUID) -> ConnectionNotFound:
    return ConnectionNotFound(
        message=f"Connection {connection_id} not found", connection_id=connection_id
    )


def _not_authorized(actor: Actor, message: str) -> NotAuthorized:
    return NotAuthorized(message=message, role=actor.role)


def _note_too_long(field_name: str, value: str | None) -> InvalidInput | None:
    if value is None or len(value.strip()) <= MAX_NOTE_LENGTH:
        return None
    return InvalidInput(
        message=(
            f"{field_name.capitalize()} must be at most "
            f"{MAX_NOTE_LENGTH} characters"
        ),
        field_name=field_name,
    )

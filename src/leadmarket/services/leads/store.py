# LeadMarket - Lead Marketplace Core
# Copyright (C) 2025 Luiz Frias <luizf35@gmail.com>
# Form F[x] Labs
#
# This software is dual-licensed under AGPL-3.0 and Commercial License.
# For commercial licensing, contact: luizf35@gmail.com
# See LICENSE file for full terms.

"""Lead storage.

Leads are append-only apart from the buyer's disposition. Cap windows are
counted from this history on every call rather than from stored counters.
"""

from datetime import datetime
from uuid import UUID

from beartype import beartype

from ...models.lead import Lead


@beartype
class InMemoryLeadStore:
    """Lead records keyed by id."""

    def __init__(self) -> None:
        self._leads: dict[UUID, Lead] = {}

    async def get(self, lead_id: UUID) -> Lead | None:
        return self._leads.get(lead_id)

    async def save(self, lead: Lead) -> Lead:
        self._leads[lead.id] = lead
        return lead

    async def count_since(self, connection_id: UUID, since: datetime) -> int:
        """Leads submitted under a connection at or after ``since``.

        Every lead counts regardless of its later status.
        """
        return sum(
            1
            for lead in self._leads.values()
            if lead.connection_id == connection_id and lead.submitted_at >= since
        )

    async def list_for_connection(self, connection_id: UUID) -> list[Lead]:
        """Leads of one connection, newest first."""
        leads = [
            lead for lead in self._leads.values() if lead.connection_id == connection_id
        ]
        return sorted(leads, key=lambda lead: lead.submitted_at, reverse=True)

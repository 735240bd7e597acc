# LeadMarket - Lead Marketplace Core
# Copyright (C) 2025 Luiz Frias <luizf35@gmail.com>
# Form F[x] Labs
#
# This software is dual-licensed under AGPL-3.0 and Commercial License.
# For commercial licensing, contact: luizf35@gmail.com
# See LICENSE file for full terms.

"""Connection storage.

The in-memory store stands in for the persistence collaborator. It keeps
the contract a database-backed store must honor: snapshots are written
with an optimistic version check, so a save based on an outdated read is
refused instead of silently overwriting a concurrent change.
"""

from uuid import UUID

from beartype import beartype

from ...core.result_types import Err, Ok, Result
from ...models.connection import Connection, ConnectionStatus
from ..errors import StaleWrite


@beartype
class InMemoryConnectionStore:
    """Connection snapshots keyed by id."""

    def __init__(self) -> None:
        self._connections: dict[UUID, Connection] = {}

    async def get(self, connection_id: UUID) -> Connection | None:
        return self._connections.get(connection_id)

    async def save(self, connection: Connection) -> Result[Connection, StaleWrite]:
        """Insert a new snapshot or replace the one it was derived from.

        A new connection must carry version 1; an update must carry the
        stored version plus one.
        """
        stored = self._connections.get(connection.id)
        expected = 1 if stored is None else stored.version + 1
        if connection.version != expected:
            return Err(
                StaleWrite(
                    message=f"Connection {connection.id} was modified concurrently",
                    expected_version=expected,
                    actual_version=connection.version,
                )
            )
        self._connections[connection.id] = connection
        return Ok(connection)

    async def find_open(self, provider_id: UUID, buyer_id: UUID) -> Connection | None:
        """The non-terminal connection between a provider and a buyer, if any."""
        for connection in self._connections.values():
            if (
                connection.provider_id == provider_id
                and connection.buyer_id == buyer_id
                and not connection.status.is_terminal
            ):
                return connection
        return None

    async def list_for_user(
        self, user_id: UUID, status: ConnectionStatus | None = None
    ) -> list[Connection]:
        """Connections the user is a party to, oldest first."""
        connections = [
            c
            for c in self._connections.values()
            if c.involves(user_id) and (status is None or c.status is status)
        ]
        return sorted(connections, key=lambda c: c.created_at)

    async def list_all(
        self, status: ConnectionStatus | None = None
    ) -> list[Connection]:
        connections = [
            c
            for c in self._connections.values()
            if status is None or c.status is status
        ]
        return sorted(connections, key=lambda c: c.created_at)

    async def active_for_provider(self, provider_id: UUID) -> list[Connection]:
        return [
            c
            for c in self._connections.values()
            if c.provider_id == provider_id and c.is_active
        ]

# LeadMarket - Lead Marketplace Core
# Copyright (C) 2025 Luiz Frias <luizf35@gmail.com>
# Form F[x] Labs
#
# This software is dual-licensed under AGPL-3.0 and Commercial License.
# For commercial licensing, contact: luizf35@gmail.com
# See LICENSE file for full terms.

"""Per-connection mutual exclusion for read-modify-write sequences."""

import asyncio
from collections.abc import Hashable
from weakref import WeakValueDictionary

from beartype import beartype


@beartype
class ConnectionLocks:
    """Registry handing out one asyncio lock per key.

    Keys are connection ids, or a (provider_id, buyer_id) pair while a
    connection is being created. Locks are weakly held, so a key nobody is
    waiting on costs nothing.
    """

    def __init__(self) -> None:
        self._locks: WeakValueDictionary[Hashable, asyncio.Lock] = (
            WeakValueDictionary()
        )

    def lock_for(self, key: Hashable) -> asyncio.Lock:
        """Return the lock guarding ``key``, creating it on first use."""
        lock = self._locks.get(key)
        if lock is None:
            lock = asyncio.Lock()
            self._locks[key] = lock
        return lock

    def __len__(self) -> int:
        return len(self._locks)

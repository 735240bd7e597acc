# LeadMarket - Lead Marketplace Core
# Copyright (C) 2025 Luiz Frias <luizf35@gmail.com>
# Form F[x] Labs
#
# This software is dual-licensed under AGPL-3.0 and Commercial License.
# For commercial licensing, contact: luizf35@gmail.com
# See LICENSE file for full terms.

"""Connection lifecycle between lead providers and buyers."""

from .lifecycle import ConnectionLifecycle, default_terms
from .store import InMemoryConnectionStore

__all__ = ["ConnectionLifecycle", "InMemoryConnectionStore", "default_terms"]

# LeadMarket - Lead Marketplace Core
# Copyright (C) 2025 Luiz Frias <luizf35@gmail.com>
# Form F[x] Labs
#
# This software is dual-licensed under AGPL-3.0 and Commercial License.
# For commercial licensing, contact: luizf35@gmail.com
# See LICENSE file for full terms.

"""Lead recording and cap enforcement."""

from .ledger import LeadLedger, evaluate_caps, format_cap_status, month_start, week_start
from .store import InMemoryLeadStore

__all__ = [
    "InMemoryLeadStore",
    "LeadLedger",
    "evaluate_caps",
    "format_cap_status",
    "month_start",
    "week_start",
]
